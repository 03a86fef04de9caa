"""Table handle: parsed schema plus a forward-only record cursor.

A handle is not safe for concurrent reads. `records_read` is shared state
advanced by every `read_records` call; open one handle per reader instead.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

from dbfdecode.fields import Field, read_fields, record_length_for
from dbfdecode.header import HEADER_SIZE, VERSION_LABELS, Header, locate_memo_file, parse_header
from dbfdecode.options import OpenOptions, normalize_options
from dbfdecode.record import Record, decode_record
from dbfdecode.source import ByteSource, FileSource
from dbfdecode.utils.logging import get_logger

log = get_logger(__name__)


class Table:
    def __init__(
        self,
        path: Path,
        header: Header,
        fields: list[Field],
        options: OpenOptions,
        source: ByteSource,
        memo_path: Path | None = None,
    ) -> None:
        self.path = path
        self.header = header
        self.fields: tuple[Field, ...] = tuple(fields)
        self.options = options
        self.memo_path = memo_path
        self.records_read = 0
        self._source = source

    @property
    def version(self) -> int:
        return self.header.version

    @property
    def record_count(self) -> int:
        return self.header.record_count

    @property
    def last_update(self) -> date:
        return self.header.last_update

    @property
    def header_length(self) -> int:
        return self.header.header_length

    @property
    def record_length(self) -> int:
        return self.header.record_length

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def reset(self) -> None:
        """Rewind the cursor so the next read starts at the first record."""
        self.records_read = 0

    def read_records(self, max_count: int = 0) -> list[Record]:
        """Read up to `max_count` records from the cursor; <= 0 reads everything left.

        Deleted records (unless requested) and, in loose mode, undecodable
        records are left out but still advance the cursor. Strict mode raises
        the first DBFFormatError met and abandons the batch.
        """
        remaining = self.record_count - self.records_read
        if max_count <= 0:
            max_count = remaining
        if remaining <= 0 or max_count == 0:
            return []

        count = min(max_count, remaining)
        start = self.header_length + self.records_read * self.record_length
        log.debug("reading %d record(s) from %s at offset %d", count, self.path, start)

        records: list[Record] = []
        with self._source as source:
            for _ in range(count):
                buf = source.read_at(start, self.record_length)
                if len(buf) < self.record_length:
                    log.debug("end of data at offset %d in %s", start, self.path)
                    break
                start += self.record_length
                index = self.records_read
                self.records_read += 1

                result = decode_record(buf, self.fields, self.options)
                if result.error is not None:
                    if self.options.strict:
                        raise result.error
                    log.warning("skipping record %d of %s: %s", index, self.path, result.error)
                    continue
                if result.record is not None:
                    records.append(result.record)
        return records

    def __repr__(self) -> str:
        return (
            f"Table(path={str(self.path)!r}, version=0x{self.version:02x}, "
            f"records={self.record_count}, fields={len(self.fields)})"
        )


def open_table(
    path: Path | str,
    options: OpenOptions | None = None,
    source: ByteSource | None = None,
) -> Table:
    """Parse the header and field descriptors of a table and return a handle.

    `source` replaces file access (e.g. a BytesSource); memo discovery
    still looks next to `path`.
    """
    path = Path(path)
    opts = normalize_options(options)
    source = source or FileSource(path)

    with source as src:
        header = parse_header(src.read_at(0, HEADER_SIZE), opts.read_mode)
        memo_path = locate_memo_file(path, header.version, opts.read_mode)
        fields = read_fields(src, header, opts)

    if not opts.strict:
        if header.version not in VERSION_LABELS:
            log.warning("%s: unknown version byte 0x%02x accepted", path, header.version)
        if record_length_for(fields) != header.record_length:
            log.warning(
                "%s: header record length %d differs from field total %d",
                path,
                header.record_length,
                record_length_for(fields),
            )
    if memo_path is not None:
        log.debug("%s: memo file %s", path, memo_path)
    log.debug(
        "opened %s: version 0x%02x, %d records, %d fields",
        path,
        header.version,
        header.record_count,
        len(fields),
    )
    return Table(path, header, fields, opts, source, memo_path=memo_path)
