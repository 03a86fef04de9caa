"""Table header parsing and memo file discovery.

Header layout (32 bytes, little endian):
- byte 0:      version
- bytes 1-3:   last update as YY (since 1900), MM, DD
- bytes 4-7:   record count (u32)
- bytes 8-9:   header length (u16), i.e. offset of the first record
- bytes 10-11: record length (u16), including the deletion marker
- bytes 12-31: reserved
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path

from dbfdecode.errors import DBFFormatError, DBFReadError
from dbfdecode.options import ReadMode

HEADER_SIZE = 32

DBASE_III = 0x03
DBASE_III_MEMO = 0x83
DBASE_IV_MEMO = 0x8B
VISUAL_FOXPRO = 0x30
FOXPRO_MEMO = 0xF5

VERSION_LABELS: dict[int, str] = {
    DBASE_III: "dBase III",
    DBASE_III_MEMO: "dBase III + memo",
    DBASE_IV_MEMO: "dBase IV + memo",
    VISUAL_FOXPRO: "Visual FoxPro",
    FOXPRO_MEMO: "FoxPro + memo",
}
DBT_VERSIONS = {DBASE_III_MEMO, DBASE_IV_MEMO}
FPT_VERSIONS = {VISUAL_FOXPRO, FOXPRO_MEMO}


@dataclass(frozen=True)
class Header:
    version: int
    last_update: date
    record_count: int
    header_length: int
    record_length: int


def version_label(version: int) -> str:
    return VERSION_LABELS.get(version, f"unknown (0x{version:02x})")


def _last_update(yy: int, mm: int, dd: int) -> date:
    """Build the date without validating it: month 0 is December of the prior
    year and day 0 is the last day of the prior month."""
    year = yy + 1900 + (mm - 1) // 12
    month = (mm - 1) % 12 + 1
    return date(year, month, 1) + timedelta(days=dd - 1)


def parse_header(data: bytes, mode: ReadMode = ReadMode.STRICT) -> Header:
    """Decode the fixed 32-byte header; strict mode rejects unknown versions."""
    if len(data) < HEADER_SIZE:
        raise DBFReadError(f"header needs {HEADER_SIZE} bytes, got {len(data)}")
    version = data[0]
    if mode is ReadMode.STRICT and version not in VERSION_LABELS:
        raise DBFFormatError(f"unsupported dBase version: 0x{version:02x}")
    return Header(
        version=version,
        last_update=_last_update(data[1], data[2], data[3]),
        record_count=int.from_bytes(data[4:8], "little"),
        header_length=int.from_bytes(data[8:10], "little"),
        record_length=int.from_bytes(data[10:12], "little"),
    )


def memo_extensions(version: int) -> tuple[str, ...]:
    if version in DBT_VERSIONS:
        return (".dbt", ".DBT")
    if version in FPT_VERSIONS:
        return (".fpt", ".FPT")
    return ()


def find_memo_file(path: Path, version: int) -> Path | None:
    """Probe for a sibling memo file next to the table; nothing is read from it."""
    for ext in memo_extensions(version):
        candidate = path.with_suffix(ext)
        if candidate.is_file():
            return candidate
    return None


def locate_memo_file(path: Path, version: int, mode: ReadMode = ReadMode.STRICT) -> Path | None:
    """Like `find_memo_file`, but strict mode requires the .dbt of dBase memo tables.

    FoxPro tables without their .fpt are tolerated; memo fields decode as absent.
    """
    memo = find_memo_file(path, version)
    if memo is None and version in DBT_VERSIONS and mode is ReadMode.STRICT:
        raise DBFFormatError(f"memo file (.dbt) not found for {path} (strict mode)")
    return memo
