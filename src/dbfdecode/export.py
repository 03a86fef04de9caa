"""Writers for decoded records: JSONL, Arrow IPC and CSV."""

from __future__ import annotations

import csv
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

import orjson
import pyarrow as pa

from dbfdecode.fields import Field
from dbfdecode.record import DELETED_KEY, FieldValue, Record

ARROW_TYPES: dict[str, pa.DataType] = {
    "C": pa.string(),
    "N": pa.float64(),
    "F": pa.float64(),
    "Y": pa.float64(),
    "B": pa.float64(),
    "L": pa.bool_(),
    "I": pa.int32(),
    "D": pa.timestamp("us", tz="UTC"),
    "T": pa.timestamp("us", tz="UTC"),
    "M": pa.string(),
}


def _columns(records: Sequence[Record], fields: Sequence[Field]) -> list[tuple[str, pa.DataType]]:
    columns: dict[str, pa.DataType] = {}
    for field in fields:
        if field.type in ARROW_TYPES and field.name not in columns:
            columns[field.name] = ARROW_TYPES[field.type]
    if any(DELETED_KEY in r for r in records):
        columns[DELETED_KEY] = pa.bool_()
    return list(columns.items())


def records_to_jsonl(records: Sequence[Record], path: Path, gzip_output: bool = False) -> None:
    """Write one JSON object per record; timestamps become RFC 3339 strings."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if gzip_output:
        import gzip as gzip_lib

        handle = gzip_lib.open(path, "wb")
    else:
        handle = path.open("wb")

    with handle as f:
        for record in records:
            f.write(orjson.dumps(record) + b"\n")


def records_to_arrow(records: Sequence[Record], fields: Sequence[Field], path: Path) -> None:
    """Write records to an Arrow IPC file with one typed column per field."""
    path.parent.mkdir(parents=True, exist_ok=True)
    columns = _columns(records, fields)
    schema = pa.schema(columns)
    data = {
        name: [r.get(name, False if name == DELETED_KEY else None) for r in records]
        for name, _type in columns
    }
    table = pa.table(data, schema=schema)
    with pa.OSFile(str(path), "wb") as sink:
        with pa.ipc.new_file(sink, table.schema) as writer:
            writer.write_table(table)


def _csv_value(value: FieldValue) -> object:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def records_to_csv(records: Sequence[Record], fields: Sequence[Field], path: Path) -> None:
    """Write records as CSV with a header row of field names."""
    path.parent.mkdir(parents=True, exist_ok=True)
    names = [name for name, _type in _columns(records, fields)]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=names, extrasaction="ignore")
        writer.writeheader()
        for record in records:
            writer.writerow({name: _csv_value(record.get(name)) for name in names})
