"""Diagnostics for a table file without decoding its records.

The table is opened in loose mode so that problems strict mode would stop
at are all reported together as warnings.
"""

from __future__ import annotations

import hashlib
from dataclasses import replace
from pathlib import Path
from typing import Any

from dbfdecode.errors import DBFError, DBFFormatError
from dbfdecode.fields import record_length_for, validate_field
from dbfdecode.header import DBT_VERSIONS, VERSION_LABELS, version_label
from dbfdecode.options import OpenOptions, ReadMode, normalize_options
from dbfdecode.table import open_table


def _hash_file(path: Path, algo: str = "sha256") -> str:
    h = hashlib.new(algo)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return f"{algo}:{h.hexdigest()}"


def describe_table(path: Path, options: OpenOptions | None = None) -> dict[str, Any]:
    """Summarize header, fields and structural problems of a table."""
    result: dict[str, Any] = {
        "path": str(path),
        "exists": path.is_file(),
        "size_bytes": path.stat().st_size if path.is_file() else 0,
        "hash": None,
        "version": None,
        "version_label": None,
        "record_count": None,
        "last_update": None,
        "header_length": None,
        "record_length": None,
        "memo_path": None,
        "fields": [],
        "field_errors": [],
        "warnings": [],
    }
    if not result["exists"]:
        result["warnings"].append("file_missing")
        return result

    result["hash"] = _hash_file(path)
    opts = replace(normalize_options(options), read_mode=ReadMode.LOOSE)
    try:
        table = open_table(path, opts)
    except DBFError as exc:
        result["warnings"].append("unreadable")
        result["error"] = str(exc)
        return result

    result.update(
        version=table.version,
        version_label=version_label(table.version),
        record_count=table.record_count,
        last_update=table.last_update.isoformat(),
        header_length=table.header_length,
        record_length=table.record_length,
        memo_path=str(table.memo_path) if table.memo_path else None,
        fields=[
            {"name": f.name, "type": f.type, "size": f.size, "decimal_places": f.decimal_places}
            for f in table.fields
        ],
    )

    warnings: list[str] = result["warnings"]
    if table.version not in VERSION_LABELS:
        warnings.append("unknown_version")
    if table.version in DBT_VERSIONS and table.memo_path is None:
        warnings.append("memo_missing")
    if record_length_for(table.fields) != table.record_length:
        warnings.append("record_length_mismatch")
    names = table.field_names
    if len(set(names)) != len(names):
        warnings.append("duplicate_field_names")

    for field in table.fields:
        try:
            validate_field(field, table.version)
        except DBFFormatError as exc:
            result["field_errors"].append(str(exc))
    if result["field_errors"]:
        warnings.append("invalid_fields")

    expected_size = table.header_length + table.record_count * table.record_length
    if expected_size > result["size_bytes"]:
        warnings.append("file_truncated")
    return result
