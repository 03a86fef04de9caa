from collections.abc import Callable
from pathlib import Path

from dbfdecode.diagnostics import describe_table


def test_clean_table_has_no_warnings(all_fields_path: Path):
    result = describe_table(all_fields_path)
    assert result["warnings"] == []
    assert result["version_label"] == "dBase III"
    assert result["record_count"] == 3
    assert result["last_update"] == "2024-01-01"
    assert result["hash"].startswith("sha256:")
    assert [f["name"] for f in result["fields"]][:2] == ["NAME", "AGE"]


def test_missing_file(tmp_path: Path):
    result = describe_table(tmp_path / "missing.dbf")
    assert result["warnings"] == ["file_missing"]


def test_problems_are_collected_together(
    make_table: Callable[..., bytes], write_table: Callable[..., Path]
):
    data = make_table(
        [("CODE", "C", 3), ("CODE", "L", 2)],
        [b" abcT "],
        version=0x83,
        record_count=10,
        record_length=9,
    )
    result = describe_table(write_table(data))
    assert result["warnings"] == [
        "memo_missing",
        "record_length_mismatch",
        "duplicate_field_names",
        "invalid_fields",
        "file_truncated",
    ]
    assert len(result["field_errors"]) == 1


def test_unknown_version_and_unreadable_file(
    make_table: Callable[..., bytes], write_table: Callable[..., Path]
):
    result = describe_table(write_table(make_table([("A", "C", 1)], [b" x"], version=0x07)))
    assert result["warnings"] == ["unknown_version"]

    result = describe_table(write_table(b"\x03\x00", name="short.dbf"))
    assert result["warnings"] == ["unreadable"]
    assert "header" in result["error"]
