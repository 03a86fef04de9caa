from datetime import date
from pathlib import Path

import pytest

from dbfdecode.errors import DBFFormatError, DBFReadError
from dbfdecode.header import (
    find_memo_file,
    locate_memo_file,
    parse_header,
    version_label,
)
from dbfdecode.options import ReadMode


def test_parse_header_fields(all_fields_bytes: bytes):
    header = parse_header(all_fields_bytes[:32])
    assert header.version == 0x03
    assert header.last_update == date(2024, 1, 1)
    assert header.record_count == 3
    assert header.header_length == 353
    assert header.record_length == 73


def test_unknown_version_rejected_only_in_strict_mode(all_fields_bytes: bytes):
    data = bytes([0x42]) + all_fields_bytes[1:32]
    with pytest.raises(DBFFormatError, match="0x42"):
        parse_header(data, ReadMode.STRICT)
    assert parse_header(data, ReadMode.LOOSE).version == 0x42


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ((124, 0, 0), date(2023, 11, 30)),
        ((124, 0, 15), date(2023, 12, 15)),
        ((124, 2, 30), date(2024, 3, 1)),
        ((99, 13, 1), date(2000, 1, 1)),
    ],
)
def test_illegal_last_update_rolls_over(
    all_fields_bytes: bytes, raw: tuple[int, int, int], expected: date
):
    data = all_fields_bytes[:1] + bytes(raw) + all_fields_bytes[4:32]
    assert parse_header(data).last_update == expected


def test_short_header_is_read_error(all_fields_bytes: bytes):
    with pytest.raises(DBFReadError):
        parse_header(all_fields_bytes[:20])


def test_version_labels():
    assert version_label(0x8B) == "dBase IV + memo"
    assert version_label(0x99).startswith("unknown")


def test_dbt_memo_found_next_to_table(tmp_path: Path):
    table = tmp_path / "people.dbf"
    memo = tmp_path / "people.dbt"
    memo.write_bytes(b"")
    assert find_memo_file(table, 0x83) == memo
    assert locate_memo_file(table, 0x8B, ReadMode.STRICT) == memo


def test_uppercase_fpt_is_found(tmp_path: Path):
    (tmp_path / "ITEMS.FPT").write_bytes(b"")
    found = find_memo_file(tmp_path / "ITEMS.DBF", 0x30)
    assert found is not None
    assert found.name.lower() == "items.fpt"


def test_missing_dbt_is_fatal_only_in_strict_mode(tmp_path: Path):
    table = tmp_path / "people.dbf"
    with pytest.raises(DBFFormatError, match="memo"):
        locate_memo_file(table, 0x83, ReadMode.STRICT)
    assert locate_memo_file(table, 0x83, ReadMode.LOOSE) is None


def test_missing_fpt_is_tolerated_in_strict_mode(tmp_path: Path):
    assert locate_memo_file(tmp_path / "items.dbf", 0xF5, ReadMode.STRICT) is None


def test_plain_dbase_has_no_memo(tmp_path: Path):
    (tmp_path / "plain.dbt").write_bytes(b"")
    assert find_memo_file(tmp_path / "plain.dbf", 0x03) is None
