from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

# dBase III table with one field of every supported type and three records:
# an active record, a record with blank text/numbers, and a deleted record.
ALL_FIELDS_DBF = bytes.fromhex(
    "037c010103000000610149000000000000000000000000000000000000000000"
    "4e414d450000000000000043000000000a000000000000000000000000000000"
    "41474500000000000000004e0000000005000000000000000000000000000000"
    "42414c414e43450000000046000000000a020000000000000000000000000000"
    "4355525200000000000000590000000008040000000000000000000000000000"
    "41435449564500000000004c0000000001000000000000000000000000000000"
    "4249525448000000000000440000000008000000000000000000000000000000"
    "434f554e54000000000000490000000004000000000000000000000000000000"
    "524154494f000000000000420000000008000000000000000000000000000000"
    "5354414d50000000000000540000000008000000000000000000000000000000"
    "4d454d4f000000000000004d000000000a000000000000000000000000000000"
    "0d204a6f73e92020202020202020203432202020203132332e343508e2010000"
    "00000054313939303031303140e201006e861bf0f92109400c8a250018582605"
    "0000000000000000000020202020202020202020202020202020202020202020"
    "2020202088f51cfaffffffff463230323131323331ceffffff00000000004045"
    "c027852500d825d301000000000000000000002a44656c657465642020202020"
    "203939202020202020312e323300000000000000003f32303030303130310700"
    "00000000000000000440e184250000000000000000000000000000001a")

FieldSpec = tuple[str, str, int, int]


def descriptor(name: str, ftype: str, size: int, decimals: int = 0) -> bytes:
    raw = bytearray(32)
    encoded = name.encode("latin-1")[:11]
    raw[: len(encoded)] = encoded
    raw[11] = ord(ftype)
    raw[16] = size
    raw[17] = decimals
    return bytes(raw)


def build_table(
    fields: Sequence[FieldSpec],
    records: Sequence[bytes] = (),
    version: int = 0x03,
    record_count: int | None = None,
    record_length: int | None = None,
    last_update: tuple[int, int, int] = (124, 1, 1),
) -> bytes:
    """Assemble header, descriptors, terminator and record blocks."""
    descriptors = b"".join(descriptor(*spec) for spec in fields)
    header = bytearray(32)
    header[0] = version
    header[1:4] = bytes(last_update)
    count = len(records) if record_count is None else record_count
    length = 1 + sum(spec[2] for spec in fields) if record_length is None else record_length
    header[4:8] = count.to_bytes(4, "little")
    header[8:10] = (32 + len(descriptors) + 1).to_bytes(2, "little")
    header[10:12] = length.to_bytes(2, "little")
    return bytes(header) + descriptors + b"\x0d" + b"".join(records) + b"\x1a"


@pytest.fixture
def make_table() -> Callable[..., bytes]:
    return build_table


@pytest.fixture
def write_table(tmp_path: Path) -> Callable[..., Path]:
    def _write(data: bytes, name: str = "table.dbf") -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def all_fields_path(tmp_path: Path) -> Path:
    path = tmp_path / "all_fields.dbf"
    path.write_bytes(ALL_FIELDS_DBF)
    return path


@pytest.fixture
def all_fields_bytes() -> bytes:
    return ALL_FIELDS_DBF
