"""Field descriptor parsing and validation.

Descriptors are 32-byte records that follow the header:
- bytes 0-10: name, NUL terminated (all 11 bytes when there is no NUL)
- byte 11:    type code
- byte 16:    size in bytes
- byte 17:    decimal places (informational, N/F only)

The list ends at a descriptor starting with 0x0D or at the declared header
length, whichever comes first.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from dbfdecode.encoding import canonical_encoding, decode_text
from dbfdecode.errors import DBFFormatError, DBFReadError
from dbfdecode.header import HEADER_SIZE, VISUAL_FOXPRO, Header
from dbfdecode.options import OpenOptions
from dbfdecode.source import ByteSource

DESCRIPTOR_SIZE = 32
TERMINATOR = 0x0D
FIELD_TYPES = frozenset("CNFYLDIMTB")
MAX_NAME_LENGTH = 10

# type code -> exact byte width required in strict mode
FIXED_SIZES: dict[str, int] = {"Y": 8, "L": 1, "D": 8, "T": 8, "B": 8}
MAX_SIZES: dict[str, int] = {"C": 255, "N": 20, "F": 20}
DBT_MEMO_SIZE = 10
FPT_MEMO_SIZE = 4


@dataclass(frozen=True)
class Field:
    name: str
    type: str
    size: int
    decimal_places: int = 0


def parse_descriptor(raw: bytes, codec: str) -> Field:
    """Decode one 32-byte descriptor; the name uses the table's default codec."""
    if len(raw) < DESCRIPTOR_SIZE:
        raise DBFReadError(f"field descriptor needs {DESCRIPTOR_SIZE} bytes, got {len(raw)}")
    name_raw = raw[:11]
    end = name_raw.find(b"\x00")
    if end == -1:
        end = 11
    return Field(
        name=decode_text(name_raw[:end], codec).rstrip(),
        type=chr(raw[11]),
        size=raw[16],
        decimal_places=raw[17],
    )


def memo_size_for(version: int) -> int:
    return FPT_MEMO_SIZE if version == VISUAL_FOXPRO else DBT_MEMO_SIZE


def validate_field(field: Field, version: int) -> None:
    """Raise DBFFormatError when a descriptor breaks the rules for its type."""
    if not field.name or len(field.name) > MAX_NAME_LENGTH:
        raise DBFFormatError(f"invalid field name: {field.name!r}")
    if field.type not in FIELD_TYPES:
        raise DBFFormatError(f"{field.name}: unsupported field type {field.type!r}")
    limit = MAX_SIZES.get(field.type)
    if limit is not None and field.size > limit:
        raise DBFFormatError(f"{field.name}: size {field.size} exceeds {limit} ({field.type})")
    expected = FIXED_SIZES.get(field.type)
    if field.type == "M":
        expected = memo_size_for(version)
    if expected is not None and field.size != expected:
        raise DBFFormatError(
            f"{field.name}: type {field.type} must be {expected} bytes, got {field.size}"
        )


def record_length_for(fields: Sequence[Field]) -> int:
    """Deletion marker plus every field width."""
    return 1 + sum(f.size for f in fields)


def read_fields(source: ByteSource, header: Header, options: OpenOptions) -> list[Field]:
    """Read descriptors after the header; strict mode validates each and the total width."""
    codec = canonical_encoding(options.encoding.default)
    fields: list[Field] = []
    seen: set[str] = set()
    pos = HEADER_SIZE
    while pos < header.header_length:
        raw = source.read_at(pos, DESCRIPTOR_SIZE)
        pos += DESCRIPTOR_SIZE
        if raw[:1] == bytes([TERMINATOR]):
            break
        field = parse_descriptor(raw, codec)
        if options.strict:
            validate_field(field, header.version)
            if field.name in seen:
                raise DBFFormatError(f"duplicate field name: {field.name}")
            seen.add(field.name)
        fields.append(field)

    if options.strict and record_length_for(fields) != header.record_length:
        raise DBFFormatError(
            f"record length mismatch: header={header.record_length} "
            f"fields={record_length_for(fields)}"
        )
    return fields
