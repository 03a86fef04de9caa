"""Per-record decoding.

A record is `record_length` bytes: one deletion marker ('*' means deleted)
followed by every field's bytes in declaration order. Each field type has a
decoder below; decoders return the Python value, `None` for absent data, or
`OMIT` to leave the key out of the record entirely. They raise
DBFFormatError only where strict mode treats the value as fatal.
"""

from __future__ import annotations

import math
import struct
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from dbfdecode.encoding import decode_text, resolve_encoding
from dbfdecode.errors import DBFFormatError, TruncatedRecordError
from dbfdecode.fields import Field
from dbfdecode.julian import julian_to_datetime
from dbfdecode.options import OpenOptions, ReadMode

FieldValue = str | float | bool | int | datetime | None
Record = dict[str, FieldValue]

DELETED_MARKER = 0x2A  # '*'
DELETED_KEY = "_deleted"
OMIT = object()

TRUE_CHARS = frozenset(b"TtYy")
FALSE_CHARS = frozenset(b"FfNn")


@dataclass
class DecodeResult:
    """Outcome of one record decode.

    record set                 -> keep it
    skipped, error None        -> dropped on purpose (deleted record)
    skipped, error set         -> could not decode; strict raises, loose moves on
    """

    record: Record | None
    skipped: bool = False
    error: DBFFormatError | None = None


Decoder = Callable[[Field, bytes, str, ReadMode], object]


def _decode_char(field: Field, raw: bytes, codec: str, mode: ReadMode) -> object:
    return decode_text(raw, codec).rstrip(" ")


def _decode_numeric(field: Field, raw: bytes, codec: str, mode: ReadMode) -> object:
    text = decode_text(raw, codec).strip()
    if not text:
        return None
    if "," in text and "." not in text:
        text = text.replace(",", ".")
    try:
        if "_" in text:
            raise ValueError(text)
        value = float(text)
        # out-of-range digits overflow to inf; only a spelled-out infinity is kept
        if math.isinf(value) and text.lstrip("+-").lower() not in {"inf", "infinity"}:
            raise ValueError(text)
        return value
    except ValueError:
        if mode is ReadMode.STRICT:
            raise DBFFormatError(f"{field.name}: invalid number {text!r}") from None
        return None


def _decode_currency(field: Field, raw: bytes, codec: str, mode: ReadMode) -> object:
    if len(raw) != 8:
        return None
    return int.from_bytes(raw, "little", signed=True) / 10000.0


def _decode_logical(field: Field, raw: bytes, codec: str, mode: ReadMode) -> object:
    flag = raw[0] if raw else 0x20
    if flag in TRUE_CHARS:
        return True
    if flag in FALSE_CHARS:
        return False
    return None


def _decode_date(field: Field, raw: bytes, codec: str, mode: ReadMode) -> object:
    text = decode_text(raw, codec).strip()
    if len(text) != 8 or " " in text or text == "00000000" or not text.isdigit():
        return None
    try:
        parsed = datetime.strptime(text, "%Y%m%d")
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)


def _decode_integer(field: Field, raw: bytes, codec: str, mode: ReadMode) -> object:
    if len(raw) != 4:
        return None
    return int.from_bytes(raw, "little", signed=True)


def _decode_double(field: Field, raw: bytes, codec: str, mode: ReadMode) -> object:
    if len(raw) != 8:
        return None
    return struct.unpack("<d", raw)[0]


def _decode_datetime(field: Field, raw: bytes, codec: str, mode: ReadMode) -> object:
    if len(raw) != 8:
        return None
    julian_day = int.from_bytes(raw[:4], "little", signed=True)
    ms = int.from_bytes(raw[4:], "little", signed=True)
    try:
        return julian_to_datetime(julian_day, ms)
    except (ValueError, OverflowError):
        # blank (all zero) or out of Python's year range
        return None


def _decode_memo(field: Field, raw: bytes, codec: str, mode: ReadMode) -> object:
    # TODO: read .dbt/.fpt block contents once memo payload support is added.
    if mode is ReadMode.STRICT:
        raise DBFFormatError(f"{field.name}: memo fields are not supported yet")
    return None


def _decode_unsupported(field: Field, raw: bytes, codec: str, mode: ReadMode) -> object:
    if mode is ReadMode.STRICT:
        raise DBFFormatError(f"{field.name}: unsupported field type {field.type!r}")
    return OMIT


DECODERS: dict[str, Decoder] = {
    "C": _decode_char,
    "N": _decode_numeric,
    "F": _decode_numeric,
    "Y": _decode_currency,
    "L": _decode_logical,
    "D": _decode_date,
    "I": _decode_integer,
    "B": _decode_double,
    "T": _decode_datetime,
    "M": _decode_memo,
}


def decode_field(field: Field, raw: bytes, codec: str, mode: ReadMode) -> object:
    decoder = DECODERS.get(field.type, _decode_unsupported)
    return decoder(field, raw, codec, mode)


def decode_record(buf: bytes, fields: Sequence[Field], options: OpenOptions) -> DecodeResult:
    """Decode one fixed-length record buffer into a field-name -> value mapping."""
    if not buf:
        return DecodeResult(None, skipped=True)
    deleted = buf[0] == DELETED_MARKER
    if deleted and not options.include_deleted:
        return DecodeResult(None, skipped=True)

    record: Record = {}
    offset = 1
    for field in fields:
        end = offset + field.size
        if end > len(buf):
            return DecodeResult(
                None,
                skipped=True,
                error=TruncatedRecordError(
                    f"truncated record: {field.name} needs bytes {offset}-{end}, "
                    f"buffer has {len(buf)}"
                ),
            )
        raw = buf[offset:end]
        offset = end
        codec = resolve_encoding(field.name, options.encoding)
        try:
            value = decode_field(field, raw, codec, options.read_mode)
        except DBFFormatError as exc:
            return DecodeResult(None, skipped=True, error=exc)
        if value is OMIT:
            continue
        record[field.name] = value  # type: ignore[assignment]

    if deleted:
        record[DELETED_KEY] = True
    return DecodeResult(record)
