"""Per-field text encoding resolution.

Legacy tables carry text in DOS/Windows codepages. The resolver only picks
the codec name for a field; `decode_text` hands the bytes to Python's codec
machinery.
"""

from __future__ import annotations

from dbfdecode.options import EncodingConfig

FALLBACK_CODEC = "latin-1"

# Upper-cased names accepted in options -> Python codec names.
ENCODING_ALIASES: dict[str, str] = {
    "CP850": "cp850",
    "CP437": "cp437",
    "CP1252": "cp1252",
    "WINDOWS-1252": "cp1252",
    "ISO-8859-1": "latin-1",
    "ISO8859-1": "latin-1",
    "LATIN1": "latin-1",
    "UTF-8": "utf-8",
    "UTF8": "utf-8",
}


def canonical_encoding(name: str | None) -> str:
    """Map a user-facing encoding name to a codec; unknown names fall back to latin-1."""
    key = (name or "").strip().upper()
    return ENCODING_ALIASES.get(key, FALLBACK_CODEC)


def resolve_encoding(field_name: str, config: EncodingConfig) -> str:
    """Per-field override when present and non-empty, else the table default."""
    override = config.per_field.get(field_name)
    if override:
        return canonical_encoding(override)
    return canonical_encoding(config.default)


def decode_text(data: bytes, codec: str) -> str:
    """Decode with a codec returned by `resolve_encoding`; undecodable bytes become U+FFFD."""
    return data.decode(codec, errors="replace")
