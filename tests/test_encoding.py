import pytest

from dbfdecode.encoding import canonical_encoding, decode_text, resolve_encoding
from dbfdecode.options import EncodingConfig


@pytest.mark.parametrize(
    ("name", "codec"),
    [
        ("CP850", "cp850"),
        (" cp437 ", "cp437"),
        ("windows-1252", "cp1252"),
        ("CP1252", "cp1252"),
        ("iso8859-1", "latin-1"),
        ("Latin1", "latin-1"),
        ("utf8", "utf-8"),
        ("UTF-8", "utf-8"),
        ("KOI8-R", "latin-1"),
        ("", "latin-1"),
    ],
)
def test_canonical_encoding(name: str, codec: str):
    assert canonical_encoding(name) == codec


def test_per_field_override_wins_over_default():
    config = EncodingConfig(default="CP850", per_field={"NAME": "UTF-8", "CITY": ""})
    assert resolve_encoding("NAME", config) == "utf-8"
    assert resolve_encoding("CITY", config) == "cp850"
    assert resolve_encoding("OTHER", config) == "cp850"


def test_decode_text_by_codec():
    assert decode_text(b"Jos\xe9", "latin-1") == "José"
    assert decode_text(b"Jos\x82", "cp850") == "José"
    assert decode_text(b"Jos\xc3\xa9", "utf-8") == "José"
    assert decode_text(b"Jos\xe9", "utf-8") == "Jos�"
