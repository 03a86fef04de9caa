import json
from pathlib import Path

from dbfdecode.options import EncodingConfig, OpenOptions, ReadMode, load_options, normalize_options


def test_normalize_defaults():
    opts = normalize_options(None)
    assert opts.read_mode is ReadMode.STRICT
    assert opts.encoding.default == "ISO-8859-1"
    assert opts.encoding.per_field == {}
    assert opts.include_deleted is False


def test_normalize_fills_blanks_without_mutating_input():
    original = OpenOptions(read_mode="bogus", encoding=EncodingConfig(default=""))  # type: ignore
    opts = normalize_options(original)
    assert opts.read_mode is ReadMode.STRICT
    assert opts.encoding.default == "ISO-8859-1"
    assert original.encoding.default == ""


def test_normalize_accepts_mode_strings():
    opts = normalize_options(OpenOptions(read_mode=" Loose "))  # type: ignore[arg-type]
    assert opts.read_mode is ReadMode.LOOSE
    assert not opts.strict


def test_load_yaml_options(tmp_path: Path):
    path = tmp_path / "options.yaml"
    path.write_text(
        "read_mode: loose\n"
        "include_deleted: true\n"
        "encoding:\n"
        "  default: CP850\n"
        "  per_field:\n"
        "    NAME: CP1252\n"
    )
    opts = load_options(path)
    assert opts.read_mode is ReadMode.LOOSE
    assert opts.include_deleted is True
    assert opts.encoding.default == "CP850"
    assert opts.encoding.per_field == {"NAME": "CP1252"}


def test_load_json_options_with_encoding_shorthand(tmp_path: Path):
    path = tmp_path / "options.json"
    path.write_text(json.dumps({"encoding": "UTF-8"}))
    opts = load_options(path)
    assert opts.read_mode is ReadMode.STRICT
    assert opts.encoding.default == "UTF-8"


def test_empty_options_file_gives_defaults(tmp_path: Path):
    path = tmp_path / "options.yml"
    path.write_text("")
    assert load_options(path) == OpenOptions()
