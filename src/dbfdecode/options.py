"""Open options for tables, plus loaders for option files.

Options can be built in code or read from a YAML/JSON file:

    read_mode: loose
    include_deleted: true
    encoding:
      default: CP850
      per_field:
        NAME: CP1252
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

DEFAULT_ENCODING = "ISO-8859-1"


class ReadMode(str, Enum):
    STRICT = "strict"
    LOOSE = "loose"


@dataclass
class EncodingConfig:
    default: str = DEFAULT_ENCODING
    per_field: dict[str, str] = field(default_factory=dict)


@dataclass
class OpenOptions:
    read_mode: ReadMode = ReadMode.STRICT
    encoding: EncodingConfig = field(default_factory=EncodingConfig)
    include_deleted: bool = False

    @property
    def strict(self) -> bool:
        return self.read_mode is ReadMode.STRICT

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> OpenOptions:
        encoding = payload.get("encoding") or {}
        if isinstance(encoding, str):
            encoding = {"default": encoding}
        per_field = encoding.get("per_field") or {}
        options = OpenOptions(
            read_mode=_coerce_read_mode(payload.get("read_mode")),
            encoding=EncodingConfig(
                default=str(encoding.get("default") or ""),
                per_field={str(k): str(v) for k, v in per_field.items()},
            ),
            include_deleted=bool(payload.get("include_deleted", False)),
        )
        return normalize_options(options)


def _coerce_read_mode(value: object) -> ReadMode:
    if isinstance(value, ReadMode):
        return value
    try:
        return ReadMode(str(value).strip().lower())
    except ValueError:
        return ReadMode.STRICT


def normalize_options(options: OpenOptions | None) -> OpenOptions:
    """Fill unset values with defaults: strict mode, ISO-8859-1, no overrides.

    Returns a new object; the caller's options are left untouched.
    """
    if options is None:
        return OpenOptions()
    encoding = options.encoding or EncodingConfig()
    return OpenOptions(
        read_mode=_coerce_read_mode(options.read_mode),
        encoding=EncodingConfig(
            default=encoding.default or DEFAULT_ENCODING,
            per_field=dict(encoding.per_field or {}),
        ),
        include_deleted=bool(options.include_deleted),
    )


def load_options(path: Path) -> OpenOptions:
    if path.suffix.lower() in {".yml", ".yaml"}:
        payload = yaml.safe_load(path.read_text())
    else:
        payload = json.loads(path.read_text())
    return OpenOptions.from_mapping(payload or {})
