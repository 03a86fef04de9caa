"""Error taxonomy for table decoding."""

from __future__ import annotations


class DBFError(Exception):
    """Base class for everything raised while opening or reading a table."""


class DBFFormatError(DBFError, ValueError):
    """The bytes do not describe a table this package can decode."""


class TruncatedRecordError(DBFFormatError):
    """A record buffer ended before every declared field was consumed."""


class DBFReadError(DBFError, OSError):
    """The file ended before a fixed-size structure could be read."""
