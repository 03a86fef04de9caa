"""Positioned byte access used by the table reader."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Protocol


class ByteSource(Protocol):
    def __enter__(self) -> ByteSource: ...

    def __exit__(self, *exc: object) -> None: ...

    def read_at(self, offset: int, size: int) -> bytes:
        """Return up to `size` bytes starting at `offset`; fewer means end of data."""
        ...


class FileSource:
    """Reads from a file on disk; usable as a context manager to hold one handle open."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._handle: BinaryIO | None = None

    def __enter__(self) -> FileSource:
        self._handle = self.path.open("rb")
        return self

    def __exit__(self, *exc: object) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def read_at(self, offset: int, size: int) -> bytes:
        if self._handle is None:
            with self.path.open("rb") as f:
                f.seek(offset)
                return f.read(size)
        self._handle.seek(offset)
        return self._handle.read(size)


class BytesSource:
    """In-memory source, handy for tables already loaded into a buffer."""

    def __init__(self, data: bytes) -> None:
        self.data = data

    def __enter__(self) -> BytesSource:
        return self

    def __exit__(self, *exc: object) -> None:
        return None

    def read_at(self, offset: int, size: int) -> bytes:
        return self.data[offset : offset + size]
