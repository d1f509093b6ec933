from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO, Protocol, Union

from ftlab.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


class ByteSource(Protocol):
    """Random-access bytes of known length."""

    def size(self) -> int: ...

    def read_at(self, offset: int, n: int) -> bytes:
        """Up to n bytes starting at offset; shorter at end of source."""
        ...


class BufferSource:
    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)

    def size(self) -> int:
        return len(self._data)

    def read_at(self, offset: int, n: int) -> bytes:
        if n <= 0:
            return b""
        return self._data[offset : offset + n]

    def __enter__(self) -> BufferSource:
        return self

    def __exit__(self, *exc) -> None:
        return None


class FileSource:
    """
    Seek-based reads over an open file. The length is taken once, when the
    source is opened, and reused for the whole extraction.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        if not self.path.exists():
            logger.warning("Input file path does not exist: %s", self.path.absolute())
            raise NotFoundError(f"input file not found: {self.path}")
        if self.path.is_dir():
            raise InvalidInputError(f"expected a file, got a directory: {self.path}")
        self._fh: BinaryIO = self.path.open("rb")
        self._size = os.fstat(self._fh.fileno()).st_size

    def size(self) -> int:
        return self._size

    def read_at(self, offset: int, n: int) -> bytes:
        if n <= 0:
            return b""
        self._fh.seek(offset)
        return self._fh.read(n)

    def close(self) -> None:
        self._fh.close()

    def __enter__(self) -> FileSource:
        return self

    def __exit__(self, *exc) -> None:
        self.close()


SourceLike = Union[str, os.PathLike, bytes, bytearray, memoryview, BufferSource, FileSource]


def open_source(source: SourceLike) -> BufferSource | FileSource:
    if isinstance(source, (BufferSource, FileSource)):
        return source
    if isinstance(source, (bytes, bytearray, memoryview)):
        return BufferSource(source)
    return FileSource(Path(source))
