"""
Bounds checked big endian reader over a whole font file held in memory
"""

import os
import struct
from contextlib import contextmanager

from fonterrors import EndOfData, SourceUnavailable

CHUNK_SIZE = 4096


def _drain(f) -> bytes:
    """
    read a binary stream to the end, chunk by chunk
    """
    chunks = []
    while True:
        chunk = f.read(CHUNK_SIZE)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def load_source(source) -> bytes:
    """
    load a byte source fully into memory
    source is a path, a binary file object or a bytes like value
    file objects handed in are left open, paths are opened and closed here
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    try:
        if isinstance(source, (str, os.PathLike)):
            with open(source, "rb") as f:
                return _drain(f)
        return _drain(source)
    except OSError as e:
        raise SourceUnavailable(f"cannot read font source {source!r}: {e}") from e


class FontFileReader:
    def __init__(self, source):
        self._file = load_source(source)
        self._size = len(self._file)
        self._current = 0

    @property
    def all_bytes(self) -> bytes:
        return self._file

    @property
    def position(self) -> int:
        return self._current

    @property
    def size(self) -> int:
        return self._size

    def _take(self, count: int) -> int:
        """
        reserve count bytes at the cursor, returns their start offset
        nothing moves unless all of them are available
        """
        start = self._current
        if start + count > self._size:
            raise EndOfData(self._size, start, count)
        self._current = start + count
        return start

    def _unpack(self, fmt: str, count: int) -> int:
        start = self._take(count)
        return struct.unpack_from(fmt, self._file, start)[0]

    def read_ubyte(self) -> int:
        return self._unpack(">B", 1)

    def read_byte(self) -> int:
        return self._unpack(">b", 1)

    def read_ushort(self) -> int:
        return self._unpack(">H", 2)

    def read_short(self) -> int:
        return self._unpack(">h", 2)

    def read_ulong(self) -> int:
        return self._unpack(">I", 4)

    def read_long(self) -> int:
        return self._unpack(">i", 4)

    def read_tag(self) -> bytes:
        """
        read a raw 4 byte table tag
        """
        start = self._take(4)
        return self._file[start : start + 4]

    def read_string(self, length: int, encoding_id: int | None = None) -> str:
        """
        read a fixed length string of length bytes

        without an encoding id the text is sniffed, a leading zero byte means
        UTF-16BE, anything else is read as ISO-8859-1

        with an encoding id the text is always decoded as UTF-16BE, whatever
        the id says. windows name records are UTF-16BE in practice, so the id
        is not mapped to other charsets
        """
        if length < 0:
            raise ValueError(f"negative string length {length}")
        start = self._take(length)
        data = self._file[start : start + length]
        if encoding_id is not None or data[:1] == b"\x00":
            return data.decode("utf-16-be", errors="replace")
        return data.decode("latin-1")

    def seek(self, offset: int):
        if offset < 0 or offset > self._size:
            raise EndOfData(self._size, offset)
        self._current = offset

    def skip(self, count: int):
        self.seek(self._current + count)

    @contextmanager
    def excursion(self, offset: int):
        """
        jump to offset for the body of a with block, then come back
        """
        saved = self._current
        self.seek(offset)
        try:
            yield self
        finally:
            self._current = saved
