"""Byte ceiling for request bodies."""

import io
from typing import BinaryIO

from formparty.formdata.errors import PayloadTooLargeError


class LimitedReader(io.RawIOBase):
    """Readable stream that refuses to yield more than ``max_bytes`` bytes.

    Reading exactly ``max_bytes`` is fine; the first read that would go past
    it raises :class:`PayloadTooLargeError`, and so does every read after that.
    """

    def __init__(self, stream: BinaryIO, max_bytes: int) -> None:
        super().__init__()
        if max_bytes < 0:
            raise ValueError("max_bytes must not be negative")
        self._stream = stream
        self.max_bytes = max_bytes
        self._remaining = max_bytes
        self._exceeded = False

    @property
    def consumed(self) -> int:
        return self.max_bytes - self._remaining

    @property
    def exceeded(self) -> bool:
        return self._exceeded

    def readable(self) -> bool:
        return True

    def read(self, size: int | None = -1) -> bytes:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        if self._exceeded:
            raise PayloadTooLargeError(self.max_bytes)
        if size is None or size < 0:
            return self.readall()
        if size == 0:
            return b""

        # One byte past the ceiling tells "exactly at the limit" apart from "over it"
        chunk = self._stream.read(min(size, self._remaining + 1))
        if len(chunk) > self._remaining:
            self._remaining = 0
            self._exceeded = True
            raise PayloadTooLargeError(self.max_bytes)

        self._remaining -= len(chunk)
        return chunk

    def readinto(self, buffer) -> int:
        chunk = self.read(len(buffer))
        buffer[: len(chunk)] = chunk
        return len(chunk)
