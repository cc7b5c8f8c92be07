"""Bounded big-endian reader over an in-memory byte buffer."""

from __future__ import annotations

from smf_library.errors import TruncatedStreamError


class ByteStream:
    """Sequential reader that raises :class:`TruncatedStreamError` on overrun.

    ``pos`` is the offset of the next unread byte.  ``base`` is added to
    offsets reported in errors so that a sub-stream over one chunk can
    report positions relative to the whole file.
    """

    def __init__(self, data: bytes, *, base: int = 0) -> None:
        self.data = bytes(data)
        self.pos = 0
        self.base = base

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos

    @property
    def offset(self) -> int:
        """Absolute offset of the next unread byte."""
        return self.base + self.pos

    def at_end(self) -> bool:
        return self.pos >= len(self.data)

    def read_byte(self) -> int:
        if self.pos >= len(self.data):
            raise TruncatedStreamError("unexpected end of data", self.offset)
        value = self.data[self.pos]
        self.pos += 1
        return value

    def peek_byte(self) -> int:
        if self.pos >= len(self.data):
            raise TruncatedStreamError("unexpected end of data", self.offset)
        return self.data[self.pos]

    def read_exact(self, count: int) -> bytes:
        if count < 0:
            raise ValueError(f"negative read length {count}")
        if count > self.remaining:
            raise TruncatedStreamError(
                f"need {count} bytes, only {self.remaining} left", self.offset
            )
        chunk = self.data[self.pos : self.pos + count]
        self.pos += count
        return chunk

    def read_u16(self) -> int:
        return int.from_bytes(self.read_exact(2), "big")

    def read_u32(self) -> int:
        return int.from_bytes(self.read_exact(4), "big")

    def skip(self, count: int) -> None:
        self.read_exact(count)

    def consume_all(self) -> bytes:
        """Return every unread byte and move to the end."""
        rest = self.data[self.pos :]
        self.pos = len(self.data)
        return rest

    def substream(self, count: int) -> ByteStream:
        """Read *count* bytes and return them as an independent stream."""
        start = self.offset
        return ByteStream(self.read_exact(count), base=start)
