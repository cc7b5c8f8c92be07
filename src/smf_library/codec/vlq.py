"""Variable-length quantities: big-endian base-128, high bit = continuation.

Delta-times and sysex/meta lengths in a Standard MIDI File use this
encoding.  Values are capped at ``MAX_VALUE`` (four bytes on the wire).
"""

from __future__ import annotations

from smf_library.codec.stream import ByteStream
from smf_library.errors import OutOfRangeError, VlqOverflowError

MAX_VALUE = 0x0FFFFFFF
MAX_WIDTH = 4


def decode(stream: ByteStream) -> tuple[int, int]:
    """Read one VLQ from *stream*.

    Returns ``(value, bytes_consumed)``.  Raises
    :class:`~smf_library.errors.TruncatedStreamError` when the stream ends
    before a byte with the high bit clear, and
    :class:`~smf_library.errors.VlqOverflowError` when the fourth byte
    still has it set.
    """
    start = stream.offset
    value = 0
    consumed = 0
    while True:
        byte = stream.read_byte()
        consumed += 1
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            return value, consumed
        if consumed == MAX_WIDTH:
            raise VlqOverflowError(
                f"variable-length quantity exceeds {MAX_WIDTH} bytes", start
            )


def decode_bytes(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a VLQ starting at *offset* inside a raw buffer."""
    stream = ByteStream(data)
    stream.skip(offset)
    return decode(stream)


def encode(value: int) -> bytes:
    """Encode *value* (0 .. MAX_VALUE) as a VLQ."""
    if value < 0 or value > MAX_VALUE:
        raise OutOfRangeError(
            f"VLQ value {value} out of range (0-{MAX_VALUE:#x})"
        )
    out = [value & 0x7F]
    value >>= 7
    while value:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(out))


def encoded_width(value: int) -> int:
    """Number of bytes ``encode(value)`` would produce, without encoding.

    Values at or above ``MAX_VALUE`` report the 4-byte maximum.
    """
    if value >= MAX_VALUE:
        return MAX_WIDTH
    width = 1
    value >>= 7
    while value:
        width += 1
        value >>= 7
    return width
