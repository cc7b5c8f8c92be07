"""Tests for the variable-length quantity codec."""

from __future__ import annotations

import pytest

from smf_library.codec import vlq
from smf_library.codec.stream import ByteStream
from smf_library.errors import (
    OutOfRangeError,
    ParseError,
    TruncatedStreamError,
    VlqOverflowError,
)

# Reference encodings from the Standard MIDI File 1.0 document.
KNOWN_ENCODINGS = [
    (0x00000000, b"\x00"),
    (0x00000040, b"\x40"),
    (0x0000007F, b"\x7f"),
    (0x00000080, b"\x81\x00"),
    (0x00002000, b"\xc0\x00"),
    (0x00003FFF, b"\xff\x7f"),
    (0x00004000, b"\x81\x80\x00"),
    (0x00100000, b"\xc0\x80\x00"),
    (0x001FFFFF, b"\xff\xff\x7f"),
    (0x00200000, b"\x81\x80\x80\x00"),
    (0x08000000, b"\xc0\x80\x80\x00"),
    (0x0FFFFFFF, b"\xff\xff\xff\x7f"),
]


# ---------------------------------------------------------------------------
# encode / decode
# ---------------------------------------------------------------------------

class TestEncodeDecode:
    @pytest.mark.parametrize("value,encoded", KNOWN_ENCODINGS)
    def test_known_encodings(self, value, encoded):
        assert vlq.encode(value) == encoded
        assert vlq.decode(ByteStream(encoded)) == (value, len(encoded))

    @pytest.mark.parametrize("value", [0, 127, 128, 16383, 16384, 2097151, 2097152, vlq.MAX_VALUE])
    def test_round_trip_reports_width(self, value):
        encoded = vlq.encode(value)
        assert vlq.decode(ByteStream(encoded)) == (value, vlq.encoded_width(value))

    def test_decode_stops_at_terminating_byte(self):
        stream = ByteStream(b"\x81\x00\x90")
        assert vlq.decode(stream) == (128, 2)
        assert stream.read_byte() == 0x90

    def test_decode_bytes_with_offset(self):
        assert vlq.decode_bytes(b"\xff\xff\x83\x60", offset=2) == (480, 2)

    def test_truncated_raises(self):
        with pytest.raises(TruncatedStreamError):
            vlq.decode(ByteStream(b"\x81\x80"))

    def test_empty_stream_raises(self):
        with pytest.raises(TruncatedStreamError):
            vlq.decode(ByteStream(b""))

    def test_more_than_four_bytes_rejected(self):
        with pytest.raises(VlqOverflowError) as excinfo:
            vlq.decode(ByteStream(b"\x81\x80\x80\x80\x00"))
        assert isinstance(excinfo.value, ParseError)
        assert excinfo.value.offset == 0

    def test_four_byte_maximum_accepted(self):
        assert vlq.decode(ByteStream(b"\xff\xff\xff\x7f\x00")) == (vlq.MAX_VALUE, 4)

    @pytest.mark.parametrize("value", [-1, vlq.MAX_VALUE + 1])
    def test_encode_out_of_range(self, value):
        with pytest.raises(OutOfRangeError):
            vlq.encode(value)


# ---------------------------------------------------------------------------
# encoded_width
# ---------------------------------------------------------------------------

class TestEncodedWidth:
    @pytest.mark.parametrize(
        "value,width",
        [(0, 1), (127, 1), (128, 2), (254, 2), (16383, 2), (16384, 3), (2097151, 3), (2097152, 4)],
    )
    def test_boundaries(self, value, width):
        assert vlq.encoded_width(value) == width

    def test_clamps_to_four_bytes(self):
        assert vlq.encoded_width(vlq.MAX_VALUE) == 4
        assert vlq.encoded_width(0xFFFFFFFF) == 4
