"""Standard MIDI File chunk parser.

Decodes the ``MThd`` header chunk and then exactly as many ``MTrk`` chunks
as the header declares.  Each track chunk is decoded from its own bounded
sub-stream, so an event that runs past the declared chunk length is
reported as :class:`ChunkLengthMismatchError` rather than silently eating
the next chunk.

Usage::

    from smf_library.parser import parse, parse_file

    song = parse(data, name="tune.mid")
    song = parse_file("/path/to/tune.mid")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from smf_library.codec import vlq
from smf_library.codec.stream import ByteStream
from smf_library.errors import (
    BadFormatError,
    BadMagicError,
    ChunkLengthMismatchError,
    InvalidMetaLengthError,
    ParseError,
    TruncatedStreamError,
    UnknownEventTypeError,
)
from smf_library.lib.meta_types import expected_length, meta_name
from smf_library.model.event import (
    META_STATUS,
    SYSEX_ESCAPE,
    SYSEX_START,
    ChannelOp,
    ChannelPayload,
    Event,
    MetaPayload,
    SysexPayload,
)
from smf_library.model.song import VALID_FORMATS, Song, Track

logger = logging.getLogger(__name__)

HEADER_MAGIC = b"MThd"
TRACK_MAGIC = b"MTrk"
HEADER_BODY_LENGTH = 6
MISSING_END_OF_TRACK = "MissingEndOfTrack"


class ParserState(Enum):
    HEADER = "header"
    TRACKS = "tracks"


@dataclass(frozen=True)
class HeaderChunk:
    format: int
    track_count: int
    division: int
    length: int  # declared chunk length


# ---------------------------------------------------------------------------
# Track decoding
# ---------------------------------------------------------------------------

class TrackDecoder:
    """Decode the events of one track chunk body.

    Carries the running status byte across events of the track.
    """

    def __init__(self, stream: ByteStream) -> None:
        self.stream = stream
        self.running_status: int | None = None
        self.events: list[Event] = []
        self.consumed = 0
        self.ended = False

    def decode(self) -> list[Event]:
        stream = self.stream
        while not stream.at_end():
            start = stream.pos
            event = self._decode_event()
            self.events.append(event)
            self.consumed += stream.pos - start
            if event.is_end_of_track():
                self.ended = True
                break
        return self.events

    def _decode_event(self) -> Event:
        delta_time, _ = vlq.decode(self.stream)
        status = self.stream.read_byte()
        if status == META_STATUS:
            return self._parse_meta(delta_time)
        if status in (SYSEX_START, SYSEX_ESCAPE):
            return self._parse_sysex(delta_time, status)
        return self._parse_channel(delta_time, status)

    def _parse_meta(self, delta_time: int) -> Event:
        stream = self.stream
        offset = stream.offset
        meta_type = stream.read_byte()
        if meta_type & 0x80:
            raise UnknownEventTypeError(f"meta type 0x{meta_type:02X} out of range", offset)
        length, _ = vlq.decode(stream)
        expected = expected_length(meta_type)
        if expected is not None and length != expected:
            raise InvalidMetaLengthError(
                f"{meta_name(meta_type)} must carry {expected} bytes, declares {length}",
                offset,
            )
        return Event(delta_time, MetaPayload(meta_type, stream.read_exact(length)))

    def _parse_sysex(self, delta_time: int, status: int) -> Event:
        length, _ = vlq.decode(self.stream)
        return Event(delta_time, SysexPayload(status, self.stream.read_exact(length)))

    def _parse_channel(self, delta_time: int, first: int) -> Event:
        stream = self.stream
        offset = stream.offset - 1
        data: list[int] = []
        if first & 0x80:
            if first >= 0xF0:
                raise UnknownEventTypeError(
                    f"status 0x{first:02X} is not valid inside a track", offset
                )
            status = first
            running = False
            self.running_status = status
        else:
            if self.running_status is None:
                raise UnknownEventTypeError(
                    f"data byte 0x{first:02X} with no running status", offset
                )
            status = self.running_status
            running = True
            data.append(first)

        op = ChannelOp(status >> 4)
        while len(data) < op.data_length:
            byte = stream.read_byte()
            if byte & 0x80:
                raise UnknownEventTypeError(
                    f"{op.label} data byte 0x{byte:02X} has the high bit set",
                    stream.offset - 1,
                )
            data.append(byte)
        return Event(delta_time, ChannelPayload(op, status & 0x0F, data, running_status=running))


# ---------------------------------------------------------------------------
# File parser
# ---------------------------------------------------------------------------

class SmfParser:
    """Two-state (header, then tracks) decoder for a whole file.

    With ``strict=True`` conditions that are otherwise only warnings
    (missing End of Track, bytes after End of Track, bytes after the last
    track, multi-track format 0) raise instead.
    """

    def __init__(self, data: bytes, *, strict: bool = False) -> None:
        self.stream = ByteStream(data)
        self.strict = strict
        self.state = ParserState.HEADER
        self.warnings: list[str] = []

    def parse(self, name: str | None = None) -> Song:
        header = self._parse_header()
        self.state = ParserState.TRACKS
        tracks = [self._parse_track(index) for index in range(header.track_count)]

        if not self.stream.at_end():
            self._warn(
                f"{self.stream.remaining} trailing bytes after track {header.track_count - 1}",
                ChunkLengthMismatchError,
            )
        if header.format == 0 and len(tracks) != 1:
            self._warn(
                f"format 0 file declares {len(tracks)} tracks",
                BadFormatError,
            )

        song = Song(format=header.format, division=header.division, name=name)
        song.tracks = tracks
        song.total_length = song.compute_total_length()
        song.warnings = list(self.warnings)
        return song

    def _warn(self, message: str, error_cls: type[ParseError]) -> None:
        if self.strict:
            raise error_cls(message, self.stream.offset)
        logger.warning("%s", message)
        self.warnings.append(message)

    def _read_tag(self, expected: bytes) -> None:
        offset = self.stream.offset
        tag = self.stream.read_exact(4)
        if tag != expected:
            raise BadMagicError(
                f"expected chunk tag {expected!r}, found {tag!r}", offset
            )

    def _parse_header(self) -> HeaderChunk:
        stream = self.stream
        self._read_tag(HEADER_MAGIC)
        length = stream.read_u32()
        offset = stream.offset
        fmt = stream.read_u16()
        track_count = stream.read_u16()
        division = stream.read_u16()
        if fmt not in VALID_FORMATS:
            raise BadFormatError(f"header format {fmt} is not 0, 1 or 2", offset)
        if length > HEADER_BODY_LENGTH:
            stream.skip(length - HEADER_BODY_LENGTH)
        return HeaderChunk(format=fmt, track_count=track_count, division=division, length=length)

    def _parse_track(self, index: int) -> Track:
        self._read_tag(TRACK_MAGIC)
        length = self.stream.read_u32()
        body = self.stream.substream(length)

        decoder = TrackDecoder(body)
        try:
            events = decoder.decode()
        except TruncatedStreamError as exc:
            raise ChunkLengthMismatchError(
                f"track {index}: event data overruns declared length {length}",
                exc.offset,
            ) from exc

        if not decoder.ended:
            self._warn(
                f"{MISSING_END_OF_TRACK}: track {index} has no End of Track event",
                ChunkLengthMismatchError,
            )
        elif not body.at_end():
            self._warn(
                f"track {index}: {body.remaining} bytes after End of Track ignored",
                ChunkLengthMismatchError,
            )

        track = Track.from_events(events)
        if track.length != decoder.consumed:
            logger.debug(
                "track %d: %d bytes on disk, %d in canonical encoding",
                index, decoder.consumed, track.length,
            )
        return track


def parse(data: bytes, *, name: str | None = None, strict: bool = False) -> Song:
    """Parse a complete Standard MIDI File held in memory.

    Raises a :class:`~smf_library.errors.ParseError` subclass on structural
    problems; no partial Song is returned.
    """
    return SmfParser(data, strict=strict).parse(name=name)


def parse_file(path: str | Path, *, strict: bool = False) -> Song:
    """Read and parse *path*; the song is named after the file name."""
    path = Path(path)
    return parse(path.read_bytes(), name=path.name, strict=strict)
