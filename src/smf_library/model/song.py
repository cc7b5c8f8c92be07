"""Song and Track containers for parsed Standard MIDI Files.

Timing is kept exactly as stored in the file: every event carries a delta
in ticks relative to the previous event of the same track.  ``Track.length``
caches the serialized size of the track's event data and must equal
``Track.compute_length()`` whenever the track is clean.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Iterator

from smf_library.errors import OutOfRangeError
from smf_library.lib.meta_types import MetaType
from smf_library.model.event import ChannelPayload, Event, MetaPayload

FORMAT_SINGLE_TRACK = 0
FORMAT_SIMULTANEOUS = 1
FORMAT_SEQUENTIAL = 2
VALID_FORMATS = (FORMAT_SINGLE_TRACK, FORMAT_SIMULTANEOUS, FORMAT_SEQUENTIAL)

SMPTE_FLAG = 0x8000


@dataclass
class Track:
    events: list[Event] = field(default_factory=list)
    length: int = 0  # serialized bytes of event data (chunk body)

    @classmethod
    def from_events(cls, events: list[Event]) -> Track:
        track = cls(events=list(events))
        track.length = track.compute_length()
        return track

    def compute_length(self) -> int:
        """Recompute the serialized length from the events."""
        return sum(event.size for event in self.events)

    def is_clean(self) -> bool:
        return self.length == self.compute_length()

    def append(self, event: Event) -> None:
        self.events.append(event)
        self.length += event.size

    def repair_running_status(self) -> int:
        """Drop running-status flags whose previous status byte differs.

        Running status carries across meta and sysex events.  Returns the
        number of events repaired; ``length`` grows by one byte for each.
        """
        previous: int | None = None
        repaired = 0
        for event in self.events:
            payload = event.payload
            if not isinstance(payload, ChannelPayload):
                continue
            if payload.running_status and payload.status != previous:
                payload.running_status = False
                repaired += 1
            previous = payload.status
        self.length += repaired
        return repaired

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self.events)

    @property
    def duration_ticks(self) -> int:
        return sum(event.delta_time for event in self.events)

    @property
    def name(self) -> str | None:
        """Text of the first Sequence/Track Name meta event, if any."""
        for event in self.events:
            payload = event.payload
            if isinstance(payload, MetaPayload) and payload.meta_type == MetaType.TRACK_NAME:
                return payload.text
        return None

    def channels(self) -> set[int]:
        return {event.channel for event in self.events if event.channel is not None}

    def copy(self) -> Track:
        return copy.deepcopy(self)


@dataclass
class Song:
    format: int = FORMAT_SINGLE_TRACK
    division: int = 480  # ticks per quarter note, or SMPTE when bit 15 is set
    tracks: list[Track] = field(default_factory=list)
    name: str | None = None
    total_length: int = 0  # sum of track lengths in bytes
    warnings: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.format not in VALID_FORMATS:
            raise OutOfRangeError(f"format {self.format} is not 0, 1 or 2")
        if not 0 <= self.division <= 0xFFFF:
            raise OutOfRangeError(f"division {self.division} does not fit 16 bits")

    # --- Time division ---

    @property
    def uses_smpte(self) -> bool:
        return bool(self.division & SMPTE_FLAG)

    @property
    def ticks_per_quarter_note(self) -> int | None:
        if self.uses_smpte:
            return None
        return self.division

    @property
    def smpte(self) -> tuple[int, int] | None:
        """``(frames_per_second, ticks_per_frame)`` for SMPTE divisions."""
        if not self.uses_smpte:
            return None
        # High byte is the negative frame rate in two's complement.
        frames = 256 - (self.division >> 8)
        return frames, self.division & 0xFF

    # --- Tracks ---

    def add_track(self, track: Track) -> None:
        """Append *track*; a second track turns a format 0 song into format 1."""
        self.tracks.append(track)
        if len(self.tracks) > 1 and self.format == FORMAT_SINGLE_TRACK:
            self.format = FORMAT_SIMULTANEOUS
        self.total_length += track.length

    def compute_total_length(self) -> int:
        return sum(track.length for track in self.tracks)

    def iter_events(self) -> Iterator[Event]:
        for track in self.tracks:
            yield from track.events

    def used_channels(self) -> set[int]:
        used: set[int] = set()
        for track in self.tracks:
            used |= track.channels()
        return used

    @property
    def duration_ticks(self) -> int:
        return max((track.duration_ticks for track in self.tracks), default=0)

    def tempo_map(self) -> list[tuple[int, int]]:
        """``(absolute_tick, microseconds_per_quarter)`` for every Set Tempo."""
        changes: list[tuple[int, int]] = []
        for track in self.tracks:
            tick = 0
            for event in track.events:
                tick += event.delta_time
                payload = event.payload
                if isinstance(payload, MetaPayload) and payload.tempo is not None:
                    changes.append((tick, payload.tempo))
        changes.sort(key=lambda change: change[0])
        return changes

    def copy(self) -> Song:
        return copy.deepcopy(self)
