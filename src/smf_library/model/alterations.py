"""In-place transformations over a parsed Song.

Each public operation validates all of its inputs before touching the
song, so a raised error leaves the song exactly as it was.  Operations that
can change serialized sizes keep ``Track.length`` and ``Song.total_length``
up to date and report the byte delta.
"""

from __future__ import annotations

import math
from typing import Callable, Sequence

from smf_library.codec import vlq
from smf_library.errors import (
    ChannelsExhaustedError,
    InvalidFormatError,
    OutOfRangeError,
)
from smf_library.model.event import Event, check_data_byte
from smf_library.model.song import FORMAT_SEQUENTIAL, Song, Track

NO_CHANGE = -1
MAX_OCTAVE = 10
MAPPING_SIZE = 128

EventFunc = Callable[[Event], int]


def apply_to_events(song: Song, func: EventFunc) -> int:
    """Call *func* on every event of every track and sum the results."""
    total = 0
    for track in song.tracks:
        for event in track.events:
            total += func(event)
    return total


# ---------------------------------------------------------------------------
# Octaves
# ---------------------------------------------------------------------------

def _shifted_note(note: int, octaves: int) -> int | None:
    """Note number after an octave shift, or None when nothing changes."""
    octave = max(0, min(MAX_OCTAVE, note // 12 + octaves))
    shifted = note % 12 + octave * 12
    if shifted > 127 or shifted == note:
        return None
    return shifted


def change_event_octave(event: Event, octaves: int) -> int:
    """Shift one note event by *octaves*; returns 1 if it was modified."""
    note = event.note
    if note is None:
        return 0
    shifted = _shifted_note(note, octaves)
    if shifted is None:
        return 0
    event.set_note(shifted)
    return 1


def change_octave(song: Song, octaves: int) -> int:
    """Shift every note event; returns the number of events modified.

    The target octave is clamped to 0-10.  Results above 127, and shifts
    that leave the note where it was, are skipped and not counted.
    """
    if isinstance(octaves, bool) or not isinstance(octaves, int):
        raise OutOfRangeError(f"octave shift must be an integer, got {octaves!r}")
    return apply_to_events(song, lambda event: change_event_octave(event, octaves))


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------

def change_event_time(event: Event, multiplier: float) -> int:
    """Scale one delta-time; returns the change in its VLQ width."""
    old_delta = event.delta_time
    new_delta = int(min(old_delta * multiplier, vlq.MAX_VALUE))
    if new_delta == old_delta:
        return 0
    event.delta_time = new_delta
    return vlq.encoded_width(new_delta) - vlq.encoded_width(old_delta)


def warp_time(song: Song, multiplier: float) -> int:
    """Scale every delta-time and the time division by *multiplier*.

    Returns the signed byte delta a re-serialization would see: the sum of
    per-event delta-time width changes plus, for every track whose length
    changed, the change in width of its length field.
    """
    if not math.isfinite(multiplier) or multiplier < 0:
        raise OutOfRangeError(f"time multiplier {multiplier!r} must be finite and >= 0")

    total = 0
    for track in song.tracks:
        old_length = track.length
        track_delta = 0
        for event in track.events:
            track_delta += change_event_time(event, multiplier)
        track.length += track_delta
        total += track_delta
        if track.length != old_length:
            total += vlq.encoded_width(track.length) - vlq.encoded_width(old_length)

    song.total_length = song.compute_total_length()
    if not song.uses_smpte:
        song.division = max(1, int(min(song.division * multiplier, 0x7FFF)))
    return total


# ---------------------------------------------------------------------------
# Remapping
# ---------------------------------------------------------------------------

def _check_mapping(mapping: Sequence[int]) -> None:
    if len(mapping) != MAPPING_SIZE:
        raise OutOfRangeError(
            f"remap table needs {MAPPING_SIZE} entries, got {len(mapping)}"
        )
    for index, value in enumerate(mapping):
        if value != NO_CHANGE:
            check_data_byte(value, f"remap entry {index} ->")


def remap_instruments(song: Song, mapping: Sequence[int]) -> int:
    """Rewrite program changes through *mapping*; ``NO_CHANGE`` entries skip."""
    _check_mapping(mapping)
    modified = 0
    for event in song.iter_events():
        if event.is_program_change() and mapping[event.program] != NO_CHANGE:
            event.set_program(mapping[event.program])
            modified += 1
    return modified


def remap_notes(song: Song, mapping: Sequence[int]) -> int:
    """Rewrite note numbers of note events through *mapping*."""
    _check_mapping(mapping)
    modified = 0
    for event in song.iter_events():
        if event.is_note_event() and mapping[event.note] != NO_CHANGE:
            event.set_note(mapping[event.note])
            modified += 1
    return modified


# ---------------------------------------------------------------------------
# Rounds
# ---------------------------------------------------------------------------

def free_channel(song: Song) -> int:
    """Smallest MIDI channel not used by any channel event of *song*."""
    used = song.used_channels()
    for channel in range(16):
        if channel not in used:
            return channel
    raise ChannelsExhaustedError("all 16 MIDI channels are in use")


def add_round(
    song: Song,
    track_index: int,
    octave_diff: int,
    delay_ticks: int,
    instrument: int,
) -> int:
    """Append a transformed copy of a track, as in a round or canon.

    The copy is shifted by *octave_diff* octaves, plays *instrument*, moves
    to the lowest free channel and starts *delay_ticks* later.  Returns the
    byte length of the new track.
    """
    if song.format == FORMAT_SEQUENTIAL:
        raise InvalidFormatError("format 2 songs hold independent sequences")
    if not 0 <= track_index < len(song.tracks):
        raise OutOfRangeError(
            f"track index {track_index} out of range (song has {len(song.tracks)})"
        )
    check_data_byte(instrument, "instrument")
    if delay_ticks < 0:
        raise OutOfRangeError(f"delay {delay_ticks} must be >= 0")
    channel = free_channel(song)

    source = song.tracks[track_index]
    if source.events and source.events[0].delta_time + delay_ticks > vlq.MAX_VALUE:
        raise OutOfRangeError(f"delay {delay_ticks} overflows the first delta-time")

    new_track: Track = source.copy()
    for event in new_track.events:
        change_event_octave(event, octave_diff)
        if event.is_program_change():
            event.set_program(instrument)
        if event.is_channel_event():
            event.set_channel(channel)
    if new_track.events:
        new_track.events[0].delta_time += delay_ticks
    new_track.length = new_track.compute_length()

    song.add_track(new_track)
    return new_track.length
