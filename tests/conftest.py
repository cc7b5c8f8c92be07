"""Shared fixtures: raw SMF byte builders and mido-written reference files."""

from __future__ import annotations

from io import BytesIO
from typing import Callable

import mido
import pytest

END_OF_TRACK = b"\x00\xff\x2f\x00"


def _chunk(tag: bytes, body: bytes) -> bytes:
    return tag + len(body).to_bytes(4, "big") + body


def build_smf(
    *track_bodies: bytes,
    fmt: int | None = None,
    division: int = 96,
    track_count: int | None = None,
) -> bytes:
    if fmt is None:
        fmt = 0 if len(track_bodies) == 1 else 1
    if track_count is None:
        track_count = len(track_bodies)
    header = (
        fmt.to_bytes(2, "big")
        + track_count.to_bytes(2, "big")
        + division.to_bytes(2, "big")
    )
    return _chunk(b"MThd", header) + b"".join(_chunk(b"MTrk", body) for body in track_bodies)


@pytest.fixture
def make_smf() -> Callable[..., bytes]:
    """Builder: ``make_smf(track_body, ..., fmt=None, division=96)``."""
    return build_smf


def build_reference_midi() -> mido.MidiFile:
    """Three-track file: conductor, piano (running status, sysex), bass."""
    mid = mido.MidiFile(type=1, ticks_per_beat=480)

    conductor = mido.MidiTrack()
    conductor.append(mido.MetaMessage("track_name", name="Conductor", time=0))
    conductor.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(100), time=0))
    conductor.append(
        mido.MetaMessage(
            "time_signature",
            numerator=3,
            denominator=4,
            clocks_per_click=24,
            notated_32nd_notes_per_beat=8,
            time=0,
        )
    )
    conductor.append(mido.MetaMessage("end_of_track", time=0))
    mid.tracks.append(conductor)

    piano = mido.MidiTrack()
    piano.append(mido.MetaMessage("track_name", name="Piano", time=0))
    piano.append(mido.Message("program_change", channel=0, program=0, time=0))
    piano.append(mido.Message("control_change", channel=0, control=7, value=100, time=0))
    for note in (60, 64, 67):
        piano.append(mido.Message("note_on", channel=0, note=note, velocity=90, time=0))
    piano.append(mido.Message("note_off", channel=0, note=60, velocity=0, time=480))
    piano.append(mido.Message("note_off", channel=0, note=64, velocity=0, time=0))
    piano.append(mido.Message("note_off", channel=0, note=67, velocity=0, time=0))
    piano.append(mido.Message("pitchwheel", channel=0, pitch=0, time=0))
    piano.append(mido.Message("sysex", data=[0x7E, 0x7F, 0x09, 0x01], time=0))
    piano.append(mido.MetaMessage("end_of_track", time=0))
    mid.tracks.append(piano)

    bass = mido.MidiTrack()
    bass.append(mido.MetaMessage("track_name", name="Bass", time=0))
    bass.append(mido.Message("program_change", channel=1, program=33, time=0))
    bass.append(mido.Message("note_on", channel=1, note=36, velocity=100, time=0))
    bass.append(mido.Message("note_off", channel=1, note=36, velocity=0, time=960))
    bass.append(mido.MetaMessage("end_of_track", time=0))
    mid.tracks.append(bass)
    return mid


def midi_to_bytes(mid: mido.MidiFile) -> bytes:
    buf = BytesIO()
    mid.save(file=buf)
    return buf.getvalue()


@pytest.fixture
def reference_midi() -> mido.MidiFile:
    return build_reference_midi()


@pytest.fixture
def reference_bytes() -> bytes:
    """Bytes of :func:`build_reference_midi` as written by mido."""
    return midi_to_bytes(build_reference_midi())
