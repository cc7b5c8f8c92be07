"""Pitch names <-> MIDI note numbers.

Supported formats
-----------------
- Note name with octave: ``C4``, ``D#5``, ``Bb3``, ``F##4``, ``C-1``
- MIDI number: ``midi:60`` or a bare ``60``

Middle C = C4 = MIDI 60.
"""

from __future__ import annotations

import re

from smf_library.errors import OutOfRangeError, ValidationError

# Semitone offsets for natural notes (C-based)
_NOTE_OFFSETS: dict[str, int] = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}

_ACCIDENTAL_OFFSETS: dict[str, int] = {
    "": 0,
    "#": 1,
    "b": -1,
    "##": 2,
    "bb": -2,
}

_PITCH_RE = re.compile(r"^([A-Ga-g])(##|bb|#|b)?(-?\d+)$")

# Sharps for black keys
_SEMITONE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]


def _check_range(midi_number: int, source: str) -> int:
    if midi_number < 0 or midi_number > 127:
        raise OutOfRangeError(
            f"MIDI number {midi_number} out of range (0-127) for '{source}'"
        )
    return midi_number


def parse_pitch(s: str | int) -> int:
    """Parse a pitch into a MIDI note number.

    Parameters
    ----------
    s : str | int
        One of ``"C4"``, ``"D#5"``, ``"Bb3"``, ``"midi:60"``, ``"60"`` or an
        int already in 0-127.

    Raises
    ------
    ValidationError
        If the string cannot be parsed.
    OutOfRangeError
        If the pitch falls outside 0-127.
    """
    if isinstance(s, int):
        return _check_range(s, str(s))

    text = s.strip()
    raw = text[5:] if text.startswith("midi:") else text
    if raw.lstrip("-").isdigit():
        return _check_range(int(raw), text)

    m = _PITCH_RE.match(text)
    if not m:
        raise ValidationError(f"Cannot parse pitch: '{s}'")

    name = m.group(1).upper()
    accidental = m.group(2) or ""
    octave = int(m.group(3))

    midi_number = (octave + 1) * 12 + _NOTE_OFFSETS[name] + _ACCIDENTAL_OFFSETS[accidental]
    return _check_range(midi_number, text)


def pitch_name(midi_number: int) -> str:
    """Return the sharp spelling of *midi_number*, e.g. ``61 -> "C#4"``."""
    _check_range(midi_number, str(midi_number))
    octave = (midi_number // 12) - 1
    return f"{_SEMITONE_NAMES[midi_number % 12]}{octave}"
