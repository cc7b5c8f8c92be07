"""Ready-made 128-entry remap tables for instruments and notes.

Tables are plain lists indexed by the original program/note number; an
entry of ``NO_CHANGE`` (-1) leaves that value alone.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Union

from smf_library.errors import ValidationError
from smf_library.lib.gm_instruments import family_programs, instrument_to_program, program_family
from smf_library.model.alterations import MAPPING_SIZE, NO_CHANGE
from smf_library.model.event import check_data_byte
from smf_library.parser.pitch import parse_pitch

Key = Union[int, str]


def identity_mapping() -> list[int]:
    """A table that changes nothing."""
    return [NO_CHANGE] * MAPPING_SIZE


def _program(value: Key) -> int:
    if isinstance(value, int):
        return check_data_byte(value, "program")
    text = value.strip()
    if text.lstrip("-").isdigit():
        return check_data_byte(int(text), "program")
    program = instrument_to_program(text)
    if program is None:
        raise ValidationError(f"Unknown GM instrument '{value}'")
    return program


def _pairs(pairs: Mapping[Key, Key] | Iterable[tuple[Key, Key]]) -> Iterable[tuple[Key, Key]]:
    if isinstance(pairs, Mapping):
        return pairs.items()
    return pairs


def instrument_mapping(pairs: Mapping[Key, Key] | Iterable[tuple[Key, Key]]) -> list[int]:
    """Build a program table from ``{source: target}`` pairs.

    Keys and values may be program numbers or GM names
    (``{"acoustic-grand-piano": "violin"}``).
    """
    mapping = identity_mapping()
    for source, target in _pairs(pairs):
        mapping[_program(source)] = _program(target)
    return mapping


def note_mapping(pairs: Mapping[Key, Key] | Iterable[tuple[Key, Key]]) -> list[int]:
    """Build a note table from ``{source: target}`` pitches (``"C4"`` or 60)."""
    mapping = identity_mapping()
    for source, target in _pairs(pairs):
        mapping[parse_pitch(source)] = parse_pitch(target)
    return mapping


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

_BRASS_FOR_FAMILY: dict[str, str] = {
    "Bass": "tuba",
    "Strings": "french-horn",
    "Ensemble": "brass-section",
    "Reed": "trombone",
    "Pipe": "muted-trumpet",
}


def brass_band() -> list[int]:
    """Every melodic program becomes a brass instrument.

    Bass-range families go to tuba, sustained families to horns, the rest
    to trumpet.  Percussive and sound-effect programs are left alone.
    """
    mapping = identity_mapping()
    for program in range(MAPPING_SIZE):
        family = program_family(program)
        if family in ("Percussive", "Sound Effects", "Brass"):
            continue
        mapping[program] = _program(_BRASS_FOR_FAMILY.get(family, "trumpet"))
    return mapping


def helicopter() -> list[int]:
    """Every program becomes the GM helicopter."""
    return [_program("helicopter")] * MAPPING_SIZE


def single_family(family: str) -> list[int]:
    """Move every program to the same slot within *family*.

    Keeps the position inside the source family, so the eight pianos map to
    the eight members of *family* in order.
    """
    target = family_programs(family)
    return [target.start + program % 8 for program in range(MAPPING_SIZE)]


# Semitone steps down to the previous note of the C major scale.
_SCALE_STEP_DOWN = [1, 1, 2, 1, 2, 1, 1, 2, 1, 2, 1, 2]


def lower_notes() -> list[int]:
    """Lower every note to the next C-major scale degree below it.

    Notes with nothing below them (0) stay put.
    """
    mapping = identity_mapping()
    for note in range(MAPPING_SIZE):
        lowered = note - _SCALE_STEP_DOWN[note % 12]
        if lowered >= 0:
            mapping[note] = lowered
    return mapping
