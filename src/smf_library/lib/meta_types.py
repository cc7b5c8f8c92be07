"""Meta event type numbers, display names and fixed payload lengths."""

from __future__ import annotations

from enum import IntEnum


class MetaType(IntEnum):
    SEQUENCE_NUMBER = 0x00
    TEXT = 0x01
    COPYRIGHT = 0x02
    TRACK_NAME = 0x03
    INSTRUMENT_NAME = 0x04
    LYRIC = 0x05
    MARKER = 0x06
    CUE_POINT = 0x07
    PROGRAM_NAME = 0x08
    DEVICE_NAME = 0x09
    CHANNEL_PREFIX = 0x20
    MIDI_PORT = 0x21
    END_OF_TRACK = 0x2F
    SET_TEMPO = 0x51
    SMPTE_OFFSET = 0x54
    TIME_SIGNATURE = 0x58
    KEY_SIGNATURE = 0x59
    SEQUENCER_SPECIFIC = 0x7F


# fmt: off
META_NAMES: dict[int, str] = {
    MetaType.SEQUENCE_NUMBER:    "Sequence Number",
    MetaType.TEXT:               "Text Event",
    MetaType.COPYRIGHT:          "Copyright",
    MetaType.TRACK_NAME:         "Sequence/Track Name",
    MetaType.INSTRUMENT_NAME:    "Instrument Name",
    MetaType.LYRIC:              "Lyric",
    MetaType.MARKER:             "Marker",
    MetaType.CUE_POINT:          "Cue Point",
    MetaType.PROGRAM_NAME:       "Program Name",
    MetaType.DEVICE_NAME:        "Device Name",
    MetaType.CHANNEL_PREFIX:     "MIDI Channel Prefix",
    MetaType.MIDI_PORT:          "MIDI Port",
    MetaType.END_OF_TRACK:       "End of Track",
    MetaType.SET_TEMPO:          "Set Tempo",
    MetaType.SMPTE_OFFSET:       "SMPTE Offset",
    MetaType.TIME_SIGNATURE:     "Time Signature",
    MetaType.KEY_SIGNATURE:      "Key Signature",
    MetaType.SEQUENCER_SPECIFIC: "Sequencer-Specific Meta-event",
}

# Payload lengths the file format fixes; anything else is rejected.
FIXED_LENGTHS: dict[int, int] = {
    MetaType.SEQUENCE_NUMBER: 2,
    MetaType.CHANNEL_PREFIX:  1,
    MetaType.MIDI_PORT:       1,
    MetaType.END_OF_TRACK:    0,
    MetaType.SET_TEMPO:       3,
    MetaType.SMPTE_OFFSET:    5,
    MetaType.TIME_SIGNATURE:  4,
    MetaType.KEY_SIGNATURE:   2,
}
# fmt: on

# Text-bearing meta events (0x01-0x0F are reserved for text).
TEXT_TYPES = frozenset(range(0x01, 0x10))


def meta_name(meta_type: int) -> str:
    """Display name of *meta_type*, e.g. ``"Set Tempo"``."""
    name = META_NAMES.get(meta_type)
    if name is not None:
        return name
    if meta_type in TEXT_TYPES:
        return "Text Event"
    return f"Unknown Meta 0x{meta_type:02X}"


def expected_length(meta_type: int) -> int | None:
    """Fixed payload length for *meta_type*, or ``None`` if variable."""
    return FIXED_LENGTHS.get(meta_type)
