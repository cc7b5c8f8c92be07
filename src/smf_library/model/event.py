"""Event model for Standard MIDI File track data.

An :class:`Event` is a delta-time plus exactly one payload:

- :class:`ChannelPayload`: channel voice messages (status ``0x80``-``0xEF``)
- :class:`SysexPayload`: system-exclusive packets (``0xF0`` / ``0xF7``)
- :class:`MetaPayload`: file-only meta events (``0xFF``)

Every payload knows its encoded ``size`` so that a Track can keep its
serialized byte length in step with edits without re-encoding.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Union

from smf_library.codec import vlq
from smf_library.errors import OutOfRangeError, StateError
from smf_library.lib.meta_types import MetaType, meta_name

META_STATUS = 0xFF
SYSEX_START = 0xF0
SYSEX_ESCAPE = 0xF7


class EventKind(Enum):
    CHANNEL = "channel"
    SYSEX = "sysex"
    META = "meta"


class ChannelOp(IntEnum):
    """High nibble of a channel status byte."""

    NOTE_OFF = 0x8
    NOTE_ON = 0x9
    POLY_PRESSURE = 0xA
    CONTROL_CHANGE = 0xB
    PROGRAM_CHANGE = 0xC
    CHANNEL_PRESSURE = 0xD
    PITCH_BEND = 0xE

    @property
    def data_length(self) -> int:
        return _OP_INFO[self][1]

    @property
    def label(self) -> str:
        return _OP_INFO[self][0]


# fmt: off
_OP_INFO: dict[ChannelOp, tuple[str, int]] = {
    ChannelOp.NOTE_OFF:         ("Note Off", 2),
    ChannelOp.NOTE_ON:          ("Note On", 2),
    ChannelOp.POLY_PRESSURE:    ("Polyphonic Key Pressure", 2),
    ChannelOp.CONTROL_CHANGE:   ("Control Change", 2),
    ChannelOp.PROGRAM_CHANGE:   ("Program Change", 1),
    ChannelOp.CHANNEL_PRESSURE: ("Channel Pressure", 1),
    ChannelOp.PITCH_BEND:       ("Pitch Bend", 2),
}
# fmt: on

NOTE_OPS = frozenset({ChannelOp.NOTE_OFF, ChannelOp.NOTE_ON, ChannelOp.POLY_PRESSURE})


def check_data_byte(value: int, what: str = "data byte") -> int:
    """Raise :class:`OutOfRangeError` unless *value* fits in 7 bits."""
    if not isinstance(value, int) or value < 0 or value > 127:
        raise OutOfRangeError(f"{what} {value!r} out of range (0-127)")
    return value


def check_channel(channel: int) -> int:
    if not isinstance(channel, int) or channel < 0 or channel > 15:
        raise OutOfRangeError(f"channel {channel!r} out of range (0-15)")
    return channel


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

@dataclass
class ChannelPayload:
    op: ChannelOp
    channel: int  # 0-15
    data: list[int]  # 1 or 2 data bytes, fixed by op
    running_status: bool = False  # status byte omitted on the wire

    def __post_init__(self) -> None:
        self.op = ChannelOp(self.op)
        check_channel(self.channel)
        self.data = list(self.data)
        if len(self.data) != self.op.data_length:
            raise OutOfRangeError(
                f"{self.op.label} takes {self.op.data_length} data byte(s), "
                f"got {len(self.data)}"
            )
        for value in self.data:
            check_data_byte(value)

    @property
    def status(self) -> int:
        return (self.op << 4) | self.channel

    @property
    def size(self) -> int:
        return len(self.data) + (0 if self.running_status else 1)

    @property
    def name(self) -> str:
        return self.op.label

    @property
    def velocity(self) -> int | None:
        """Velocity (note on/off) or pressure (polyphonic pressure)."""
        if self.op in NOTE_OPS:
            return self.data[1]
        return None

    @property
    def pitch_bend(self) -> int | None:
        """14-bit bend value, 0x2000 = centre (LSB is sent first)."""
        if self.op is ChannelOp.PITCH_BEND:
            return self.data[0] | (self.data[1] << 7)
        return None


@dataclass
class SysexPayload:
    status: int  # SYSEX_START or SYSEX_ESCAPE
    data: bytes = b""

    def __post_init__(self) -> None:
        if self.status not in (SYSEX_START, SYSEX_ESCAPE):
            raise OutOfRangeError(f"sysex status 0x{self.status:02X} is not F0/F7")
        self.data = bytes(self.data)

    @property
    def size(self) -> int:
        return 1 + vlq.encoded_width(len(self.data)) + len(self.data)

    @property
    def name(self) -> str:
        if self.status == SYSEX_START:
            return "System Exclusive"
        return "System Exclusive (continuation)"


@dataclass
class MetaPayload:
    meta_type: int  # 0-127
    data: bytes = b""

    def __post_init__(self) -> None:
        check_data_byte(self.meta_type, "meta type")
        self.data = bytes(self.data)

    @property
    def size(self) -> int:
        return 2 + vlq.encoded_width(len(self.data)) + len(self.data)

    @property
    def name(self) -> str:
        return meta_name(self.meta_type)

    @property
    def tempo(self) -> int | None:
        """Microseconds per quarter note for a Set Tempo event."""
        if self.meta_type == MetaType.SET_TEMPO and len(self.data) == 3:
            return int.from_bytes(self.data, "big")
        return None

    @property
    def bpm(self) -> float | None:
        tempo = self.tempo
        if not tempo:
            return None
        return 60_000_000 / tempo

    @property
    def text(self) -> str | None:
        """Decoded text for text-like meta events (latin-1, lossless)."""
        if 0x01 <= self.meta_type <= 0x0F:
            return self.data.decode("latin-1")
        return None


Payload = Union[ChannelPayload, SysexPayload, MetaPayload]


# ---------------------------------------------------------------------------
# Event
# ---------------------------------------------------------------------------

@dataclass
class Event:
    delta_time: int
    payload: Payload

    def __post_init__(self) -> None:
        if self.delta_time < 0 or self.delta_time > vlq.MAX_VALUE:
            raise OutOfRangeError(
                f"delta-time {self.delta_time} out of range (0-{vlq.MAX_VALUE:#x})"
            )

    # -- Factories ----------------------------------------------------------

    @classmethod
    def channel_event(
        cls,
        delta_time: int,
        op: ChannelOp,
        channel: int,
        *data: int,
        running_status: bool = False,
    ) -> Event:
        return cls(
            delta_time,
            ChannelPayload(op, channel, list(data), running_status=running_status),
        )

    @classmethod
    def note_on(cls, delta_time: int, channel: int, note: int, velocity: int) -> Event:
        return cls.channel_event(delta_time, ChannelOp.NOTE_ON, channel, note, velocity)

    @classmethod
    def note_off(cls, delta_time: int, channel: int, note: int, velocity: int = 0) -> Event:
        return cls.channel_event(delta_time, ChannelOp.NOTE_OFF, channel, note, velocity)

    @classmethod
    def program_change(cls, delta_time: int, channel: int, program: int) -> Event:
        return cls.channel_event(delta_time, ChannelOp.PROGRAM_CHANGE, channel, program)

    @classmethod
    def meta_event(cls, delta_time: int, meta_type: int, data: bytes = b"") -> Event:
        return cls(delta_time, MetaPayload(meta_type, data))

    @classmethod
    def end_of_track(cls, delta_time: int = 0) -> Event:
        return cls.meta_event(delta_time, MetaType.END_OF_TRACK)

    @classmethod
    def sysex_event(
        cls, delta_time: int, data: bytes, status: int = SYSEX_START
    ) -> Event:
        return cls(delta_time, SysexPayload(status, data))

    # -- Discriminant ------------------------------------------------------

    @property
    def kind(self) -> EventKind:
        if isinstance(self.payload, ChannelPayload):
            return EventKind.CHANNEL
        if isinstance(self.payload, SysexPayload):
            return EventKind.SYSEX
        return EventKind.META

    @property
    def status(self) -> int:
        """Status byte this event is (or would be) written with."""
        if isinstance(self.payload, MetaPayload):
            return META_STATUS
        return self.payload.status

    @property
    def name(self) -> str:
        return self.payload.name

    @property
    def size(self) -> int:
        """Encoded bytes: delta-time VLQ plus payload."""
        return vlq.encoded_width(self.delta_time) + self.payload.size

    def is_channel_event(self) -> bool:
        return isinstance(self.payload, ChannelPayload)

    def is_end_of_track(self) -> bool:
        return (
            isinstance(self.payload, MetaPayload)
            and self.payload.meta_type == MetaType.END_OF_TRACK
        )

    # -- Notes -------------------------------------------------------------

    def is_note_event(self) -> bool:
        """True for note-on, note-off and polyphonic pressure."""
        return isinstance(self.payload, ChannelPayload) and self.payload.op in NOTE_OPS

    @property
    def note(self) -> int | None:
        if self.is_note_event():
            return self.payload.data[0]
        return None

    def set_note(self, note: int) -> None:
        if not self.is_note_event():
            raise StateError(f"{self.name} event has no note number")
        self.payload.data[0] = check_data_byte(note, "note")

    # -- Programs ----------------------------------------------------------

    def is_program_change(self) -> bool:
        return (
            isinstance(self.payload, ChannelPayload)
            and self.payload.op is ChannelOp.PROGRAM_CHANGE
        )

    @property
    def program(self) -> int | None:
        if self.is_program_change():
            return self.payload.data[0]
        return None

    def set_program(self, program: int) -> None:
        if not self.is_program_change():
            raise StateError(f"{self.name} event has no program number")
        self.payload.data[0] = check_data_byte(program, "program")

    # -- Channels ----------------------------------------------------------

    @property
    def channel(self) -> int | None:
        if isinstance(self.payload, ChannelPayload):
            return self.payload.channel
        return None

    def set_channel(self, channel: int) -> None:
        """Move the event to *channel*.

        A changed channel changes the status byte, so the event can no
        longer ride on running status and its ``size`` may grow by one.
        Events after it in a track are fixed up by
        :meth:`Track.repair_running_status`.
        """
        if not isinstance(self.payload, ChannelPayload):
            raise StateError(f"{self.name} event has no channel")
        check_channel(channel)
        if channel != self.payload.channel:
            self.payload.running_status = False
        self.payload.channel = channel

    def copy(self) -> Event:
        return copy.deepcopy(self)
