"""Parser package: decode Standard MIDI Files and pitch names."""

from smf_library.parser.chunks import SmfParser, TrackDecoder, parse, parse_file
from smf_library.parser.pitch import parse_pitch, pitch_name

__all__ = [
    "parse",
    "parse_file",
    "parse_pitch",
    "pitch_name",
    "SmfParser",
    "TrackDecoder",
]
