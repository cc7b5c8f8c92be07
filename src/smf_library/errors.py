"""Custom exception hierarchy for smf-library."""

from __future__ import annotations


class SmfError(Exception):
    """Base exception for all smf-library errors."""


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class ParseError(SmfError):
    """Structural problem in a Standard MIDI File byte stream.

    ``offset`` is the position (relative to the buffer being decoded) at
    which the problem was detected, or ``None`` when it is not meaningful.
    """

    def __init__(self, message: str, offset: int | None = None) -> None:
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message)
        self.offset = offset


class BadMagicError(ParseError):
    """A chunk tag was not ``MThd`` / ``MTrk`` where one was required."""


class BadFormatError(ParseError):
    """Header format field outside {0, 1, 2}."""


class TruncatedStreamError(ParseError):
    """Input ended before a complete value could be read."""


class VlqOverflowError(ParseError):
    """Variable-length quantity still continuing after its fourth byte."""


class ChunkLengthMismatchError(ParseError):
    """Event data did not fit the declared chunk length."""


class InvalidMetaLengthError(ParseError):
    """Fixed-length meta event declared a different length."""


class UnknownEventTypeError(ParseError):
    """Status byte (or data byte) that no event decoder accepts."""


# ---------------------------------------------------------------------------
# Alterations
# ---------------------------------------------------------------------------

class ValidationError(SmfError, ValueError):
    """Invalid caller input.

    Subclasses both SmfError and ValueError so plain ``except ValueError``
    handlers keep working.
    """


class OutOfRangeError(ValidationError):
    """A value fell outside its domain (7-bit data byte, channel, VLQ...)."""


class StateError(SmfError):
    """Operation not valid for the current song or event."""


class InvalidFormatError(StateError):
    """Operation incompatible with ``Song.format``."""


class ChannelsExhaustedError(StateError):
    """All 16 MIDI channels are already in use."""


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class CatalogError(SmfError):
    """Base class for catalog index failures."""


class DuplicateKeyError(CatalogError):
    """A song with the same name is already cataloged."""


class NotFoundError(CatalogError, LookupError):
    """No song with the requested name is cataloged."""
