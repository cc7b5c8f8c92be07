"""Build a song catalog from the ``.mid`` files under a directory.

Usage::

    from smf_library.library import make_library

    catalog = make_library("/path/to/midi")
    print(catalog.names())
"""

from __future__ import annotations

import logging
from pathlib import Path

from smf_library.errors import DuplicateKeyError, ParseError
from smf_library.model.catalog import CatalogIndex
from smf_library.parser import parse_file

logger = logging.getLogger(__name__)

MIDI_SUFFIXES = (".mid", ".midi")


def iter_midi_files(directory: str | Path) -> list[Path]:
    """Every MIDI file below *directory*, recursively, in sorted order."""
    root = Path(directory)
    if not root.is_dir():
        raise NotADirectoryError(f"'{directory}' is not a directory")
    return sorted(
        path
        for path in root.rglob("*")
        if path.is_file() and path.suffix.lower() in MIDI_SUFFIXES
    )


def make_library(
    directory: str | Path,
    catalog: CatalogIndex | None = None,
    *,
    strict: bool = False,
) -> CatalogIndex:
    """Parse every MIDI file under *directory* into *catalog*.

    Songs are keyed by file name.  A second file with an already cataloged
    name is dropped with a warning, as is any file that fails to parse.
    """
    if catalog is None:
        catalog = CatalogIndex()

    for path in iter_midi_files(directory):
        try:
            song = parse_file(path, strict=strict)
        except ParseError as exc:
            logger.warning("skipping %s: %s", path, exc)
            continue
        for message in song.warnings:
            logger.info("%s: %s", path, message)
        try:
            catalog.insert(song)
        except DuplicateKeyError:
            logger.warning("duplicate song '%s' found in library (%s)", song.name, path)

    logger.debug("cataloged %d songs from %s", len(catalog), directory)
    return catalog
