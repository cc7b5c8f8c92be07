"""General MIDI Level 1 program names, grouped in families of eight."""

from __future__ import annotations

# fmt: off
INSTRUMENT_FAMILIES: dict[str, tuple[str, ...]] = {
    "Piano": (
        "acoustic-grand-piano", "bright-acoustic-piano", "electric-grand-piano",
        "honky-tonk-piano", "electric-piano-1", "electric-piano-2",
        "harpsichord", "clavinet",
    ),
    "Chromatic Percussion": (
        "celesta", "glockenspiel", "music-box", "vibraphone", "marimba",
        "xylophone", "tubular-bells", "dulcimer",
    ),
    "Organ": (
        "drawbar-organ", "percussive-organ", "rock-organ", "church-organ",
        "reed-organ", "accordion", "harmonica", "tango-accordion",
    ),
    "Guitar": (
        "acoustic-guitar-nylon", "acoustic-guitar-steel", "electric-guitar-jazz",
        "electric-guitar-clean", "electric-guitar-muted", "overdriven-guitar",
        "distortion-guitar", "guitar-harmonics",
    ),
    "Bass": (
        "acoustic-bass", "electric-bass-finger", "electric-bass-pick",
        "fretless-bass", "slap-bass-1", "slap-bass-2", "synth-bass-1",
        "synth-bass-2",
    ),
    "Strings": (
        "violin", "viola", "cello", "contrabass", "tremolo-strings",
        "pizzicato-strings", "orchestral-harp", "timpani",
    ),
    "Ensemble": (
        "string-ensemble-1", "string-ensemble-2", "synth-strings-1",
        "synth-strings-2", "choir-aahs", "voice-oohs", "synth-choir",
        "orchestra-hit",
    ),
    "Brass": (
        "trumpet", "trombone", "tuba", "muted-trumpet", "french-horn",
        "brass-section", "synth-brass-1", "synth-brass-2",
    ),
    "Reed": (
        "soprano-sax", "alto-sax", "tenor-sax", "baritone-sax", "oboe",
        "english-horn", "bassoon", "clarinet",
    ),
    "Pipe": (
        "piccolo", "flute", "recorder", "pan-flute", "blown-bottle",
        "shakuhachi", "whistle", "ocarina",
    ),
    "Synth Lead": (
        "lead-1-square", "lead-2-sawtooth", "lead-3-calliope", "lead-4-chiff",
        "lead-5-charang", "lead-6-voice", "lead-7-fifths", "lead-8-bass-lead",
    ),
    "Synth Pad": (
        "pad-1-new-age", "pad-2-warm", "pad-3-polysynth", "pad-4-choir",
        "pad-5-bowed", "pad-6-metallic", "pad-7-halo", "pad-8-sweep",
    ),
    "Synth Effects": (
        "fx-1-rain", "fx-2-soundtrack", "fx-3-crystal", "fx-4-atmosphere",
        "fx-5-brightness", "fx-6-goblins", "fx-7-echoes", "fx-8-sci-fi",
    ),
    "Ethnic": (
        "sitar", "banjo", "shamisen", "koto", "kalimba", "bagpipe", "fiddle",
        "shanai",
    ),
    "Percussive": (
        "tinkle-bell", "agogo", "steel-drums", "woodblock", "taiko-drum",
        "melodic-tom", "synth-drum", "reverse-cymbal",
    ),
    "Sound Effects": (
        "guitar-fret-noise", "breath-noise", "seashore", "bird-tweet",
        "telephone-ring", "helicopter", "applause", "gunshot",
    ),
}
# fmt: on

GM_INSTRUMENTS: dict[int, str] = {
    program: name
    for program, name in enumerate(
        name for family in INSTRUMENT_FAMILIES.values() for name in family
    )
}

_NAME_TO_PROGRAM: dict[str, int] = {name: num for num, name in GM_INSTRUMENTS.items()}
_FAMILY_NAMES: list[str] = list(INSTRUMENT_FAMILIES)


def _normalize(name: str) -> str:
    """Lowercase and hyphenate: ``"Acoustic Bass"`` -> ``"acoustic-bass"``."""
    return name.strip().lower().replace(" ", "-").replace("_", "-")


def instrument_to_program(name: str) -> int | None:
    """Look up a GM program number by instrument name.

    Exact (normalized) names win; otherwise the first program whose name
    contains the query is returned.
    """
    normalized = _normalize(name)
    if normalized in _NAME_TO_PROGRAM:
        return _NAME_TO_PROGRAM[normalized]
    for program_num in range(128):
        if normalized in GM_INSTRUMENTS[program_num]:
            return program_num
    return None


def program_to_instrument(program: int) -> str | None:
    """Look up a GM instrument name by program number (0-127)."""
    return GM_INSTRUMENTS.get(program)


def program_family(program: int) -> str | None:
    """Return the GM family (``"Brass"``, ``"Bass"``...) of *program*."""
    if not 0 <= program <= 127:
        return None
    return _FAMILY_NAMES[program // 8]


def family_programs(family: str) -> range:
    """Program numbers belonging to *family* (case-insensitive)."""
    for idx, name in enumerate(_FAMILY_NAMES):
        if name.lower() == family.strip().lower():
            return range(idx * 8, idx * 8 + 8)
    raise KeyError(f"Unknown instrument family '{family}'")
