"""Key and chord theory engine.

Parses keys and chords in four notational types (symbol, solfege, numeric
and numeral), transposes them, converts between types and normalizes
enharmonic spellings.
"""

from chordsheet.theory.chord import Chord, normalize_chord_suffix, parse_chord
from chordsheet.theory.key import Key
from chordsheet.theory.tables import (
    FLAT,
    NUMERAL,
    NUMERIC,
    SHARP,
    SOLFEGE,
    SYMBOL,
    ChordType,
    Modifier,
)

__all__ = [
    "FLAT",
    "NUMERAL",
    "NUMERIC",
    "SHARP",
    "SOLFEGE",
    "SYMBOL",
    "Chord",
    "ChordType",
    "Key",
    "Modifier",
    "normalize_chord_suffix",
    "parse_chord",
]
