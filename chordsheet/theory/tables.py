"""Name tables shared by keys and chords.

Every notational type is backed by the same seven "natural" positions:
the white keys C D E F G A B for symbols, Do Re Mi Fa Sol La Si for solfege
and the major scale degrees 1-7 (I-VII) for numerics and numerals. A
natural position plus an optional modifier is enough to spell any grade.
"""

from __future__ import annotations

from typing import Literal

ChordType = Literal["symbol", "solfege", "numeric", "numeral"]
Modifier = Literal["#", "b"]

SYMBOL: ChordType = "symbol"
SOLFEGE: ChordType = "solfege"
NUMERIC: ChordType = "numeric"
NUMERAL: ChordType = "numeral"

CHORD_TYPES: tuple[ChordType, ...] = (SYMBOL, SOLFEGE, NUMERIC, NUMERAL)

SHARP: Modifier = "#"
FLAT: Modifier = "b"

# Semitone shift applied by a modifier
MODIFIER_SHIFT: dict[str | None, int] = {
    SHARP: 1,
    FLAT: -1,
    None: 0,
}

UNICODE_MODIFIERS: dict[str, str] = {
    SHARP: "♯",
    FLAT: "♭",
}

# Grade of each natural position. For numerics these are the major scale
# offsets from the tonic, which is why one table serves all types.
NATURAL_GRADES: tuple[int, ...] = (0, 2, 4, 5, 7, 9, 11)

SYMBOL_NAMES: tuple[str, ...] = ("C", "D", "E", "F", "G", "A", "B")
SOLFEGE_NAMES: tuple[str, ...] = ("Do", "Re", "Mi", "Fa", "Sol", "La", "Si")
NUMERIC_NAMES: tuple[str, ...] = ("1", "2", "3", "4", "5", "6", "7")
NUMERAL_NAMES: tuple[str, ...] = ("I", "II", "III", "IV", "V", "VI", "VII")

NAMES_BY_TYPE: dict[str, tuple[str, ...]] = {
    SYMBOL: SYMBOL_NAMES,
    SOLFEGE: SOLFEGE_NAMES,
    NUMERIC: NUMERIC_NAMES,
    NUMERAL: NUMERAL_NAMES,
}

# Spellings that collapse onto a neighbouring natural:
# Fb -> E, Cb -> B, B# -> C, E# -> F (Fab -> Mi, b4 -> 3, #7 -> 1, ...)
ENHARMONIC_NORMALIZATION: dict[tuple[int, str], int] = {
    (3, FLAT): 2,
    (0, FLAT): 6,
    (6, SHARP): 0,
    (2, SHARP): 3,
}

# How each chromatic offset from a tonic is spelled as a scale degree:
# diatonic degrees stay natural, the others are b2, b3, #4, b6 and b7.
DEGREE_SPELLING: dict[int, tuple[int, Modifier | None]] = {
    0: (0, None),
    1: (1, FLAT),
    2: (1, None),
    3: (2, FLAT),
    4: (2, None),
    5: (3, None),
    6: (3, SHARP),
    7: (4, None),
    8: (5, FLAT),
    9: (5, None),
    10: (6, FLAT),
    11: (6, None),
}

# Natural major keys written with flats in their key signature (only F).
FLAT_NATURAL_KEYS: frozenset[int] = frozenset({3})

# Suffix spellings rewritten by Chord.normalize(normalize_suffix=True)
SUFFIX_MAPPING: dict[str, str] = {
    "M": "",
    "maj": "",
    "major": "",
    "min": "m",
    "mi": "m",
    "minor": "m",
    "-": "m",
    "sus2": "2",
    "sus4": "sus",
    "7sus4": "7sus",
    "M7": "maj7",
    "Maj7": "maj7",
    "ma7": "maj7",
    "^7": "maj7",
    "Δ": "maj7",
    "Δ7": "maj7",
    "min7": "m7",
    "mi7": "m7",
    "-7": "m7",
    "+": "aug",
    "#5": "aug",
    "(#5)": "aug",
    "o": "dim",
    "°": "dim",
    "o7": "dim7",
    "°7": "dim7",
    "ø": "m7b5",
    "ø7": "m7b5",
    "m7-5": "m7b5",
    "m7(b5)": "m7b5",
    "min7b5": "m7b5",
    "mmaj7": "m(maj7)",
    "mM7": "m(maj7)",
    "minmaj7": "m(maj7)",
    "add2": "2",
    "6/9": "69",
    "6add9": "69",
}
