"""Chords made of a root key, an optional suffix and an optional bass key.

The suffix is free text (``"sus4"``, ``"m7b5"``, ...) and is not validated
against a fixed vocabulary. Chords are immutable: every transformation
returns a new Chord.

Examples
--------
>>> str(Chord.parse("Esus4/G#").transpose(2))
'F#sus4/A#'
>>> str(Chord.parse("Am").to_numeral("C"))
'vi'
>>> str(Chord.parse("Em/A#").normalize())
'Em/Bb'
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from functools import lru_cache

from chordsheet.exceptions import ParseError
from chordsheet.theory.key import Key, replace_unicode_modifiers
from chordsheet.theory.tables import (
    NAMES_BY_TYPE,
    NUMERAL,
    NUMERIC,
    SOLFEGE,
    SUFFIX_MAPPING,
    SYMBOL,
    ChordType,
    Modifier,
)

# Suffix characters, allowing the one suffix that contains a slash
_SUFFIX = r"(?P<suffix>(?:6/9|[^/\s])*)"
_NUMERAL = r"VII|VI|V|IV|III|II|I|vii|vi|v|iv|iii|ii|i"

CHORD_REGEXES: dict[str, re.Pattern[str]] = {
    # "Fa" is not read as solfege when it starts "Faug" or "Fadd"
    SOLFEGE: re.compile(
        r"^(?P<base>Do|Re|Mi|Fa(?!ug|dd)|Sol|La|Si)(?P<modifier>[#b])?"
        + _SUFFIX
        + r"(?:/(?P<bass_base>Do|Re|Mi|Fa|Sol|La|Si)(?P<bass_modifier>[#b])?)?$"
    ),
    SYMBOL: re.compile(
        r"^(?P<base>[A-G])(?P<modifier>[#b])?"
        + _SUFFIX
        + r"(?:/(?P<bass_base>[A-G])(?P<bass_modifier>[#b])?)?$"
    ),
    NUMERIC: re.compile(
        r"^(?P<modifier>[#b])?(?P<base>[1-7])"
        + _SUFFIX
        + r"(?:/(?P<bass_modifier>[#b])?(?P<bass_base>[1-7]))?$"
    ),
    NUMERAL: re.compile(
        rf"^(?P<modifier>[#b])?(?P<base>{_NUMERAL})"
        + _SUFFIX
        + rf"(?:/(?P<bass_modifier>[#b])?(?P<bass_base>{_NUMERAL}))?$"
    ),
}

# Suffix prefixes that mark a chord as minor, longest first
MINOR_SUFFIX_PREFIXES: tuple[str, ...] = ("min", "mi", "m")


def is_minor_suffix(suffix: str | None) -> bool:
    """Check whether a suffix makes a chord minor.

    Examples
    --------
    >>> is_minor_suffix("m7")
    True
    >>> is_minor_suffix("maj7")
    False
    """
    return bool(suffix) and suffix.startswith("m") and not suffix.startswith("maj")


def strip_minor_suffix(suffix: str | None) -> str | None:
    """Remove the minor sign from a suffix (``"m7"`` -> ``"7"``)."""
    if not is_minor_suffix(suffix):
        return suffix
    for prefix in MINOR_SUFFIX_PREFIXES:
        if suffix.startswith(prefix):
            return suffix[len(prefix) :] or None
    return suffix


def normalize_chord_suffix(suffix: str | None) -> str | None:
    """Rewrite a suffix to its canonical spelling.

    Examples
    --------
    >>> normalize_chord_suffix("sus2")
    '2'
    >>> normalize_chord_suffix("7b9")
    '7b9'
    """
    if suffix is None:
        return None
    return SUFFIX_MAPPING.get(suffix, suffix) or None


def _key_from_match(
    chord_type: ChordType, base: str, modifier: Modifier | None, *, minor: bool
) -> Key:
    if chord_type == NUMERAL:
        minor = base.islower()
        base = base.upper()
    index = NAMES_BY_TYPE[chord_type].index(base)
    return Key.from_natural(chord_type, index, modifier, minor=minor, preferred_modifier=modifier)


@dataclass(frozen=True)
class Chord:
    """A chord: root key, optional suffix and optional bass key.

    Parameters
    ----------
    root : Key
        The root of the chord. Its ``minor`` flag mirrors the suffix.
    suffix : str | None
        Chord quality as written, e.g. ``"m7"``, ``"sus4"``.
    bass : Key | None
        Bass note of a slash chord, same notational type as the root.
    """

    root: Key
    suffix: str | None = None
    bass: Key | None = None

    def __post_init__(self) -> None:
        if self.bass is not None and self.bass.type != self.root.type:
            msg = f"Root ({self.root.type}) and bass ({self.bass.type}) must have the same type"
            raise ValueError(msg)

    @classmethod
    def parse(cls, chord_string: str | None) -> Chord | None:
        """Parse a chord string, returning None when it is not recognized.

        Surrounding whitespace is ignored, so ``"  E/G# \\n"`` is valid.

        Examples
        --------
        >>> Chord.parse("Bbm7/F").suffix
        'm7'
        >>> Chord.parse("b3sus4").root.number
        3
        >>> Chord.parse("Lam").root.minor
        True
        >>> Chord.parse("Hello") is None
        True
        """
        if not chord_string:
            return None

        trimmed = replace_unicode_modifiers(chord_string.strip())
        for chord_type, regex in CHORD_REGEXES.items():
            match = regex.match(trimmed)
            if match:
                return cls._from_match(chord_type, match)
        return None

    @classmethod
    def parse_or_fail(cls, chord_string: str | None) -> Chord:
        """Parse a chord string, raising ParseError when it is not recognized."""
        chord = cls.parse(chord_string)
        if chord is None:
            raise ParseError(chord_string, "chord")
        return chord

    @classmethod
    def _from_match(cls, chord_type: ChordType, match: re.Match[str]) -> Chord:
        suffix = match.group("suffix") or None
        root = _key_from_match(
            chord_type,
            match.group("base"),
            match.group("modifier"),
            minor=is_minor_suffix(suffix),
        )
        bass = None
        if match.group("bass_base"):
            bass = _key_from_match(
                chord_type, match.group("bass_base"), match.group("bass_modifier"), minor=False
            )
        return cls(root=root, suffix=suffix, bass=bass)

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    @property
    def type(self) -> ChordType:
        return self.root.type

    def is_chord_symbol(self) -> bool:
        return self.root.is_chord_symbol()

    def is_chord_solfege(self) -> bool:
        return self.root.is_chord_solfege()

    def is_numeric(self) -> bool:
        return self.root.is_numeric()

    def is_numeral(self) -> bool:
        return self.root.is_numeral()

    def is_minor(self) -> bool:
        return self.root.minor

    def make_minor(self) -> Chord:
        """Return the minor version of the chord (C -> Cm, IV -> iv)."""
        if self.is_minor():
            return self
        suffix = self.suffix
        if not self.is_numeral():
            suffix = f"m{suffix or ''}"
        return replace(self, root=self.root.make_minor(), suffix=suffix)

    # ------------------------------------------------------------------
    # Transformations
    # ------------------------------------------------------------------

    def transpose(self, delta: int) -> Chord:
        """Transpose root and bass by ``delta`` semitones.

        Examples
        --------
        >>> str(Chord.parse("C/G").transpose(2))
        'D/A'
        >>> str(Chord.parse("Sib").transpose(-1))
        'La'
        """
        return replace(
            self,
            root=self.root.transpose(delta),
            bass=self.bass.transpose(delta) if self.bass else None,
        )

    def transpose_up(self) -> Chord:
        return self.transpose(1)

    def transpose_down(self) -> Chord:
        return self.transpose(-1)

    def use_modifier(self, new_modifier: Modifier) -> Chord:
        """Respell root and bass with ``new_modifier`` where possible."""
        return replace(
            self,
            root=self.root.use_modifier(new_modifier),
            bass=self.bass.use_modifier(new_modifier) if self.bass else None,
        )

    def normalize(self, key: Key | str | None = None, *, normalize_suffix: bool = True) -> Chord:
        """Normalize root and bass spelling, and optionally the suffix.

        The root is normalized with :meth:`Key.normalize` and, when ``key``
        is given, spelled the way ``key`` writes it. The bass is spelled
        relative to the root; for minor chords that means the root's
        relative major, so ``Em/A#`` becomes ``Em/Bb``.

        Parameters
        ----------
        key : Key | str | None
            Key the chord is played in.
        normalize_suffix : bool
            Rewrite the suffix with the suffix alias table.

        Examples
        --------
        >>> str(Chord.parse("Fbsus2").normalize())
        'E2'
        >>> str(Chord.parse("A#").normalize("F"))
        'Bb'
        """
        root = self.root.normalize()
        if key is not None:
            root = root.normalize_enharmonics(key)

        bass = None
        if self.bass is not None:
            bass = self.bass.normalize().normalize_enharmonics(root)

        suffix = normalize_chord_suffix(self.suffix) if normalize_suffix else self.suffix
        return Chord(root=root, suffix=suffix, bass=bass)

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    def convert(self, target_type: ChordType, reference_key: Key | str | None = None) -> Chord:
        """Convert the chord to another notational type.

        Numerals carry minor-ness in their case, so a leading minor sign in
        the suffix is dropped when converting to a numeral and added back
        when converting from one.

        Raises
        ------
        InvalidConversionError
            If a required reference key is missing.
        """
        if self.type == target_type:
            return self

        root = self.root.convert(target_type, reference_key)
        bass = None
        if self.bass is not None:
            bass = self.bass.convert(target_type, reference_key)
            if target_type != NUMERAL:
                bass = bass.to_major()

        suffix = self.suffix
        if target_type == NUMERAL and root.minor:
            suffix = strip_minor_suffix(suffix)
        elif self.is_numeral() and root.minor:
            suffix = f"m{suffix or ''}"
        return Chord(root=root, suffix=suffix, bass=bass)

    def to_chord_symbol(self, reference_key: Key | str | None = None) -> Chord:
        """Convert to a chord symbol, e.g. numeric ``#4`` in ``E`` becomes ``A#``."""
        return self.convert(SYMBOL, reference_key)

    def to_chord_solfege(self, reference_key: Key | str | None = None) -> Chord:
        """Convert to solfege, e.g. numeric ``#4`` in ``Mi`` becomes ``La#``."""
        return self.convert(SOLFEGE, reference_key)

    def to_numeric(self, reference_key: Key | str | None = None) -> Chord:
        """Convert to a numeric chord, e.g. ``A#`` in ``E`` becomes ``#4``."""
        return self.convert(NUMERIC, reference_key)

    def to_numeral(self, reference_key: Key | str | None = None) -> Chord:
        """Convert to a numeral chord, e.g. ``A#`` in ``E`` becomes ``#IV``."""
        return self.convert(NUMERAL, reference_key)

    def to_chord_symbol_string(self, reference_key: Key | str | None = None) -> str:
        return str(self.to_chord_symbol(reference_key))

    def to_chord_solfege_string(self, reference_key: Key | str | None = None) -> str:
        return str(self.to_chord_solfege(reference_key))

    def to_numeric_string(self, reference_key: Key | str | None = None) -> str:
        return str(self.to_numeric(reference_key))

    def to_numeral_string(self, reference_key: Key | str | None = None) -> str:
        return str(self.to_numeral(reference_key))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def to_string(self, *, use_unicode_modifier: bool = False) -> str:
        """Render the chord, e.g. ``Esus4/G#`` or ``1sus4/#3``.

        Examples
        --------
        >>> Chord.parse("Bb/D").to_string(use_unicode_modifier=True)
        'B♭/D'
        """
        chord_string = self.root.to_string(show_minor=False, use_unicode_modifier=use_unicode_modifier)
        chord_string += self.suffix or ""
        if self.bass is not None:
            bass = self.bass.to_string(show_minor=False, use_unicode_modifier=use_unicode_modifier)
            chord_string += f"/{bass}"
        return chord_string

    def __str__(self) -> str:
        return self.to_string()


@lru_cache(maxsize=4096)
def parse_chord(chord_string: str) -> Chord | None:
    """Parse a chord string, sharing results between equal strings.

    Chords are immutable, so one parsed instance can back every
    chord/lyrics pair holding the same text.
    """
    return Chord.parse(chord_string)
