"""Musical keys in symbol, solfege, numeric and numeral notation.

A :class:`Key` is an immutable value. Symbol and solfege keys are absolute:
their ``grade`` is a pitch class (C = 0). Numeric and numeral keys are
relative: their ``number`` is a scale degree (1-7) that only becomes a pitch
once it is placed against a reference key.

Examples
--------
>>> Key.parse("Bb").grade
10
>>> str(Key.parse("Am").transpose(2))
'Bm'
>>> str(Key.parse("#4").to_chord_symbol("E"))
'A#'
>>> Key.distance("C", "D")
2
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace

from chordsheet.exceptions import InvalidConversionError, ParseError
from chordsheet.theory.tables import (
    DEGREE_SPELLING,
    ENHARMONIC_NORMALIZATION,
    FLAT,
    FLAT_NATURAL_KEYS,
    MODIFIER_SHIFT,
    NAMES_BY_TYPE,
    NATURAL_GRADES,
    NUMERAL,
    NUMERIC,
    SHARP,
    SOLFEGE,
    SYMBOL,
    UNICODE_MODIFIERS,
    ChordType,
    Modifier,
)

KEY_REGEXES: dict[str, re.Pattern[str]] = {
    SYMBOL: re.compile(r"^(?P<note>[A-Ga-g])(?P<modifier>[#b])?(?P<minor>m)?$"),
    NUMERIC: re.compile(r"^(?P<modifier>[#b])?(?P<note>[1-7])(?P<minor>m)?$"),
    NUMERAL: re.compile(
        r"^(?P<modifier>[#b])?(?P<note>VII|VI|V|IV|III|II|I|vii|vi|v|iv|iii|ii|i)$"
    ),
    SOLFEGE: re.compile(
        r"^(?P<note>Do|Re|Mi|Fa|Sol|La|Si|do|re|mi|fa|sol|la|si)"
        r"(?P<modifier>[#b])?(?P<minor>m)?$"
    ),
}

# Order in which Key.parse tries the notational types
PARSE_ORDER: tuple[ChordType, ...] = (SYMBOL, NUMERIC, NUMERAL, SOLFEGE)


def replace_unicode_modifiers(text: str) -> str:
    """Replace ``♯`` and ``♭`` with their ASCII equivalents."""
    return text.replace(UNICODE_MODIFIERS[SHARP], SHARP).replace(UNICODE_MODIFIERS[FLAT], FLAT)


def spell_position(position: int, preferred: Modifier | None) -> tuple[int, Modifier | None]:
    """Spell a chromatic position as a natural index plus modifier.

    Parameters
    ----------
    position : int
        Pitch class or offset from a tonic (0-11).
    preferred : Modifier | None
        Modifier to use when the position falls between two naturals.
        Defaults to sharp.

    Returns
    -------
    tuple[int, Modifier | None]
        Natural index (0-6) and modifier.

    Examples
    --------
    >>> spell_position(1, "#")
    (0, '#')
    >>> spell_position(1, "b")
    (1, 'b')
    >>> spell_position(4, "b")
    (2, None)
    """
    position %= 12
    if position in NATURAL_GRADES:
        return NATURAL_GRADES.index(position), None
    if preferred == FLAT:
        return NATURAL_GRADES.index((position + 1) % 12), FLAT
    return NATURAL_GRADES.index((position - 1) % 12), SHARP


def spell_natural(index: int, position: int) -> tuple[int, Modifier | None] | None:
    """Spell a position on a fixed natural, if one modifier is enough.

    Returns None when the spelling would need a double modifier or would be
    one of the spellings that normalization collapses (E#, B#, Cb, Fb, ...).
    """
    index %= 7
    shift = (position - NATURAL_GRADES[index] + 6) % 12 - 6
    if shift == 0:
        return index, None
    modifier: Modifier = SHARP if shift == 1 else FLAT
    if abs(shift) > 1 or (index, modifier) in ENHARMONIC_NORMALIZATION:
        return None
    return index, modifier


def is_absolute_type(key_type: str) -> bool:
    return key_type in (SYMBOL, SOLFEGE)


@dataclass(frozen=True)
class Key:
    """A musical key in one of four notational types.

    Parameters
    ----------
    type : ChordType
        ``"symbol"``, ``"solfege"``, ``"numeric"`` or ``"numeral"``.
    grade : int | None
        Pitch class (0-11, C = 0) for symbol and solfege keys, None otherwise.
    number : int | None
        Scale degree (1-7) for numeric and numeral keys, None otherwise.
    modifier : Modifier | None
        ``"#"``, ``"b"`` or None.
    minor : bool
        Whether the key is minor.
    reference_key_grade : int | None
        Pitch class of the tonic a relative key was derived from, if known.
    preferred_modifier : Modifier | None
        Modifier used to spell results of transposition.
    original_key_string : str | None
        Text the key was parsed from.
    """

    type: ChordType
    grade: int | None = None
    number: int | None = None
    modifier: Modifier | None = None
    minor: bool = False
    reference_key_grade: int | None = field(default=None, compare=False)
    preferred_modifier: Modifier | None = field(default=None, compare=False)
    original_key_string: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.type not in NAMES_BY_TYPE:
            msg = f"Unknown key type: {self.type}"
            raise ValueError(msg)
        if self.modifier not in MODIFIER_SHIFT:
            msg = f"Unknown modifier: {self.modifier}"
            raise ValueError(msg)

        if is_absolute_type(self.type):
            if self.grade is None or self.number is not None or not 0 <= self.grade < 12:
                msg = f"A {self.type} key needs a grade between 0 and 11"
                raise ValueError(msg)
            if (self.grade - MODIFIER_SHIFT[self.modifier]) % 12 not in NATURAL_GRADES:
                msg = f"Grade {self.grade} cannot be spelled with modifier {self.modifier}"
                raise ValueError(msg)
        elif self.number is None or self.grade is not None or not 1 <= self.number <= 7:
            msg = f"A {self.type} key needs a number between 1 and 7"
            raise ValueError(msg)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, key_string: str | None, key_type: ChordType | None = None) -> Key | None:
        """Parse a key string, returning None when it is not recognized.

        Parameters
        ----------
        key_string : str | None
            The key text, e.g. ``"Eb"``, ``"#3"``, ``"vi"`` or ``"Lam"``.
        key_type : ChordType | None
            Restrict parsing to one notational type.

        Returns
        -------
        Key | None
            The parsed key.

        Examples
        --------
        >>> Key.parse(" F#m ").minor
        True
        >>> Key.parse("IV").number
        4
        >>> Key.parse("H") is None
        True
        """
        if not key_string:
            return None

        trimmed = replace_unicode_modifiers(key_string.strip())
        if not trimmed:
            return None

        types = (key_type,) if key_type else PARSE_ORDER
        for candidate in types:
            key = cls._parse_as_type(trimmed, candidate)
            if key is not None:
                return replace(key, original_key_string=key_string)
        return None

    @classmethod
    def parse_or_fail(cls, key_string: str | None, key_type: ChordType | None = None) -> Key:
        """Parse a key string, raising ParseError when it is not recognized."""
        key = cls.parse(key_string, key_type)
        if key is None:
            raise ParseError(key_string, "key")
        return key

    @classmethod
    def _parse_as_type(cls, trimmed: str, key_type: ChordType) -> Key | None:
        match = KEY_REGEXES[key_type].match(trimmed)
        if not match:
            return None

        note = match.group("note")
        modifier = match.group("modifier")
        if key_type == NUMERAL:
            minor = note.islower()
            note = note.upper()
        else:
            minor = bool(match.group("minor"))
            note = note.upper() if key_type == SYMBOL else note.capitalize()

        index = NAMES_BY_TYPE[key_type].index(note)
        return cls.from_natural(key_type, index, modifier, minor=minor, preferred_modifier=modifier)

    @classmethod
    def from_natural(
        cls,
        key_type: ChordType,
        index: int,
        modifier: Modifier | None = None,
        *,
        minor: bool = False,
        reference_key_grade: int | None = None,
        preferred_modifier: Modifier | None = None,
    ) -> Key:
        """Build a key from a natural index (0-6) and a modifier.

        Examples
        --------
        >>> str(Key.from_natural("symbol", 6, "b"))
        'Bb'
        >>> str(Key.from_natural("numeric", 2, "b", minor=True))
        'b3m'
        """
        index %= 7
        if is_absolute_type(key_type):
            grade = (NATURAL_GRADES[index] + MODIFIER_SHIFT[modifier]) % 12
            return cls(
                type=key_type,
                grade=grade,
                modifier=modifier,
                minor=minor,
                preferred_modifier=preferred_modifier,
            )
        return cls(
            type=key_type,
            number=index + 1,
            modifier=modifier,
            minor=minor,
            reference_key_grade=reference_key_grade,
            preferred_modifier=preferred_modifier,
        )

    @classmethod
    def wrap(cls, key: Key | str | None) -> Key | None:
        """Return ``key`` as a Key, parsing it when it is a string."""
        if key is None or isinstance(key, Key):
            return key
        return cls.parse(key)

    @classmethod
    def wrap_or_fail(cls, key: Key | str | None) -> Key:
        """Like :meth:`wrap`, but raise ParseError when no key results."""
        wrapped = cls.wrap(key)
        if wrapped is None:
            raise ParseError(None if key is None else str(key), "key")
        return wrapped

    @staticmethod
    def equals(one_key: Key | None, other_key: Key | None) -> bool:
        """Compare two optional keys."""
        if one_key is None or other_key is None:
            return one_key is other_key
        return one_key == other_key

    # ------------------------------------------------------------------
    # Distances
    # ------------------------------------------------------------------

    @staticmethod
    def distance(one_key: Key | str, other_key: Key | str) -> int:
        """Calculate the distance in semitones from one key to another.

        Parameters
        ----------
        one_key : Key | str
            The origin key.
        other_key : Key | str
            The target key.

        Returns
        -------
        int
            Upward distance in semitones, between 0 and 11.

        Examples
        --------
        >>> Key.distance("C", "D")
        2
        >>> Key.distance("D", "C")
        10
        >>> Key.distance("Do", "Re")
        2
        """
        return Key.wrap_or_fail(one_key).distance_to(other_key)

    def distance_to(self, other_key: Key | str) -> int:
        """Upward distance in semitones from this key to ``other_key``."""
        other = Key.wrap_or_fail(other_key)
        return (other.effective_grade - self.effective_grade) % 12

    @property
    def natural_index(self) -> int:
        """Index (0-6) of the natural this key is spelled on."""
        if is_absolute_type(self.type):
            natural = (self.grade - MODIFIER_SHIFT[self.modifier]) % 12
            return NATURAL_GRADES.index(natural)
        return self.number - 1

    @property
    def position(self) -> int:
        """Pitch class for absolute keys, offset from the tonic for relative keys."""
        if is_absolute_type(self.type):
            return self.grade
        return (NATURAL_GRADES[self.number - 1] + MODIFIER_SHIFT[self.modifier]) % 12

    @property
    def effective_grade(self) -> int:
        """Position on the 12 semitone scale used for distances."""
        if self.reference_key_grade is None or is_absolute_type(self.type):
            return self.position
        return (self.position + self.reference_key_grade) % 12

    # ------------------------------------------------------------------
    # Type predicates
    # ------------------------------------------------------------------

    def is_type(self, key_type: ChordType) -> bool:
        return self.type == key_type

    def is_chord_symbol(self) -> bool:
        return self.type == SYMBOL

    def is_chord_solfege(self) -> bool:
        return self.type == SOLFEGE

    def is_numeric(self) -> bool:
        return self.type == NUMERIC

    def is_numeral(self) -> bool:
        return self.type == NUMERAL

    def is_minor(self) -> bool:
        return self.minor

    # ------------------------------------------------------------------
    # Transformations
    # ------------------------------------------------------------------

    def make_minor(self) -> Key:
        return replace(self, minor=True)

    def to_major(self) -> Key:
        return replace(self, minor=False)

    @property
    def relative_major(self) -> Key:
        """The major key sharing this minor key's signature (Am -> C)."""
        if not self.minor:
            return self
        return self._move(steps=2, semitones=3, minor=False)

    @property
    def relative_minor(self) -> Key:
        """The minor key sharing this major key's signature (C -> Am)."""
        if self.minor:
            return self
        return self._move(steps=5, semitones=9, minor=True)

    def _move(self, *, steps: int, semitones: int, minor: bool) -> Key:
        index = (self.natural_index + steps) % 7
        position = (self.position + semitones) % 12
        spelled = spell_natural(index, position) or spell_position(position, self.modifier)
        return self._respell(*spelled, minor=minor)

    def _respell(
        self,
        index: int,
        modifier: Modifier | None,
        *,
        minor: bool | None = None,
        preferred_modifier: Modifier | None = None,
    ) -> Key:
        return Key.from_natural(
            self.type,
            index,
            modifier,
            minor=self.minor if minor is None else minor,
            reference_key_grade=self.reference_key_grade,
            preferred_modifier=preferred_modifier or modifier or self.preferred_modifier,
        )

    def transpose(self, delta: int) -> Key:
        """Transpose the key by ``delta`` semitones.

        The type and minor-ness are kept. Positions between two naturals are
        spelled with the key's own modifier, or its preferred modifier, or
        sharp when moving up and flat when moving down.

        Examples
        --------
        >>> str(Key.parse("C").transpose(1))
        'C#'
        >>> str(Key.parse("D").transpose(-1))
        'Db'
        >>> str(Key.parse("Bb").transpose(3))
        'Db'
        >>> str(Key.parse("b3").transpose(1))
        '3'
        """
        if delta % 12 == 0:
            return self

        preferred = self.modifier or self.preferred_modifier or (SHARP if delta > 0 else FLAT)
        index, modifier = spell_position(self.position + delta, preferred)
        return self._respell(index, modifier, preferred_modifier=preferred)

    def transpose_up(self) -> Key:
        return self.transpose(1)

    def transpose_down(self) -> Key:
        return self.transpose(-1)

    def use_modifier(self, new_modifier: Modifier | None) -> Key:
        """Respell the key with ``new_modifier`` where that changes anything.

        Examples
        --------
        >>> str(Key.parse("C#").use_modifier("b"))
        'Db'
        >>> str(Key.parse("C").use_modifier("b"))
        'C'
        """
        if new_modifier is None:
            return self
        if self.modifier is None or self.modifier == new_modifier:
            return replace(self, preferred_modifier=new_modifier)
        index, modifier = spell_position(self.position, new_modifier)
        return self._respell(index, modifier, preferred_modifier=new_modifier)

    def normalize(self) -> Key:
        """Collapse awkward enharmonic spellings.

        Fb becomes E, Cb becomes B, B# becomes C and E# becomes F. The same
        applies to solfege (Fab -> Mi, ...) and degrees (b4 -> 3, #7 -> 1, ...).

        Examples
        --------
        >>> str(Key.parse("Fb").normalize())
        'E'
        >>> str(Key.parse("Si#").normalize())
        'Do'
        >>> str(Key.parse("b1").normalize())
        '7'
        """
        key = self
        if self.modifier is not None:
            target = ENHARMONIC_NORMALIZATION.get((self.natural_index, self.modifier))
            if target is not None:
                key = self._respell(target, None)

        preferred = self.preferred_modifier
        if key.modifier is not None and preferred is not None and preferred != key.modifier:
            key = key.use_modifier(preferred)
        return key

    def normalize_enharmonics(self, key: Key | str | None) -> Key:
        """Spell this key the way it is conventionally written in ``key``.

        Diatonic notes follow the key's scale. The remaining notes are spelled
        as the flat second, flat third, sharp fourth, flat sixth and flat
        seventh of the key. Minor keys use the spelling of their relative
        major. Relative keys are returned unchanged.

        Examples
        --------
        >>> str(Key.parse("A#").normalize_enharmonics("F"))
        'Bb'
        >>> str(Key.parse("Gb").normalize_enharmonics("D"))
        'F#'
        >>> str(Key.parse("A#").normalize_enharmonics("Em"))
        'Bb'
        """
        reference = Key.wrap(key)
        if reference is None or not is_absolute_type(self.type) or not is_absolute_type(reference.type):
            return self

        tonic = reference.relative_major.normalize()
        degree_index, _ = DEGREE_SPELLING[(self.grade - tonic.grade) % 12]
        spelled = spell_natural(tonic.natural_index + degree_index, self.grade)
        if spelled is None:
            spelled = spell_position(self.grade, tonic.key_signature_modifier)
        return self._respell(*spelled)

    @property
    def key_signature_modifier(self) -> Modifier:
        """Modifier used by this (major) key's signature."""
        if self.modifier is not None:
            return self.modifier
        return FLAT if self.natural_index in FLAT_NATURAL_KEYS else SHARP

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    def convert(self, target_type: ChordType, reference_key: Key | str | None = None) -> Key:
        """Convert the key to another notational type.

        Conversions between symbol and solfege, and between numeric and
        numeral, need no reference key. Every other conversion needs an
        absolute (symbol or solfege) reference key.

        Raises
        ------
        InvalidConversionError
            If a required reference key is missing or is itself relative.
        """
        if self.type == target_type:
            return self
        if is_absolute_type(self.type) == is_absolute_type(target_type):
            return replace(self, type=target_type)

        reference = Key.wrap(reference_key)
        if reference is None:
            raise InvalidConversionError(self, target_type)
        if not is_absolute_type(reference.type):
            raise InvalidConversionError(
                self, target_type, f"reference key {reference} is not a symbol or solfege key"
            )

        if is_absolute_type(target_type):
            index = reference.natural_index + self.natural_index
            grade = (reference.grade + self.position) % 12
            spelled = spell_natural(index, grade) or spell_position(
                grade, self.modifier or reference.key_signature_modifier
            )
            return Key.from_natural(
                target_type, *spelled, minor=self.minor, preferred_modifier=spelled[1]
            )

        index = self.natural_index - reference.natural_index
        offset = (self.grade - reference.grade) % 12
        spelled = spell_natural(index, offset) or DEGREE_SPELLING[offset]
        return Key.from_natural(
            target_type,
            *spelled,
            minor=self.minor,
            reference_key_grade=reference.grade,
            preferred_modifier=spelled[1],
        )

    def to_chord_symbol(self, reference_key: Key | str | None = None) -> Key:
        return self.convert(SYMBOL, reference_key)

    def to_chord_solfege(self, reference_key: Key | str | None = None) -> Key:
        return self.convert(SOLFEGE, reference_key)

    def to_numeric(self, reference_key: Key | str | None = None) -> Key:
        return self.convert(NUMERIC, reference_key)

    def to_numeral(self, reference_key: Key | str | None = None) -> Key:
        return self.convert(NUMERAL, reference_key)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @property
    def note(self) -> str:
        """Name of the natural, without modifier or minor sign."""
        name = NAMES_BY_TYPE[self.type][self.natural_index]
        if self.type == NUMERAL and self.minor:
            return name.lower()
        return name

    @property
    def minor_sign(self) -> str:
        return "m" if self.minor and self.type != NUMERAL else ""

    def modifier_string(self, *, use_unicode_modifier: bool = False) -> str:
        if self.modifier is None:
            return ""
        if use_unicode_modifier:
            return UNICODE_MODIFIERS[self.modifier]
        return self.modifier

    def to_string(self, *, show_minor: bool = True, use_unicode_modifier: bool = False) -> str:
        """Render the key.

        Numerals always show minor-ness through their case.

        Examples
        --------
        >>> Key.parse("F#m").to_string(show_minor=False)
        'F#'
        >>> Key.parse("Bb").to_string(use_unicode_modifier=True)
        'B♭'
        >>> Key.parse("bvi").to_string()
        'bvi'
        """
        modifier = self.modifier_string(use_unicode_modifier=use_unicode_modifier)
        minor_sign = self.minor_sign if show_minor else ""
        if is_absolute_type(self.type):
            return f"{self.note}{modifier}{minor_sign}"
        return f"{modifier}{self.note}{minor_sign}"

    def __str__(self) -> str:
        return self.to_string()
