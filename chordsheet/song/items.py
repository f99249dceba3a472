"""Line items: directives, comments and chord/lyrics pairs.

All items are immutable. Methods that change an item return a new one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace

from chordsheet.exceptions import ParseError
from chordsheet.expressions import Composite, Literal, Ternary
from chordsheet.theory.chord import Chord, parse_chord
from chordsheet.theory.key import Key

# Directive names
TITLE = "title"
SUBTITLE = "subtitle"
ARTIST = "artist"
COMPOSER = "composer"
LYRICIST = "lyricist"
ARRANGER = "arranger"
COPYRIGHT = "copyright"
ALBUM = "album"
YEAR = "year"
KEY = "key"
TIME = "time"
TEMPO = "tempo"
DURATION = "duration"
CAPO = "capo"
SORTTITLE = "sorttitle"
TRANSPOSE = "transpose"
CHORD_STYLE = "chord_style"
META = "meta"

COMMENT = "comment"
COMMENT_ITALIC = "comment_italic"
COMMENT_BOX = "comment_box"
CHORUS = "chorus"

START_OF_VERSE = "start_of_verse"
END_OF_VERSE = "end_of_verse"
START_OF_CHORUS = "start_of_chorus"
END_OF_CHORUS = "end_of_chorus"
START_OF_BRIDGE = "start_of_bridge"
END_OF_BRIDGE = "end_of_bridge"
START_OF_TAB = "start_of_tab"
END_OF_TAB = "end_of_tab"
START_OF_GRID = "start_of_grid"
END_OF_GRID = "end_of_grid"

TEXTFONT = "textfont"
TEXTSIZE = "textsize"
TEXTCOLOUR = "textcolour"
CHORDFONT = "chordfont"
CHORDSIZE = "chordsize"
CHORDCOLOUR = "chordcolour"

ALIASES: dict[str, str] = {
    "t": TITLE,
    "st": SUBTITLE,
    "c": COMMENT,
    "ci": COMMENT_ITALIC,
    "cb": COMMENT_BOX,
    "soc": START_OF_CHORUS,
    "eoc": END_OF_CHORUS,
    "sov": START_OF_VERSE,
    "eov": END_OF_VERSE,
    "sob": START_OF_BRIDGE,
    "eob": END_OF_BRIDGE,
    "sot": START_OF_TAB,
    "eot": END_OF_TAB,
    "sog": START_OF_GRID,
    "eog": END_OF_GRID,
    "tf": TEXTFONT,
    "ts": TEXTSIZE,
    "tc": TEXTCOLOUR,
    "cf": CHORDFONT,
    "cs": CHORDSIZE,
    "cc": CHORDCOLOUR,
}

META_TAGS: frozenset[str] = frozenset(
    {
        TITLE,
        SUBTITLE,
        ARTIST,
        COMPOSER,
        LYRICIST,
        ARRANGER,
        COPYRIGHT,
        ALBUM,
        YEAR,
        KEY,
        TIME,
        TEMPO,
        DURATION,
        CAPO,
        SORTTITLE,
        CHORD_STYLE,
    }
)

CUSTOM_META_PREFIX = "x_"

RENDERABLE_TAGS: frozenset[str] = frozenset({COMMENT, COMMENT_ITALIC, COMMENT_BOX})

# Section directive -> section type
SECTION_START_TAGS: dict[str, str] = {
    START_OF_VERSE: "verse",
    START_OF_CHORUS: "chorus",
    START_OF_BRIDGE: "bridge",
    START_OF_TAB: "tab",
    START_OF_GRID: "grid",
}

SECTION_END_TAGS: dict[str, str] = {
    END_OF_VERSE: "verse",
    END_OF_CHORUS: "chorus",
    END_OF_BRIDGE: "bridge",
    END_OF_TAB: "tab",
    END_OF_GRID: "grid",
}

INLINE_FONT_TAGS: frozenset[str] = frozenset(
    {TEXTFONT, TEXTSIZE, TEXTCOLOUR, CHORDFONT, CHORDSIZE, CHORDCOLOUR}
)

TAG_RE = re.compile(r"^\{?\s*(?P<name>[^:}\s]+)\s*(?::\s*(?P<value>.*?))?\s*\}?$", re.DOTALL)
META_VALUE_RE = re.compile(r"^(?P<name>\S+)\s+(?P<value>.*)$", re.DOTALL)


@dataclass(frozen=True)
class Tag:
    """A directive such as ``{title: Let it be}`` or ``{soc}``.

    Short names are resolved on construction: ``Tag("t", "Song").name`` is
    ``"title"`` while ``original_name`` keeps ``"t"`` for formatting.

    Parameters
    ----------
    name : str
        Directive name, short or full.
    value : str
        Directive value, empty when the directive has none.
    original_name : str | None
        Name as written. Defaults to ``name``.
    line, column, offset : int | None
        Position of the directive in the source text.

    Examples
    --------
    >>> tag = Tag("soc", "Chorus 1")
    >>> tag.name, tag.original_name
    ('start_of_chorus', 'soc')
    >>> tag.is_section_start()
    True
    """

    name: str
    value: str = ""
    original_name: str | None = None
    line: int | None = field(default=None, compare=False)
    column: int | None = field(default=None, compare=False)
    offset: int | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        name = self.name.strip()
        if self.original_name is None:
            object.__setattr__(self, "original_name", name)
        object.__setattr__(self, "name", ALIASES.get(name, name))
        object.__setattr__(self, "value", (self.value or "").strip())

    @classmethod
    def parse(cls, tag: str | Tag | None) -> Tag | None:
        """Parse directive text, with or without the surrounding braces.

        ``{meta: artist Foo}`` is read as the ``artist`` directive.

        Examples
        --------
        >>> Tag.parse("{t: Let it be}").value
        'Let it be'
        >>> Tag.parse("{meta: artist The Beatles}").name
        'artist'
        >>> Tag.parse("{}") is None
        True
        """
        if isinstance(tag, Tag) or tag is None:
            return tag

        match = TAG_RE.match(tag.strip())
        if not match:
            return None

        name = match.group("name")
        value = match.group("value") or ""
        if name == META:
            meta = META_VALUE_RE.match(value.strip())
            if not meta:
                return None
            return cls(meta.group("name"), meta.group("value"), original_name=META)
        return cls(name, value)

    @classmethod
    def parse_or_fail(cls, tag: str | Tag | None) -> Tag:
        parsed = cls.parse(tag)
        if parsed is None:
            raise ParseError(None if tag is None else str(tag), "tag")
        return parsed

    def has_value(self) -> bool:
        return bool(self.value)

    def is_meta_tag(self) -> bool:
        """Check for standard meta directives and custom ``x_`` directives."""
        return self.name in META_TAGS or self.name.startswith(CUSTOM_META_PREFIX)

    def is_section_start(self) -> bool:
        return self.name in SECTION_START_TAGS

    def is_section_end(self) -> bool:
        return self.name in SECTION_END_TAGS

    def is_section_delimiter(self) -> bool:
        return self.is_section_start() or self.is_section_end()

    def is_inline_font_tag(self) -> bool:
        return self.name in INLINE_FONT_TAGS

    @property
    def section_type(self) -> str | None:
        """Section opened or closed by this directive, if any."""
        return SECTION_START_TAGS.get(self.name) or SECTION_END_TAGS.get(self.name)

    def has_renderable_label(self) -> bool:
        """Section starts render their value as a label (``{sov: Verse 1}``)."""
        return self.is_section_start() and self.has_value()

    def is_renderable(self) -> bool:
        return self.name in RENDERABLE_TAGS or self.has_renderable_label()

    def set_value(self, value: str) -> Tag:
        return replace(self, value=value)

    def __str__(self) -> str:
        if self.has_value():
            return f"Tag(name={self.name}, value={self.value})"
        return f"Tag(name={self.name})"


@dataclass(frozen=True)
class Comment:
    """A source comment (``# ...``); never rendered outside ChordPro."""

    content: str

    def is_renderable(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"Comment(content={self.content})"


@dataclass(frozen=True)
class ChordLyricsPair:
    """Chord text with the lyrics that follow it.

    The chord text is kept verbatim. It is parsed only when a chord aware
    operation needs it, so malformed chords are carried along untouched.

    Parameters
    ----------
    chords : str
        Chord text, e.g. ``"Am"``; may be empty or not a valid chord.
    lyrics : str
        Lyrics sung from this chord up to the next one.

    Examples
    --------
    >>> pair = ChordLyricsPair("Am", "be, let it ")
    >>> pair.transpose(2).chords
    'Bm'
    >>> ChordLyricsPair("N.C.", "tacet").transpose(2).chords
    'N.C.'
    """

    chords: str = ""
    lyrics: str = ""

    @property
    def chord(self) -> Chord | None:
        """The parsed chord, or None when the chord text is not a chord."""
        stripped = self.chords.strip()
        if not stripped:
            return None
        return parse_chord(stripped)

    def is_renderable(self) -> bool:
        return True

    def has_chords(self) -> bool:
        return bool(self.chords.strip())

    def has_lyrics(self) -> bool:
        return bool(self.lyrics)

    def set_chords(self, chords: str) -> ChordLyricsPair:
        return replace(self, chords=chords)

    def set_lyrics(self, lyrics: str) -> ChordLyricsPair:
        return replace(self, lyrics=lyrics)

    def transpose(
        self,
        delta: int,
        key: Key | str | None = None,
        *,
        normalize_chord_suffix: bool = False,
    ) -> ChordLyricsPair:
        """Transpose the chord by ``delta`` semitones.

        When ``key`` is given the result is spelled the way that key writes
        it. Pairs whose chord text does not parse are returned unchanged.
        """
        chord = self.chord
        if chord is None:
            return self

        transposed = chord.transpose(delta)
        if key is not None:
            transposed = transposed.normalize(key, normalize_suffix=normalize_chord_suffix)
        return self.set_chords(str(transposed))

    def __str__(self) -> str:
        return f"ChordLyricsPair(chords={self.chords}, lyrics={self.lyrics})"


Item = ChordLyricsPair | Comment | Tag | Literal | Ternary | Composite
