"""Reader for chords-over-words sheets.

These are the plain-text sheets found on most tab sites::

    title: Let it be
    key: C
    ---
    Verse 1:
           Am         C/G
    Let it be, let it be

An optional header of ``name: value`` lines (or ChordPro directives) may be
closed by ``---``. Section labels such as ``Chorus 1:`` or ``[Verse]`` open
a section that lasts until the next empty line. A chord line directly
above a lyrics line is merged into it, splitting the lyrics at the column
of each chord.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace

from chordsheet.builder import DocumentBuilder
from chordsheet.parsers.chord_detector import (
    SECTION_HEADER_RE,
    classify_line,
    tokenize_and_classify,
)
from chordsheet.parsers.chordpro import DIRECTIVE_LINE_RE, split_lines, tokenize_lyrics
from chordsheet.parsers.tokenizer import Token
from chordsheet.song.items import (
    COMMENT,
    CUSTOM_META_PREFIX,
    META_TAGS,
    SECTION_END_TAGS,
    SECTION_START_TAGS,
    ChordLyricsPair,
    Tag,
)
from chordsheet.song.song import ParserWarning, Song

logger = logging.getLogger(__name__)

HEADER_LINE_RE = re.compile(r"^\s*(?P<name>[A-Za-z_]+)\s*:\s*(?P<value>.*?)\s*$")
HEADER_SEPARATOR = "---"
LABEL_LINE_RE = re.compile(r"^\s*(?P<label>[A-Za-z][\w -]*?)\s*:\s*$")

# Words that start a section label, and the section type they open
SECTION_KEYWORDS: dict[str, str] = {section: section for section in SECTION_START_TAGS.values()}
SECTION_KEYWORDS["refrain"] = "chorus"

# Labels that name a part of the song without opening a section
OTHER_LABELS: frozenset[str] = frozenset(
    {"intro", "outro", "interlude", "instrumental", "solo", "pre-chorus", "coda", "ending", "hook"}
)

_START_TAGS = {section: tag for tag, section in SECTION_START_TAGS.items()}
_END_TAGS = {section: tag for tag, section in SECTION_END_TAGS.items()}


def parse_header_line(line: str) -> Tag | None:
    """Read a ``name: value`` or ``{name: value}`` header line.

    Only metadata names are accepted, so lyrics containing a colon do not
    end up in the header.

    Examples
    --------
    >>> parse_header_line("title: Let it be")
    Tag(name='title', value='Let it be', original_name='title', line=None, column=None, offset=None)
    >>> parse_header_line("He said: yes") is None
    True
    """
    directive = DIRECTIVE_LINE_RE.match(line)
    if directive:
        return Tag.parse(directive.group("directive"))

    match = HEADER_LINE_RE.match(line)
    if not match:
        return None
    name = match.group("name").lower()
    if name not in META_TAGS and not name.startswith(CUSTOM_META_PREFIX):
        return None
    return Tag(name, match.group("value"))


def section_label(line: str) -> str | None:
    """Return the label of a section header line.

    Examples
    --------
    >>> section_label("Chorus 1:")
    'Chorus 1'
    >>> section_label("[Verse]")
    'Verse'
    >>> section_label("Let it be") is None
    True
    """
    if classify_line(line) == "section_header":
        return SECTION_HEADER_RE.match(line).group("name").strip()

    match = LABEL_LINE_RE.match(line)
    if match and _first_word(match.group("label")) in {*SECTION_KEYWORDS, *OTHER_LABELS}:
        return match.group("label")
    return None


def _first_word(label: str) -> str:
    return label.split()[0].lower() if label.split() else ""


def split_at_chords(chords: list[Token], lyrics: str) -> list[ChordLyricsPair]:
    """Cut a lyrics line at the columns of the chords above it.

    Examples
    --------
    >>> from chordsheet.parsers.chord_detector import tokenize_and_classify
    >>> pairs = split_at_chords(tokenize_and_classify("       Am         C/G"), "Let it be, let it be")
    >>> [(pair.chords, pair.lyrics) for pair in pairs]
    [('', 'Let it '), ('Am', 'be, let it '), ('C/G', 'be')]
    """
    lyrics = lyrics.rstrip()
    if not chords:
        return [ChordLyricsPair("", lyrics)]

    pairs: list[ChordLyricsPair] = []
    leading = lyrics[: chords[0].start]
    if leading.strip():
        pairs.append(ChordLyricsPair("", leading))

    for index, chord in enumerate(chords):
        end = chords[index + 1].start if index + 1 < len(chords) else len(lyrics)
        pairs.append(ChordLyricsPair(chord.text, lyrics[chord.start : end]))
    return pairs


class ChordsOverWordsParser:
    """Parse chords-over-words sheets into songs.

    Examples
    --------
    >>> sheet = "title: Let it be\\n---\\nChorus:\\n       Am         C/G\\nLet it be, let it be"
    >>> song = ChordsOverWordsParser().parse(sheet)
    >>> song.title
    'Let it be'
    >>> [(item.chords, item.lyrics) for item in song.lines[3].items]
    [('', 'Let it '), ('Am', 'be, let it '), ('C/G', 'be')]
    >>> song.lines[3].type
    'chorus'
    """

    def __init__(self) -> None:
        self.song: Song | None = None
        self._builder = DocumentBuilder()
        self._section: str | None = None

    @property
    def warnings(self) -> tuple[ParserWarning, ...]:
        return self.song.warnings if self.song is not None else ()

    def parse(self, chord_sheet: str) -> Song:
        self._builder = DocumentBuilder()
        self._section = None
        lines = split_lines(chord_sheet)

        index = self._read_header(lines)
        while index < len(lines):
            index = self._read_line(lines, index)

        self._close_section()
        self.song = self._builder.build()
        logger.debug("Parsed chords-over-words sheet into %d lines", len(self.song.lines))
        return self.song

    def _read_header(self, lines: list[str]) -> int:
        index = 0
        while index < len(lines):
            tag = parse_header_line(lines[index])
            if tag is None:
                break
            self._builder.add_line(index + 1).add_tag(_traced(tag, index + 1))
            index += 1

        if index < len(lines) and lines[index].strip() == HEADER_SEPARATOR:
            self._builder.add_line(index + 1)
            index += 1
        return index

    def _read_line(self, lines: list[str], index: int) -> int:
        line = lines[index]
        number = index + 1
        tokens = tokenize_and_classify(line)
        line_type = classify_line(line, tokens)

        if line_type == "empty":
            self._close_section()
            self._builder.add_line(number)
            return index + 1

        directive = DIRECTIVE_LINE_RE.match(line)
        tag = Tag.parse(directive.group("directive")) if directive else None
        if tag is not None:
            self._builder.add_line(number).add_tag(_traced(tag, number, line.index("{") + 1))
            return index + 1

        label = section_label(line)
        if label is not None:
            self._open_section(label, number, len(line) - len(line.lstrip()) + 1)
            return index + 1

        if line_type == "comment":
            self._builder.add_line(number).add_tag(Tag(COMMENT, line.strip(), line=number, column=1))
            return index + 1

        if line_type == "chord":
            chords = [token for token in tokens if token.kind in ("chord", "punct")]
            lyrics = lines[index + 1] if index + 1 < len(lines) else ""
            if lyrics.strip() and classify_line(lyrics) == "lyric" and section_label(lyrics) is None:
                self._add_pairs(number, split_at_chords(chords, lyrics))
                return index + 2
            self._add_pairs(number, [ChordLyricsPair(chord.text, "") for chord in chords])
            return index + 1

        self._builder.feed_all(tokenize_lyrics(line, number, on_warning=self._builder.add_warning))
        return index + 1

    def _add_pairs(self, number: int, pairs: list[ChordLyricsPair]) -> None:
        self._builder.add_line(number)
        for pair in pairs:
            self._builder.add_item(pair)

    def _open_section(self, label: str, number: int, column: int) -> None:
        self._close_section()
        section = SECTION_KEYWORDS.get(_first_word(label))
        self._builder.add_line(number)
        if section is None:
            self._builder.add_tag(Tag(COMMENT, label, line=number, column=column))
            return
        self._builder.add_tag(Tag(_START_TAGS[section], label, line=number, column=column))
        self._section = section

    def _close_section(self) -> None:
        if self._section is None:
            return
        self._builder.add_line().add_tag(Tag(_END_TAGS[self._section]))
        self._section = None


def _traced(tag: Tag, line: int, column: int = 1) -> Tag:
    return replace(tag, line=line, column=column)
