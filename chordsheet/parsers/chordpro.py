"""ChordPro reader.

Recognizes one construct per source line: a directive (``{title: ...}``),
a comment (``# ...``) or lyrics with inline chords (``Let it [Am]be``) and
meta expressions (``%{title}``). Lines inside ``{start_of_tab}`` sections
are kept verbatim. The resulting :class:`~chordsheet.builder.ParserToken`
stream is fed to a :class:`~chordsheet.builder.DocumentBuilder`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from chordsheet.builder import DocumentBuilder, ParserToken
from chordsheet.exceptions import ParseError
from chordsheet.parsers.meta import EXPRESSION_START, read_meta_expression
from chordsheet.song.items import END_OF_TAB, START_OF_TAB, ChordLyricsPair, Tag
from chordsheet.song.song import ParserWarning, Song

logger = logging.getLogger(__name__)

DIRECTIVE_LINE_RE = re.compile(r"^\s*(?P<directive>\{.*\})\s*$")
COMMENT_PREFIX = "#"

WarningCallback = Callable[[str, "int | None", "int | None"], object]


def split_lines(text: str) -> list[str]:
    """Split text into lines, normalizing line endings."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def tokenize_lyrics(
    text: str,
    line_number: int,
    offset: int = 0,
    on_warning: WarningCallback | None = None,
) -> list[ParserToken]:
    """Split a lyrics line into chord/lyrics pairs and meta expressions.

    Examples
    --------
    >>> tokens = tokenize_lyrics("Let it [Am]be", 1)
    >>> [(t.payload.chords, t.payload.lyrics) for t in tokens]
    [('', 'Let it '), ('Am', 'be')]
    """
    tokens: list[ParserToken] = []
    chords: str | None = None
    lyrics: list[str] = []
    column = 1
    i = 0

    def flush() -> None:
        if chords is not None or lyrics:
            pair = ChordLyricsPair(chords or "", "".join(lyrics))
            tokens.append(ParserToken("chordLyricsPair", pair, line_number, column, offset + column - 1))

    while i < len(text):
        if text[i] == "[":
            end = text.find("]", i + 1)
            if end != -1:
                flush()
                chords, lyrics, column = text[i + 1 : end], [], i + 1
                i = end + 1
                continue

        if text.startswith(EXPRESSION_START, i):
            try:
                ternary, end = read_meta_expression(text, i, line=line_number, column=i + 1)
            except ParseError:
                if on_warning is not None:
                    on_warning("Unterminated meta expression", line_number, i + 1)
                lyrics.append(text[i:])
                break
            flush()
            tokens.append(ParserToken("expression", ternary, line_number, i + 1, offset + i))
            chords, lyrics, column = None, [], end + 1
            i = end
            continue

        lyrics.append(text[i])
        i += 1

    flush()
    return tokens


def tokenize(text: str, on_warning: WarningCallback | None = None) -> list[ParserToken]:
    """Turn a ChordPro sheet into a token stream.

    Every source line yields at least one token, so empty lines are kept.

    Examples
    --------
    >>> [token.kind for token in tokenize("{title: Hey}\\n# note\\n\\n[C]Hey")]
    ['directive', 'comment', 'text', 'chordLyricsPair']
    """
    tokens: list[ParserToken] = []
    offset = 0
    in_tab = False

    for line_number, line in enumerate(split_lines(text), start=1):
        stripped = line.strip()
        column = len(line) - len(line.lstrip()) + 1
        directive = DIRECTIVE_LINE_RE.match(line)
        tag = Tag.parse(directive.group("directive")) if directive else None

        if tag is not None:
            in_tab = tag.name == START_OF_TAB or (in_tab and tag.name != END_OF_TAB)
            tokens.append(ParserToken("directive", tag, line_number, column, offset + column - 1))
        elif not stripped:
            tokens.append(ParserToken("text", "", line_number, 1, offset))
        elif in_tab:
            tokens.append(ParserToken("text", line, line_number, 1, offset))
        elif stripped.startswith(COMMENT_PREFIX):
            tokens.append(ParserToken("comment", stripped[1:], line_number, column, offset + column - 1))
        else:
            tokens.extend(tokenize_lyrics(line, line_number, offset, on_warning))

        offset += len(line) + 1

    return tokens


class ChordProParser:
    """Parse ChordPro sheets into songs.

    Examples
    --------
    >>> song = ChordProParser().parse("{title: Let it be}\\n{soc}\\nLet it [Am]be\\n{eoc}")
    >>> song.title
    'Let it be'
    >>> song.lines[2].type
    'chorus'
    """

    def __init__(self) -> None:
        self.song: Song | None = None

    @property
    def warnings(self) -> tuple[ParserWarning, ...]:
        """Warnings raised while parsing the last sheet."""
        return self.song.warnings if self.song is not None else ()

    def parse(self, chord_sheet: str) -> Song:
        builder = DocumentBuilder()
        tokens = tokenize(chord_sheet, on_warning=builder.add_warning)
        builder.feed_all(tokens)
        self.song = builder.build(line_count=len(split_lines(chord_sheet)))
        logger.debug("Parsed ChordPro sheet into %d lines", len(self.song.lines))
        return self.song
