"""Incremental construction of a :class:`~chordsheet.song.Song`.

Readers turn text into a stream of :class:`ParserToken` values and feed
them to a :class:`DocumentBuilder`. The builder tracks everything that only
matters while reading: the open sections, the font directives in effect and
the current ``{key}`` and ``{transpose}`` values. Once :meth:`build` returns,
that state is dropped and the finished song holds none of it.

Structural problems never raise. Unbalanced section directives are recorded
as :class:`~chordsheet.song.ParserWarning` values on the song.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Literal

from chordsheet.expressions import Evaluatable, is_evaluatable
from chordsheet.metadata import Metadata, MetadataValue
from chordsheet.song.font import Font, FontStack
from chordsheet.song.items import KEY, TRANSPOSE, ChordLyricsPair, Comment, Item, Tag
from chordsheet.song.line import NONE, Line, LineType
from chordsheet.song.song import ParserWarning, Song

logger = logging.getLogger(__name__)

TokenKind = Literal["directive", "comment", "chordLyricsPair", "text", "expression"]

TokenPayload = Tag | ChordLyricsPair | Evaluatable | str


@dataclass(frozen=True)
class ParserToken:
    """One recognized piece of a sheet.

    Parameters
    ----------
    kind : TokenKind
        ``"directive"`` (payload: Tag), ``"comment"`` (payload: str),
        ``"chordLyricsPair"`` (payload: ChordLyricsPair), ``"text"``
        (payload: str, plain lyrics) or ``"expression"`` (payload: a meta
        expression).
    payload : TokenPayload
        The recognized value.
    line : int | None
        1-based source line. A change of line number starts a new Line.
    column : int | None
        1-based source column.
    offset : int | None
        0-based character offset in the source.

    Examples
    --------
    >>> token = ParserToken("text", "Let it be", line=1, column=1)
    >>> token.kind
    'text'
    """

    kind: TokenKind
    payload: TokenPayload
    line: int | None = None
    column: int | None = None
    offset: int | None = None


@dataclass
class _LineDraft:
    items: list[Item] = field(default_factory=list)
    type: LineType = NONE
    key: str | None = None
    transpose_key: str | None = None
    line_number: int | None = None
    text_font: Font = field(default_factory=Font)
    chord_font: Font = field(default_factory=Font)

    def to_line(self) -> Line:
        return Line(
            items=tuple(self.items),
            type=self.type,
            key=self.key,
            transpose_key=self.transpose_key,
            line_number=self.line_number,
            text_font=self.text_font,
            chord_font=self.chord_font,
        )


class DocumentBuilder:
    """Build a song line by line.

    Every ``add_*`` method returns the builder so calls can be chained.

    Parameters
    ----------
    metadata : Metadata | dict | None
        Metadata to start from. Meta directives add to it.

    Examples
    --------
    >>> builder = DocumentBuilder()
    >>> song = (
    ...     builder.add_line()
    ...     .add_tag(Tag("title", "Let it be"))
    ...     .add_line()
    ...     .add_item(ChordLyricsPair("Am", "Let it be"))
    ...     .build()
    ... )
    >>> song.title
    'Let it be'
    >>> len(song.lines)
    2
    """

    def __init__(self, metadata: Metadata | dict[str, MetadataValue] | None = None):
        if isinstance(metadata, Metadata):
            metadata = metadata.to_dict()
        self._metadata = Metadata(metadata)
        self._lines: list[Line] = []
        self._current: _LineDraft | None = None
        self._current_number: int | None = None
        self._warnings: list[ParserWarning] = []
        self._sections: list[tuple[LineType, Tag]] = []
        self._font_stack = FontStack()
        self._current_key: str | None = None
        self._transpose_key: str | None = None

    @property
    def section_type(self) -> LineType:
        """Type of the innermost open section, ``"none"`` outside sections."""
        if self._sections:
            return self._sections[-1][0]
        return NONE

    @property
    def warnings(self) -> list[ParserWarning]:
        return list(self._warnings)

    # ------------------------------------------------------------------
    # Token stream
    # ------------------------------------------------------------------

    def feed(self, token: ParserToken) -> DocumentBuilder:
        """Add one token, starting a new line when its line number changes."""
        if token.line is not None and token.line != self._current_number:
            self.add_line(token.line)
        else:
            self._ensure_line()

        if token.kind == "directive":
            tag = token.payload
            if tag.line is None:
                tag = replace(tag, line=token.line, column=token.column, offset=token.offset)
            return self.add_tag(tag)
        if token.kind == "comment":
            return self.add_item(Comment(token.payload))
        if token.kind == "chordLyricsPair":
            return self.add_item(token.payload)
        if token.kind == "text":
            if token.payload:
                self.add_item(ChordLyricsPair("", token.payload))
            return self
        if token.kind == "expression":
            return self.add_item(token.payload)

        msg = f"Unknown token kind: {token.kind}"
        raise ValueError(msg)

    def feed_all(self, tokens: list[ParserToken]) -> DocumentBuilder:
        for token in tokens:
            self.feed(token)
        return self

    # ------------------------------------------------------------------
    # Direct construction
    # ------------------------------------------------------------------

    def add_line(self, line_number: int | None = None) -> DocumentBuilder:
        """Finish the current line and start a new one."""
        self._finish_line()
        self._current_number = line_number
        self._current = _LineDraft(
            type=self.section_type,
            key=self._current_key,
            transpose_key=self._transpose_key,
            line_number=line_number,
            text_font=self._font_stack.text_font,
            chord_font=self._font_stack.chord_font,
        )
        return self

    def add_item(self, item: Item) -> DocumentBuilder:
        """Add an item to the current line.

        Tags are routed through :meth:`add_tag` so they update metadata and
        section state.
        """
        if isinstance(item, Tag):
            return self.add_tag(item)
        if not isinstance(item, ChordLyricsPair | Comment) and not is_evaluatable(item):
            msg = f"Cannot add {type(item).__name__} to a line"
            raise TypeError(msg)

        self._ensure_line()
        self._current.items.append(item)
        return self

    def add_tag(self, tag: Tag) -> DocumentBuilder:
        """Add a directive to the current line and apply its effect."""
        self._ensure_line()

        if tag.is_meta_tag():
            self._metadata.add(tag.name, tag.value)

        if tag.name == KEY:
            self._current_key = tag.value
        elif tag.name == TRANSPOSE:
            self._transpose_key = tag.value
        elif tag.is_section_start():
            self._start_section(tag)
        elif tag.is_section_end():
            self._end_section(tag)
        elif tag.is_inline_font_tag():
            self._font_stack.apply_tag(tag)
            self._current.text_font = self._font_stack.text_font
            self._current.chord_font = self._font_stack.chord_font

        self._current.items.append(tag)
        return self

    def add_warning(self, message: str, line: int | None = None, column: int | None = None) -> DocumentBuilder:
        warning = ParserWarning(message, line, column)
        logger.debug("%s", warning)
        self._warnings.append(warning)
        return self

    def build(self, line_count: int | None = None) -> Song:
        """Finish building and return the song.

        Parameters
        ----------
        line_count : int | None
            Number of lines in the source. Missing trailing lines are added
            as empty lines.
        """
        self._finish_line()
        if line_count is not None:
            while len(self._lines) < line_count:
                self._lines.append(Line(type=self.section_type, line_number=len(self._lines) + 1))

        for section_type, tag in self._sections:
            self.add_warning(
                f"Unclosed {section_type} section, started by {{{tag.original_name}}}",
                tag.line,
                tag.column,
            )
        self._sections = []

        song = Song(lines=tuple(self._lines), metadata=self._metadata, warnings=tuple(self._warnings))
        logger.debug("Built song with %d lines and %d warnings", len(song.lines), len(song.warnings))
        return song

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _start_section(self, tag: Tag) -> None:
        if self._sections:
            self._unexpected(tag)
        self._sections.append((tag.section_type, tag))
        self._current.type = tag.section_type
        self._current.text_font = self._font_stack.text_font
        self._current.chord_font = self._font_stack.chord_font

    def _end_section(self, tag: Tag) -> None:
        if self._sections and self._sections[-1][0] == tag.section_type:
            self._sections.pop()
        else:
            self._unexpected(tag)

    def _unexpected(self, tag: Tag) -> None:
        self.add_warning(
            f"Unexpected tag {{{tag.original_name}}}, current section is: {self.section_type}",
            tag.line,
            tag.column,
        )

    def _ensure_line(self) -> None:
        if self._current is None:
            self.add_line()

    def _finish_line(self) -> None:
        if self._current is not None:
            self._lines.append(self._current.to_line())
            self._current = None
