"""Lines and paragraphs of a song."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Literal

from chordsheet.expressions import is_evaluatable
from chordsheet.song.font import Font
from chordsheet.song.items import ChordLyricsPair, Item, Tag

LineType = Literal["verse", "chorus", "bridge", "tab", "grid", "none"]
ParagraphType = Literal["verse", "chorus", "bridge", "tab", "grid", "none", "indeterminate"]

VERSE = "verse"
CHORUS = "chorus"
BRIDGE = "bridge"
TAB = "tab"
GRID = "grid"
NONE = "none"
INDETERMINATE = "indeterminate"

MapItemFunc = Callable[[Item], "Item | None"]


@dataclass(frozen=True)
class Line:
    """An ordered run of items on one line of the sheet.

    Parameters
    ----------
    items : tuple[Item, ...]
        Chord/lyrics pairs, directives, comments and expressions.
    type : LineType
        Section the line belongs to.
    key : str | None
        Value of the last ``{key}`` directive before this line.
    transpose_key : str | None
        Value of the last ``{transpose}`` directive before this line.
    line_number : int | None
        1-based source line, when the line was read from text.
    text_font, chord_font : Font
        Fonts in effect for lyrics and chords.
    """

    items: tuple[Item, ...] = ()
    type: LineType = NONE
    key: str | None = None
    transpose_key: str | None = None
    line_number: int | None = field(default=None, compare=False)
    text_font: Font = field(default_factory=Font)
    chord_font: Font = field(default_factory=Font)

    def is_empty(self) -> bool:
        return not self.items

    def is_not_empty(self) -> bool:
        return not self.is_empty()

    def has_renderable_items(self) -> bool:
        return any(item.is_renderable() for item in self.items)

    def has_chord_contents(self) -> bool:
        return any(isinstance(item, ChordLyricsPair) and item.has_chords() for item in self.items)

    def has_text_contents(self) -> bool:
        return any(
            (isinstance(item, ChordLyricsPair) and item.has_lyrics())
            or (isinstance(item, Tag) and item.is_renderable())
            or is_evaluatable(item)
            for item in self.items
        )

    def is_section_start(self) -> bool:
        return any(isinstance(item, Tag) and item.is_section_start() for item in self.items)

    def is_section_end(self) -> bool:
        return any(isinstance(item, Tag) and item.is_section_end() for item in self.items)

    def is_verse(self) -> bool:
        return self.type == VERSE

    def is_chorus(self) -> bool:
        return self.type == CHORUS

    def is_bridge(self) -> bool:
        return self.type == BRIDGE

    def is_tab(self) -> bool:
        return self.type == TAB

    def is_grid(self) -> bool:
        return self.type == GRID

    def add_item(self, item: Item) -> Line:
        return replace(self, items=(*self.items, item))

    def set_items(self, items: tuple[Item, ...]) -> Line:
        return replace(self, items=tuple(items))

    def map_items(self, func: MapItemFunc) -> Line:
        """Replace each item with ``func(item)``; None drops the item."""
        mapped = (func(item) for item in self.items)
        return self.set_items(tuple(item for item in mapped if item is not None))


@dataclass(frozen=True)
class Paragraph:
    """Adjacent lines separated from others by an empty line."""

    lines: tuple[Line, ...] = ()

    @property
    def type(self) -> ParagraphType:
        """Common type of the lines, ``indeterminate`` when they differ.

        Examples
        --------
        >>> Paragraph((Line(type="chorus"), Line(type="chorus"))).type
        'chorus'
        >>> Paragraph((Line(type="verse"), Line(type="chorus"))).type
        'indeterminate'
        >>> Paragraph().type
        'none'
        """
        types = {line.type for line in self.lines}
        if not types:
            return NONE
        if len(types) == 1:
            return types.pop()
        return INDETERMINATE

    def has_renderable_items(self) -> bool:
        return any(line.has_renderable_items() for line in self.lines)

    def is_empty(self) -> bool:
        return not self.lines


def lines_to_paragraphs(lines: tuple[Line, ...] | list[Line]) -> tuple[Paragraph, ...]:
    """Group lines into paragraphs.

    Empty lines separate paragraphs, as does the end of a section that is
    directly followed by more content. Only lines with renderable items are
    kept, and paragraphs left without lines are dropped.
    """
    paragraphs: list[Paragraph] = []
    current: list[Line] = []

    for index, line in enumerate(lines):
        next_line = lines[index + 1] if index + 1 < len(lines) else None
        if line.is_empty() or (line.is_section_end() and next_line is not None and next_line.is_not_empty()):
            if current:
                paragraphs.append(Paragraph(tuple(current)))
            current = []
        elif line.has_renderable_items():
            current.append(line)

    if current:
        paragraphs.append(Paragraph(tuple(current)))
    return tuple(paragraphs)
