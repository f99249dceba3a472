"""Song document model.

A :class:`Song` holds :class:`Line` objects, each made of items:
:class:`ChordLyricsPair`, :class:`Tag`, :class:`Comment` and meta
expressions (:class:`~chordsheet.expressions.Ternary` and friends).
"""

from chordsheet.song.font import Font, FontSize, FontStack
from chordsheet.song.items import ChordLyricsPair, Comment, Item, Tag
from chordsheet.song.line import (
    BRIDGE,
    CHORUS,
    GRID,
    INDETERMINATE,
    NONE,
    TAB,
    VERSE,
    Line,
    LineType,
    Paragraph,
    ParagraphType,
)
from chordsheet.song.song import ParserWarning, Song

__all__ = [
    "BRIDGE",
    "CHORUS",
    "GRID",
    "INDETERMINATE",
    "NONE",
    "TAB",
    "VERSE",
    "ChordLyricsPair",
    "Comment",
    "Font",
    "FontSize",
    "FontStack",
    "Item",
    "Line",
    "LineType",
    "Paragraph",
    "ParagraphType",
    "ParserWarning",
    "Song",
    "Tag",
]
