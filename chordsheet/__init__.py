"""Chord sheet parsing, transposition and formatting.

Songs are read from ChordPro or chords-over-words text, transformed
(transposed, moved to another key, given new metadata) and written back out.

Examples
--------
>>> from chordsheet import ChordProParser, TextFormatter

>>> song = ChordProParser().parse("{title: Let it be}\\n{key: C}\\nLet it [Am]be")
>>> print(TextFormatter().format(song.change_key("D")))
LET IT BE
<BLANKLINE>
       Bm
Let it be

>>> from chordsheet import Chord
>>> str(Chord.parse("Am7").transpose(2))
'Bm7'
"""

from chordsheet.builder import DocumentBuilder, ParserToken
from chordsheet.configuration import Configuration, MetadataConfiguration
from chordsheet.exceptions import (
    ChordSheetError,
    InvalidConversionError,
    NoKeySetError,
    ParseError,
    UnknownNodeTypeError,
)
from chordsheet.expressions import Composite, Literal, Ternary
from chordsheet.formatters import ChordProFormatter, Formatter, TextFormatter
from chordsheet.metadata import Metadata
from chordsheet.parsers import ChordProParser, ChordsOverWordsParser
from chordsheet.serializer import ChordSheetSerializer
from chordsheet.song import ChordLyricsPair, Comment, Line, Paragraph, ParserWarning, Song, Tag
from chordsheet.theory import Chord, Key

__all__ = [
    "Chord",
    "ChordLyricsPair",
    "ChordProFormatter",
    "ChordProParser",
    "ChordSheetError",
    "ChordSheetSerializer",
    "ChordsOverWordsParser",
    "Comment",
    "Composite",
    "Configuration",
    "DocumentBuilder",
    "Formatter",
    "InvalidConversionError",
    "Key",
    "Line",
    "Literal",
    "Metadata",
    "MetadataConfiguration",
    "NoKeySetError",
    "Paragraph",
    "ParseError",
    "ParserToken",
    "ParserWarning",
    "Song",
    "Tag",
    "Ternary",
    "TextFormatter",
    "UnknownNodeTypeError",
]
