"""Readers that turn chord sheet text into songs."""

from chordsheet.parsers.chordpro import ChordProParser
from chordsheet.parsers.chords_over_words import ChordsOverWordsParser
from chordsheet.parsers.meta import parse_meta_expression, parse_meta_text

__all__ = [
    "ChordProParser",
    "ChordsOverWordsParser",
    "parse_meta_expression",
    "parse_meta_text",
]
