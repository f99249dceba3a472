"""Formatters that turn songs back into text."""

from chordsheet.formatters.base import Formatter
from chordsheet.formatters.chordpro import ChordProFormatter
from chordsheet.formatters.text import TextFormatter

__all__ = ["ChordProFormatter", "Formatter", "TextFormatter"]
