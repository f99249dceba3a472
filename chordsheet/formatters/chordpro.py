"""Format songs back into ChordPro text."""

from __future__ import annotations

from chordsheet.expressions import Composite, Evaluatable, Literal, Ternary, is_evaluatable
from chordsheet.formatters.base import Formatter
from chordsheet.metadata import Metadata
from chordsheet.song.items import META, ChordLyricsPair, Comment, Item, Tag
from chordsheet.song.line import Line
from chordsheet.song.song import Song
from chordsheet.theory.chord import parse_chord

# Characters that end a branch or escape inside a meta expression
_ESCAPED = ("\\", "|", "}")


def escape_literal(text: str) -> str:
    """Escape text for use inside a meta expression branch.

    Examples
    --------
    >>> escape_literal("a|b")
    'a\\\\|b'
    """
    for char in _ESCAPED:
        text = text.replace(char, f"\\{char}")
    return text


class ChordProFormatter(Formatter):
    """Format a song as a ChordPro sheet.

    With a configured ``key`` the song is changed to that key first. Meta
    expressions are written as-is unless ``evaluate`` is set, and
    ``use_unicode_modifiers`` writes sharps and flats as ``♯`` and ``♭``.

    Examples
    --------
    >>> from chordsheet.parsers.chordpro import ChordProParser
    >>> sheet = "{title: Let it be}\\nLet it [Am]be"
    >>> ChordProFormatter().format(ChordProParser().parse(sheet)) == sheet
    True
    """

    def format(self, song: Song) -> str:
        if self.configuration.key is not None and song.key:
            song = song.change_key(self.configuration.key)
        return "\n".join(self.format_line(line, song.metadata) for line in song.lines)

    def format_line(self, line: Line, metadata: Metadata) -> str:
        return "".join(self.format_item(item, metadata) for item in line.items)

    def format_item(self, item: Item, metadata: Metadata) -> str:
        if isinstance(item, Tag):
            return self.format_tag(item)
        if isinstance(item, ChordLyricsPair):
            return self.format_chord_lyrics_pair(item)
        if isinstance(item, Comment):
            return f"#{item.content}"
        if is_evaluatable(item):
            return self.format_or_evaluate_item(item, metadata)

        msg = f"Don't know how to format a {type(item).__name__}"
        raise TypeError(msg)

    def format_or_evaluate_item(self, item: Evaluatable, metadata: Metadata) -> str:
        if self.configuration.evaluate:
            return self.evaluate(item, metadata)
        if isinstance(item, Literal):
            return item.string
        return self.format_expression(item)

    def format_tag(self, tag: Tag) -> str:
        if tag.original_name == META:
            return f"{{{META}: {tag.name} {tag.value}}}"
        if tag.has_value():
            return f"{{{tag.original_name}: {tag.value}}}"
        return f"{{{tag.original_name}}}"

    def format_chord_lyrics_pair(self, pair: ChordLyricsPair) -> str:
        chords = f"[{self.format_chords(pair.chords)}]" if pair.chords else ""
        return f"{chords}{pair.lyrics}"

    def format_chords(self, chords: str) -> str:
        """Chord text as written, with unicode modifiers when configured.

        Suffixes are not normalized, so sheets read back unchanged.
        """
        if not self.configuration.use_unicode_modifiers:
            return chords
        chord = parse_chord(chords.strip())
        return chord.to_string(use_unicode_modifier=True) if chord is not None else chords

    def format_ternary(self, ternary: Ternary) -> str:
        """Write a ternary back in ``%{name=value|true|false}`` form."""
        parts = ["%{", ternary.variable or ""]
        if ternary.value_test is not None:
            parts.append(f"={escape_literal(ternary.value_test)}")
        if ternary.true_expression or ternary.false_expression:
            parts.append(f"|{self.format_expression_range(ternary.true_expression)}")
        if ternary.false_expression:
            parts.append(f"|{self.format_expression_range(ternary.false_expression)}")
        parts.append("}")
        return "".join(parts)

    def format_expression_range(self, expressions: tuple[Evaluatable, ...]) -> str:
        return "".join(self.format_expression(expression) for expression in expressions)

    def format_expression(self, expression: Evaluatable) -> str:
        if isinstance(expression, Literal):
            return escape_literal(expression.string)
        if isinstance(expression, Ternary):
            return self.format_ternary(expression)
        if isinstance(expression, Composite):
            return self.format_expression_range(expression.expressions)

        msg = f"Don't know how to format a {type(expression).__name__}"
        raise TypeError(msg)
