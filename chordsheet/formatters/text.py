"""Format songs as plain text with chords above the lyrics."""

from __future__ import annotations

from chordsheet.expressions import is_evaluatable
from chordsheet.formatters.base import Formatter
from chordsheet.formatters.render import render_chord
from chordsheet.metadata import Metadata
from chordsheet.parsers.meta import parse_meta_text
from chordsheet.song.items import ChordLyricsPair, Item, Tag
from chordsheet.song.line import Line, Paragraph
from chordsheet.song.song import Song


def pad_right(text: str, length: int) -> str:
    return text.ljust(length)


def pair_length(chords: str, lyrics: str) -> int:
    """Width a chord/lyrics pair takes up.

    Chords at least as long as their lyrics get one extra space so that
    consecutive chords never touch.

    Examples
    --------
    >>> pair_length("Am", "be")
    3
    >>> pair_length("C", "Let it ")
    7
    """
    if chords and len(chords) >= len(lyrics):
        return len(chords) + 1
    return len(lyrics)


class TextFormatter(Formatter):
    """Format a song as a plain text chord sheet.

    The header holds the upper-cased title and the subtitle. Each body line
    becomes a chord row above a lyrics row, either of which is left out
    when the line has nothing to show on it.

    Examples
    --------
    >>> from chordsheet.parsers.chordpro import ChordProParser
    >>> song = ChordProParser().parse("{title: Let it be}\\nLet it [Am]be, let it [C/G]be")
    >>> print(TextFormatter().format(song))
    LET IT BE
    <BLANKLINE>
           Am         C/G
    Let it be, let it be
    """

    def format(self, song: Song) -> str:
        header = self.format_header(song)
        paragraphs = self.format_paragraphs(song)
        return f"{header}{paragraphs}"

    def format_header(self, song: Song) -> str:
        values = (
            self.format_title(song.title, song.metadata),
            self.format_subtitle(song.subtitle, song.metadata),
        )
        rows = [value for value in values if value]
        return "".join(f"{row}\n" for row in rows) + ("\n" if rows else "")

    def format_title(self, title: str | None, metadata: Metadata) -> str:
        return self.format_header_value(title, metadata).upper()

    def format_subtitle(self, subtitle: str | None, metadata: Metadata) -> str:
        return self.format_header_value(subtitle, metadata)

    def format_header_value(self, value: str | None, metadata: Metadata) -> str:
        if not value:
            return ""
        if self.configuration.evaluate:
            return self.evaluate(parse_meta_text(value), metadata)
        return value

    def format_paragraphs(self, song: Song) -> str:
        if self.configuration.expand_chorus_directive:
            paragraphs = song.expanded_body_paragraphs
        else:
            paragraphs = song.body_paragraphs
        return "\n\n".join(self.format_paragraph(paragraph, song) for paragraph in paragraphs)

    def format_paragraph(self, paragraph: Paragraph, song: Song) -> str:
        return "\n".join(
            self.format_line(line, song) for line in paragraph.lines if line.has_renderable_items()
        )

    def format_line(self, line: Line, song: Song) -> str:
        rows = (self.format_line_top(line, song), self.format_line_bottom(line, song))
        return "\n".join(row.rstrip() for row in rows if row is not None)

    def format_line_top(self, line: Line, song: Song) -> str | None:
        if not line.has_chord_contents():
            return None
        return "".join(self.format_item_top(item, line, song) for item in line.items)

    def format_line_bottom(self, line: Line, song: Song) -> str | None:
        if not line.has_text_contents():
            return None
        return "".join(self.format_item_bottom(item, line, song) for item in line.items)

    def render_chords(self, pair: ChordLyricsPair, line: Line, song: Song) -> str:
        return render_chord(
            pair.chords,
            line,
            song,
            render_key=self.configuration.key,
            use_unicode_modifier=self.configuration.use_unicode_modifiers,
            normalize_chords=self.configuration.normalize_chords,
        )

    def format_item_top(self, item: Item, line: Line, song: Song) -> str:
        if isinstance(item, ChordLyricsPair):
            chords = self.render_chords(item, line, song)
            return pad_right(chords, pair_length(chords, item.lyrics))
        # Keep chords after an expression or label aligned with their lyrics
        return " " * len(self.format_item_bottom(item, line, song))

    def format_item_bottom(self, item: Item, line: Line, song: Song) -> str:
        if isinstance(item, ChordLyricsPair):
            chords = self.render_chords(item, line, song) if line.has_chord_contents() else ""
            return pad_right(item.lyrics, pair_length(chords, item.lyrics))
        if isinstance(item, Tag):
            return item.value if item.is_renderable() else ""
        if is_evaluatable(item):
            return self.evaluate(item, song.metadata)
        return ""
