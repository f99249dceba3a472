"""Tests for the document builder."""

import pytest

from chordsheet import (
    ChordLyricsPair,
    ChordProParser,
    Comment,
    DocumentBuilder,
    Literal,
    ParserToken,
    ParserWarning,
    Tag,
)
from chordsheet.song import Font, FontSize


def warnings_for(sheet: str) -> list[ParserWarning]:
    return list(ChordProParser().parse(sheet).warnings)


class TestBuilderLines:
    """Test building lines directly and from tokens."""

    def test_chained_calls(self) -> None:
        """Test adding lines, tags and items by chaining."""
        song = (
            DocumentBuilder()
            .add_line(1)
            .add_tag(Tag("title", "Let it be"))
            .add_line(2)
            .add_item(ChordLyricsPair("Am", "be"))
            .add_item(Comment("note"))
            .build()
        )
        assert song.title == "Let it be"
        assert len(song.lines) == 2
        assert song.lines[1].items == (ChordLyricsPair("Am", "be"), Comment("note"))
        assert song.lines[1].line_number == 2

    def test_items_without_line(self) -> None:
        """Test that the first item starts a line."""
        song = DocumentBuilder().add_item(ChordLyricsPair("C", "Hi")).build()
        assert len(song.lines) == 1

    def test_feed_groups_by_line_number(self) -> None:
        """Test that tokens with the same line number share a line."""
        song = (
            DocumentBuilder()
            .feed_all(
                [
                    ParserToken("chordLyricsPair", ChordLyricsPair("", "Let it "), line=1),
                    ParserToken("chordLyricsPair", ChordLyricsPair("Am", "be"), line=1),
                    ParserToken("comment", "note", line=2),
                    ParserToken("text", "", line=3),
                ]
            )
            .build()
        )
        assert len(song.lines) == 3
        assert len(song.lines[0].items) == 2
        assert song.lines[1].items == (Comment("note"),)
        assert song.lines[2].is_empty()

    def test_feed_sets_tag_position(self) -> None:
        """Test that directive tokens pass their position to the tag."""
        song = DocumentBuilder().feed(ParserToken("directive", Tag("title", "x"), 3, 2, 10)).build()
        tag = song.lines[0].items[0]
        assert (tag.line, tag.column, tag.offset) == (3, 2, 10)

    def test_feed_expression(self) -> None:
        """Test that expressions are added as items."""
        song = DocumentBuilder().feed(ParserToken("expression", Literal("hi"), 1)).build()
        assert song.lines[0].items == (Literal("hi"),)

    def test_unknown_token_kind(self) -> None:
        """Test that unknown token kinds raise."""
        with pytest.raises(ValueError, match="Unknown token kind"):
            DocumentBuilder().feed(ParserToken("bogus", "x", 1))

    def test_unsupported_item(self) -> None:
        """Test that only line items can be added."""
        with pytest.raises(TypeError):
            DocumentBuilder().add_item(42)

    def test_pads_to_line_count(self) -> None:
        """Test that missing trailing lines are added."""
        song = DocumentBuilder().add_line(1).add_item(ChordLyricsPair("", "x")).build(line_count=3)
        assert len(song.lines) == 3
        assert song.lines[2].line_number == 3

    def test_initial_metadata(self) -> None:
        """Test starting from existing metadata."""
        song = DocumentBuilder({"artist": "The Beatles"}).add_tag(Tag("artist", "Wings")).build()
        assert song.artist == ["The Beatles", "Wings"]


class TestBuilderSections:
    """Test section tracking and warnings."""

    def test_section_types(self) -> None:
        """Test that lines inside a section get its type."""
        song = ChordProParser().parse("{sov}\nVerse\n{eov}\nAfter")
        assert [line.type for line in song.lines] == ["verse", "verse", "verse", "none"]
        assert song.warnings == ()

    def test_unclosed_section(self) -> None:
        """Test the warning for a section that is never closed."""
        assert warnings_for("{start_of_chorus}\nLine") == [
            ParserWarning("Unclosed chorus section, started by {start_of_chorus}", 1, 1)
        ]

    def test_unexpected_end(self) -> None:
        """Test the warning for closing a section that is not open."""
        assert warnings_for("{end_of_verse}") == [
            ParserWarning("Unexpected tag {end_of_verse}, current section is: none", 1, 1)
        ]

    def test_nested_section(self) -> None:
        """Test the warning for opening a section inside another."""
        warnings = warnings_for("{sov}\n{soc}")
        assert warnings[0] == ParserWarning("Unexpected tag {soc}, current section is: verse", 2, 1)

    def test_mismatched_end(self) -> None:
        """Test the warning for closing the wrong section."""
        warnings = warnings_for("{sov}\n{eoc}\n{eov}")
        assert warnings == [ParserWarning("Unexpected tag {eoc}, current section is: verse", 2, 1)]

    def test_consecutive_mismatched_ends(self) -> None:
        """Test that stray end tags leave the open section in place."""
        song = ChordProParser().parse("{soc}\n{eov}\n{eob}\nLine\n{eoc}\nAfter")
        assert list(song.warnings) == [
            ParserWarning("Unexpected tag {eov}, current section is: chorus", 2, 1),
            ParserWarning("Unexpected tag {eob}, current section is: chorus", 3, 1),
        ]
        assert [line.type for line in song.lines] == ["chorus"] * 5 + ["none"]

    def test_recovery_after_nested_section(self) -> None:
        """Test that sections unwind innermost first after a nested start."""
        song = ChordProParser().parse("{sov}\n{soc}\n{eov}\n{eoc}\n{eov}")
        assert list(song.warnings) == [
            ParserWarning("Unexpected tag {soc}, current section is: verse", 2, 1),
            ParserWarning("Unexpected tag {eov}, current section is: chorus", 3, 1),
        ]
        assert [line.type for line in song.lines] == ["verse", "chorus", "chorus", "chorus", "verse"]

    def test_warning_text(self) -> None:
        """Test how warnings render."""
        warning = ParserWarning("Unexpected tag {eoc}, current section is: verse", 2, 1)
        assert str(warning) == "Warning: Unexpected tag {eoc}, current section is: verse on line 2 column 1"


class TestBuilderState:
    """Test running key, transpose and font state."""

    def test_key_and_transpose(self) -> None:
        """Test that lines record the values in effect."""
        song = ChordProParser().parse("{key: C}\nA\n{key: D}\n{transpose: 2}\nB")
        assert song.lines[1].key == "C"
        assert song.lines[4].key == "D"
        assert song.lines[4].transpose_key == "2"
        assert song.metadata.get("key") == ["C", "D"]

    def test_font_size(self) -> None:
        """Test reading a pixel size."""
        song = ChordProParser().parse("{textsize: 30}\nHello")
        assert song.lines[1].text_font.size == FontSize(30.0, "px")

    def test_relative_font_size(self) -> None:
        """Test that percentages scale the previous size and a bare directive restores it."""
        song = ChordProParser().parse("{chordsize: 20}\n{chordsize: 50%}\n[C]Hi\n{chordsize}\n[C]Hi")
        assert song.lines[2].chord_font.size == FontSize(10.0, "px")
        assert song.lines[4].chord_font.size == FontSize(20.0, "px")

    def test_font_and_colour(self) -> None:
        """Test font family and colour directives."""
        song = ChordProParser().parse("{textfont: Verdana}\n{textcolour: red}\nHi\n{textfont}\nHo")
        assert song.lines[2].text_font == Font(font="Verdana", colour="red")
        assert song.lines[4].text_font == Font(colour="red")
        assert song.lines[2].chord_font == Font()

    def test_font_css(self) -> None:
        """Test rendering fonts as CSS."""
        font = Font(font="Verdana", size=FontSize(30, "px"), colour="red")
        assert font.to_css_string() == "color: red; font: 30px Verdana"
