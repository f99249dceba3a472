"""Tests for the song document model."""

import pytest

from chordsheet import (
    ChordLyricsPair,
    ChordProParser,
    ChordSheetSerializer,
    Comment,
    Line,
    Metadata,
    NoKeySetError,
    Paragraph,
    Song,
    Tag,
)


def chords_of(line: Line) -> list[str]:
    return [item.chords for item in line.items if isinstance(item, ChordLyricsPair)]


class TestSongStructure:
    """Test the structure of a parsed song."""

    def test_line_count(self, symbol_song: Song) -> None:
        """Test that every source line becomes a line."""
        assert len(symbol_song.lines) == 33

    def test_metadata(self, symbol_song: Song) -> None:
        """Test values collected from meta directives."""
        assert symbol_song.title == "Let it be"
        assert symbol_song.subtitle == "Chord sheet example version"
        assert symbol_song.key == "C"
        assert symbol_song.composer == ["John Lennon", "Paul McCartney"]
        assert symbol_song.metadata.get("x_some_setting") == ""

    def test_line_types(self, symbol_song: Song) -> None:
        """Test that lines take the type of their section."""
        assert symbol_song.lines[8].type == "none"
        assert symbol_song.lines[11].is_verse()
        assert symbol_song.lines[19].is_chorus()
        assert symbol_song.lines[23].is_bridge()
        assert symbol_song.lines[27].is_grid()
        assert symbol_song.lines[31].is_tab()

    def test_line_keys(self, symbol_song: Song) -> None:
        """Test that lines remember the key and transpose values before them."""
        assert symbol_song.lines[11].key == "C"
        assert symbol_song.lines[11].transpose_key is None
        assert symbol_song.lines[13].transpose_key == "2"
        assert symbol_song.lines[19].transpose_key == "G"

    def test_body_paragraphs(self, symbol_song: Song) -> None:
        """Test grouping the body into typed paragraphs."""
        paragraphs = symbol_song.body_paragraphs
        assert [paragraph.type for paragraph in paragraphs] == [
            "none",
            "verse",
            "chorus",
            "bridge",
            "grid",
            "tab",
        ]
        assert len(paragraphs[1].lines) == 3

    def test_header_is_not_in_body(self, symbol_song: Song) -> None:
        """Test that leading directive lines are left out of the body."""
        assert symbol_song.body_lines[0] is symbol_song.lines[8]
        assert len(symbol_song.paragraphs) == 6

    def test_paragraph_type(self) -> None:
        """Test paragraphs mixing line types."""
        assert Paragraph((Line(type="verse"), Line(type="chorus"))).type == "indeterminate"
        assert Paragraph().is_empty()

    def test_expanded_chorus(self) -> None:
        """Test that a chorus directive repeats the previous chorus."""
        song = ChordProParser().parse(
            "{start_of_chorus}\n[C]Chorus line\n{end_of_chorus}\n\n{chorus}"
        )
        assert len(song.body_paragraphs) == 1
        expanded = song.expanded_body_paragraphs
        assert len(expanded) == 2
        assert expanded[1].type == "chorus"
        assert chords_of(expanded[1].lines[0]) == ["C"]


class TestSongMetadata:
    """Test changing metadata."""

    def test_change_existing(self, symbol_song: Song) -> None:
        """Test updating an existing directive in place."""
        changed = symbol_song.change_metadata("title", "Yesterday")
        assert changed.title == "Yesterday"
        assert changed.lines[0].items[0] == Tag("title", "Yesterday")
        assert len(changed.lines) == 33

    def test_add_new(self, symbol_song: Song) -> None:
        """Test that a new directive is added at the end of the header."""
        changed = symbol_song.change_metadata("artist", "The Beatles")
        assert changed.artist == "The Beatles"
        assert len(changed.lines) == 34
        assert changed.lines[6].items == (Tag("artist", "The Beatles"),)
        assert changed.lines[7].items == (Comment("This is my favorite song"),)

    def test_remove(self, symbol_song: Song) -> None:
        """Test that None removes the directives and the value."""
        changed = symbol_song.change_metadata("composer", None)
        assert changed.composer is None
        assert len(changed.lines) == 31

    def test_original_is_untouched(self, symbol_song: Song) -> None:
        """Test that changing metadata returns a new song."""
        symbol_song.change_metadata("title", "Yesterday")
        symbol_song.change_metadata("artist", "The Beatles")
        assert symbol_song.title == "Let it be"
        assert symbol_song.artist is None
        assert len(symbol_song.lines) == 33

    def test_set_key(self, symbol_song: Song) -> None:
        """Test that setting the key leaves the chords alone."""
        changed = symbol_song.set_key("D")
        assert changed.key == "D"
        assert changed.lines[2].items[0].value == "D"
        assert changed.lines[11].key == "D"
        assert chords_of(changed.lines[11]) == ["", "Am", "C/G", "F", "C"]

    def test_set_key_without_key_directive(self) -> None:
        """Test that lines after an added key directive are in that key."""
        song = ChordProParser().parse("Let it [Am]be").set_key("C")
        assert song.lines[0].items == (Tag("key", "C"),)
        assert [line.key for line in song.lines] == [None, "C"]
        serializer = ChordSheetSerializer()
        assert serializer.deserialize(serializer.serialize(song)) == song

    def test_set_key_updates_every_section(self) -> None:
        """Test that each line follows the key directive before it."""
        song = ChordProParser().parse("{key: C}\n[C]a\n{key: G}\n[G]b").set_key("D")
        assert [line.key for line in song.lines] == [None, "D", "D", "D"]

    def test_unset_key_clears_line_keys(self, symbol_song: Song) -> None:
        """Test that removing the key leaves no line in a key."""
        changed = symbol_song.set_key(None)
        assert changed.key is None
        assert all(line.key is None for line in changed.lines)
        assert symbol_song.lines[11].key == "C"

    def test_set_capo(self, symbol_song: Song) -> None:
        """Test setting the capo and reading the key it gives."""
        changed = symbol_song.set_capo(2)
        assert changed.capo == "2"
        assert changed.metadata.get("_key") == "D"


class TestSongTranspose:
    """Test transposing songs."""

    def test_transpose(self, symbol_song: Song) -> None:
        """Test transposing chords and key."""
        transposed = symbol_song.transpose(2)
        assert transposed.key == "D"
        assert transposed.lines[2].items[0].value == "D"
        assert chords_of(transposed.lines[11]) == ["", "Bm", "D/A", "G", "D"]

    def test_transpose_down(self, symbol_song: Song) -> None:
        """Test the single semitone shortcut."""
        assert symbol_song.transpose_down().key == "B"
        assert symbol_song.transpose_up().key == "C#"

    def test_transpose_without_key(self) -> None:
        """Test that songs without a key can still be transposed."""
        song = ChordProParser().parse("[C]Hello [Bb]world [N.C.]")
        transposed = song.transpose(1)
        assert chords_of(transposed.lines[0]) == ["C#", "B", "N.C."]
        assert transposed.key is None

    def test_transpose_distance(self, symbol_song: Song) -> None:
        """Test the shortest signed distance to another key."""
        assert symbol_song.get_transpose_distance("D") == 2
        assert symbol_song.get_transpose_distance("A") == -3

    def test_transpose_distance_without_key(self) -> None:
        """Test that the distance needs a song key."""
        with pytest.raises(NoKeySetError):
            ChordProParser().parse("[C]Hello").get_transpose_distance("D")

    def test_transpose_is_immutable(self, symbol_song: Song) -> None:
        """Test that transposing returns a new song."""
        symbol_song.transpose(5)
        assert symbol_song.key == "C"
        assert chords_of(symbol_song.lines[11]) == ["", "Am", "C/G", "F", "C"]


class TestSongMapping:
    """Test structural rewrites."""

    def test_map_items_removes(self, symbol_song: Song) -> None:
        """Test dropping items by returning None."""
        without_comments = symbol_song.map_items(lambda item: None if isinstance(item, Comment) else item)
        assert without_comments.lines[6].is_empty()
        assert len(without_comments.lines) == 33

    def test_map_lines_removes(self, symbol_song: Song) -> None:
        """Test dropping lines by returning None."""
        non_empty = symbol_song.map_lines(lambda line: line if line.is_not_empty() else None)
        assert all(line.is_not_empty() for line in non_empty.lines)
        assert len(non_empty.lines) == 27

    def test_clone(self, symbol_song: Song) -> None:
        """Test that clones are equal but do not share metadata."""
        clone = symbol_song.clone()
        assert clone == symbol_song
        assert clone.metadata is not symbol_song.metadata

    @pytest.mark.parametrize("rewrite", ["map_items", "map_lines"])
    def test_rewrites_do_not_share_metadata(self, symbol_song: Song, rewrite: str) -> None:
        """Test that editing a rewritten song's metadata leaves the original alone."""
        rewritten = getattr(symbol_song, rewrite)(lambda node: node)
        rewritten.metadata.set("title", "Changed")
        assert rewritten.title == "Changed"
        assert symbol_song.title == "Let it be"

    def test_songs_copy_given_metadata(self) -> None:
        """Test that a song keeps its own copy of the metadata it is built with."""
        metadata = Metadata({"title": "Original"})
        song = Song(metadata=metadata)
        metadata.set("title", "Changed")
        assert song.title == "Original"
