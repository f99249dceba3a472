"""Tests for the metadata store."""

import pytest

from chordsheet import ChordProParser, Metadata


class TestMetadataAdd:
    """Test accumulating values."""

    def test_single_value(self) -> None:
        """Test that one value is kept as a string."""
        metadata = Metadata()
        metadata.add("title", "Let it be")
        assert metadata.get("title") == "Let it be"
        assert metadata.title == "Let it be"

    def test_repeated_values_become_a_list(self) -> None:
        """Test that a second value turns the entry into a list."""
        metadata = Metadata()
        metadata.add("composer", "John Lennon")
        metadata.add("composer", "Paul McCartney")
        metadata.add("composer", "George Harrison")
        assert metadata.get("composer") == ["John Lennon", "Paul McCartney", "George Harrison"]

    def test_duplicate_single_value_ignored(self) -> None:
        """Test that adding the same single value twice keeps one copy."""
        metadata = Metadata()
        metadata.add("artist", "The Beatles")
        metadata.add("artist", "The Beatles")
        assert metadata.get("artist") == "The Beatles"

    def test_repeats_accumulate_in_lists(self) -> None:
        """Test that a list keeps every value added to it, repeats included."""
        metadata = Metadata()
        for composer in ("A", "B", "A"):
            metadata.add("composer", composer)
        assert metadata.get("composer") == ["A", "B", "A"]

    def test_repeated_directives_accumulate(self) -> None:
        """Test that repeated directives in a sheet keep every value."""
        song = ChordProParser().parse("{composer: A}\n{composer: B}\n{composer: A}")
        assert song.metadata.get("composer") == ["A", "B", "A"]

    def test_readonly_key_cannot_be_written(self) -> None:
        """Test that the computed key name is readonly."""
        metadata = Metadata()
        metadata.add("_key", "D")
        metadata.set("_key", "D")
        assert "_key" not in metadata


class TestMetadataSet:
    """Test replacing and deleting values."""

    def test_set_replaces(self) -> None:
        """Test that set overwrites every earlier value."""
        metadata = Metadata({"composer": ["John", "Paul"]})
        metadata.set("composer", "George")
        assert metadata.get("composer") == "George"

    def test_set_none_deletes(self) -> None:
        """Test that setting None removes the entry."""
        metadata = Metadata({"title": "Song"})
        metadata.set("title", None)
        assert not metadata.contains("title")
        assert metadata.get("title") is None

    def test_lists_are_copied(self) -> None:
        """Test that callers cannot change stored lists."""
        values = ["John", "Paul"]
        metadata = Metadata({"composer": values})
        values.append("Ringo")
        metadata.get("composer").append("George")
        assert metadata.get("composer") == ["John", "Paul"]


class TestMetadataGet:
    """Test reading values."""

    @pytest.fixture
    def metadata(self) -> Metadata:
        return Metadata({"lyricist": "Pete", "author": ["John", "Mary", "Anne"]})

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("author.1", "John"),
            ("author.3", "Anne"),
            ("author.-1", "Anne"),
            ("author.-3", "John"),
            ("author.4", None),
            ("author.-4", None),
            ("author.0", None),
            ("lyricist.1", "Pete"),
            ("unknown.1", None),
        ],
    )
    def test_array_index(self, metadata: Metadata, name: str, expected: str | None) -> None:
        """Test 1-based and negative array indexes."""
        assert metadata.get(name) == expected

    def test_get_single(self, metadata: Metadata) -> None:
        """Test reading the first of several values."""
        assert metadata.get_single("author") == "John"
        assert metadata.get_single("lyricist") == "Pete"
        assert metadata.get_single("missing") is None

    def test_parse_array_key(self) -> None:
        """Test splitting names with an index suffix."""
        assert Metadata.parse_array_key("author.-2") == ("author", -2)
        assert Metadata.parse_array_key("author") is None


class TestMetadataCapo:
    """Test the key computed from key and capo."""

    @pytest.mark.parametrize(
        ("values", "expected"),
        [
            ({"key": "C", "capo": "2"}, "D"),
            ({"key": "Bb", "capo": "1"}, "B"),
            ({"key": "A", "capo": "3"}, "C"),
            ({"key": "C"}, None),
            ({"capo": "2"}, None),
            ({"key": "C", "capo": "two"}, None),
        ],
    )
    def test_key_from_capo(self, values: dict[str, str], expected: str | None) -> None:
        """Test reading the capo key through the readonly name."""
        assert Metadata(values).get("_key") == expected


class TestMetadataMerge:
    """Test combining stores."""

    def test_merge_accumulates(self) -> None:
        """Test that overlapping names gain values without touching the original."""
        metadata = Metadata({"composer": "John", "title": "Song"})
        merged = metadata.merge({"composer": ["Paul"], "year": "1970"})
        assert merged.get("composer") == ["John", "Paul"]
        assert merged.get("year") == "1970"
        assert list(merged) == ["composer", "title", "year"]
        assert metadata.get("composer") == "John"

    def test_clone_is_independent(self) -> None:
        """Test that clones do not share values."""
        metadata = Metadata({"composer": ["John"]})
        clone = metadata.clone()
        clone.add("composer", "Paul")
        assert clone == Metadata({"composer": ["John", "Paul"]})
        assert metadata == Metadata({"composer": ["John"]})
