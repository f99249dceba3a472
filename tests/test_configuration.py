"""Tests for formatter configuration."""

import pytest

from chordsheet import Configuration, Key, MetadataConfiguration, ParseError
from chordsheet.configuration import to_snake_case


class TestConfiguration:
    """Test building configurations."""

    def test_defaults(self) -> None:
        """Test the default options."""
        config = Configuration.from_dict(None)
        assert config.evaluate is False
        assert config.key is None
        assert config.expand_chorus_directive is False
        assert config.use_unicode_modifiers is False
        assert config.normalize_chords is True
        assert config.separator == ", "

    def test_camel_case_keys(self) -> None:
        """Test that camelCase option names are accepted."""
        config = Configuration.from_dict(
            {"useUnicodeModifiers": True, "normalizeChords": False, "expandChorusDirective": True}
        )
        assert config.use_unicode_modifiers is True
        assert config.normalize_chords is False
        assert config.expand_chorus_directive is True

    def test_nested_metadata(self) -> None:
        """Test the metadata separator option."""
        config = Configuration.from_dict({"metadata": {"separator": " & "}})
        assert config.metadata == MetadataConfiguration(" & ")
        assert config.separator == " & "

    def test_key_is_parsed(self) -> None:
        """Test that key strings become keys."""
        assert Configuration.from_dict({"key": "Eb"}).key == Key.parse("Eb")
        key = Key.parse("D")
        assert Configuration.from_dict({"key": key}).key is key

    def test_invalid_key(self) -> None:
        """Test that an unreadable key raises."""
        with pytest.raises(ParseError):
            Configuration.from_dict({"key": "H"})

    def test_unknown_options_ignored(self) -> None:
        """Test that unknown option names are dropped."""
        assert Configuration.from_dict({"layout": "html"}) == Configuration()

    def test_configuration_passes_through(self) -> None:
        """Test that a configuration is returned as-is."""
        config = Configuration(evaluate=True)
        assert Configuration.from_dict(config) is config

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("expandChorusDirective", "expand_chorus_directive"),
            ("evaluate", "evaluate"),
            ("normalize_chords", "normalize_chords"),
        ],
    )
    def test_to_snake_case(self, name: str, expected: str) -> None:
        """Test option name conversion."""
        assert to_snake_case(name) == expected
