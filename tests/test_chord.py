"""Tests for chords."""

import pytest

from chordsheet import Chord, InvalidConversionError, Key, ParseError
from chordsheet.theory import normalize_chord_suffix, parse_chord


class TestChordParse:
    """Test parsing chords."""

    def test_parse_symbol(self) -> None:
        """Test parsing a symbol chord with suffix and bass."""
        chord = Chord.parse("Bbm7/F")
        assert chord is not None
        assert chord.type == "symbol"
        assert chord.root.grade == 10
        assert chord.suffix == "m7"
        assert chord.bass == Key.parse("F")
        assert chord.is_minor()

    def test_parse_solfege(self) -> None:
        """Test parsing a solfege chord."""
        chord = Chord.parse("Lam")
        assert chord.type == "solfege"
        assert chord.root.grade == 9
        assert chord.is_minor()

    def test_parse_numeric(self) -> None:
        """Test parsing a numeric chord."""
        chord = Chord.parse("b3sus4/5")
        assert chord.type == "numeric"
        assert chord.root.number == 3
        assert chord.root.modifier == "b"
        assert chord.suffix == "sus4"
        assert chord.bass.number == 5

    def test_parse_numeral(self) -> None:
        """Test parsing numerals, where case marks minor chords."""
        assert Chord.parse("IV").type == "numeral"
        assert Chord.parse("vi").is_minor()
        assert not Chord.parse("V7").is_minor()

    def test_parse_trims_whitespace(self) -> None:
        """Test that surrounding whitespace is ignored."""
        assert str(Chord.parse("  E/G# \n")) == "E/G#"

    def test_parse_unicode_modifiers(self) -> None:
        """Test that unicode modifiers are read as ASCII ones."""
        assert Chord.parse("B♭") == Chord.parse("Bb")

    @pytest.mark.parametrize("text", ["", "Hello", "H7", "C/H", None])
    def test_unrecognized(self, text: str | None) -> None:
        """Test that non-chords parse to None."""
        assert Chord.parse(text) is None

    def test_parse_or_fail(self) -> None:
        """Test that parse_or_fail raises for non-chords."""
        with pytest.raises(ParseError) as excinfo:
            Chord.parse_or_fail("Hello")
        assert excinfo.value.kind == "chord"

    def test_mixed_types_rejected(self) -> None:
        """Test that root and bass must share a notation."""
        with pytest.raises(ValueError, match="same type"):
            Chord(root=Key.parse("C"), bass=Key.parse("Re"))

    def test_parse_chord_is_cached(self) -> None:
        """Test that equal chord strings share one parsed chord."""
        assert parse_chord("Am7") is parse_chord("Am7")


class TestChordTranspose:
    """Test transposing chords."""

    @pytest.mark.parametrize(
        ("text", "delta", "expected"),
        [
            ("Esus4/G#", 2, "F#sus4/A#"),
            ("C/G", 2, "D/A"),
            ("Am", 2, "Bm"),
            ("Sib", -1, "La"),
            ("Bb", 1, "B"),
            ("4", 2, "5"),
            ("Dm7", -12, "Dm7"),
        ],
    )
    def test_transpose(self, text: str, delta: int, expected: str) -> None:
        """Test transposing root and bass."""
        assert str(Chord.parse(text).transpose(delta)) == expected

    def test_transpose_up_and_down(self) -> None:
        """Test single semitone shortcuts."""
        chord = Chord.parse("G")
        assert str(chord.transpose_up()) == "G#"
        assert str(chord.transpose_down()) == "Gb"
        assert chord.transpose_up().transpose_down() == chord

    def test_chords_are_immutable(self) -> None:
        """Test that transposing returns a new chord."""
        chord = Chord.parse("C")
        chord.transpose(3)
        assert str(chord) == "C"


class TestChordNormalize:
    """Test chord normalization."""

    def test_normalize_root_and_suffix(self) -> None:
        """Test collapsing the root and rewriting the suffix."""
        assert str(Chord.parse("Fbsus2").normalize()) == "E2"

    def test_normalize_without_suffix(self) -> None:
        """Test keeping the suffix as written."""
        assert str(Chord.parse("Fbsus2").normalize(normalize_suffix=False)) == "Esus2"

    def test_normalize_in_key(self) -> None:
        """Test spelling the root the way the key writes it."""
        assert str(Chord.parse("A#").normalize("F")) == "Bb"
        assert str(Chord.parse("Gb7").normalize("D")) == "F#7"

    def test_minor_bass_follows_relative_major(self) -> None:
        """Test that the bass of a minor chord is spelled from its relative major."""
        assert str(Chord.parse("Em/A#").normalize()) == "Em/Bb"

    def test_bass_follows_root(self) -> None:
        """Test that the bass of a major chord is spelled from the root."""
        assert str(Chord.parse("D/Gb").normalize()) == "D/F#"

    @pytest.mark.parametrize(
        ("suffix", "expected"),
        [("sus2", "2"), ("maj", None), ("min7", "m7"), ("7b9", "7b9"), (None, None)],
    )
    def test_normalize_chord_suffix(self, suffix: str | None, expected: str | None) -> None:
        """Test the suffix alias table."""
        assert normalize_chord_suffix(suffix) == expected


class TestChordConvert:
    """Test converting chords between notations."""

    @pytest.mark.parametrize(
        ("text", "target", "reference", "expected"),
        [
            ("Am", "numeral", "C", "vi"),
            ("Am7", "numeral", "C", "vi7"),
            ("Am", "numeric", "C", "6m"),
            ("vi", "symbol", "C", "Am"),
            ("Lam", "symbol", None, "Am"),
            ("C/E", "solfege", None, "Do/Mi"),
            ("#4", "symbol", "E", "A#"),
            ("G7/B", "numeric", "G", "17/3"),
        ],
    )
    def test_convert(self, text: str, target: str, reference: str | None, expected: str) -> None:
        """Test conversions with and without a reference key."""
        assert str(Chord.parse(text).convert(target, reference)) == expected

    def test_convert_shortcuts(self) -> None:
        """Test the named conversion helpers."""
        chord = Chord.parse("F")
        assert chord.to_numeral_string("C") == "IV"
        assert chord.to_numeric_string("C") == "4"
        assert chord.to_chord_solfege_string() == "Fa"
        assert Chord.parse("4").to_chord_symbol_string("C") == "F"

    def test_convert_needs_reference(self) -> None:
        """Test that relative conversions need a key."""
        with pytest.raises(InvalidConversionError):
            Chord.parse("IV").to_chord_symbol()


class TestChordToString:
    """Test rendering chords."""

    def test_unicode_modifier(self) -> None:
        """Test unicode sharps and flats."""
        assert Chord.parse("Bb/D").to_string(use_unicode_modifier=True) == "B♭/D"

    def test_make_minor(self) -> None:
        """Test building the minor version of a chord."""
        assert str(Chord.parse("C").make_minor()) == "Cm"
        assert str(Chord.parse("IV").make_minor()) == "iv"
        assert str(Chord.parse("Am").make_minor()) == "Am"

    @pytest.mark.parametrize(
        ("text", "chord_type"),
        [
            ("C", "symbol"),
            ("Am7", "symbol"),
            ("Bb/D", "symbol"),
            ("F#m7b5", "symbol"),
            ("Esus4/G#", "symbol"),
            ("Do", "solfege"),
            ("Lam", "solfege"),
            ("Sib7", "solfege"),
            ("Fa/La", "solfege"),
            ("1", "numeric"),
            ("b3", "numeric"),
            ("4m7", "numeric"),
            ("b3sus4/5", "numeric"),
            ("I", "numeral"),
            ("vi7", "numeral"),
            ("V7", "numeral"),
            ("bVII", "numeral"),
        ],
    )
    def test_string_round_trip(self, text: str, chord_type: str) -> None:
        """Test that a rendered chord parses back to the same text and notation."""
        rendered = str(Chord.parse(text))
        reparsed = Chord.parse(rendered)
        assert reparsed is not None
        assert reparsed.type == chord_type
        assert str(reparsed) == rendered

    @pytest.mark.parametrize("text", ["Am7", "Bb/D", "E/G#", "Lam", "Do/Mi", "b3", "vi7", "IV"])
    def test_string_is_kept(self, text: str) -> None:
        """Test that chords already in canonical spelling render unchanged."""
        assert str(Chord.parse(text)) == text
