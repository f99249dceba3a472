"""Rendering chords the way they should appear on a line."""

from __future__ import annotations

import re

from chordsheet.song.items import CHORD_STYLE
from chordsheet.song.line import Line
from chordsheet.song.song import Song, signed_distance
from chordsheet.theory.chord import Chord, parse_chord
from chordsheet.theory.key import Key, is_absolute_type
from chordsheet.theory.tables import CHORD_TYPES, ChordType

SEMITONES_RE = re.compile(r"^[+-]?\d+$")


def transpose_distance(transpose_key: str | None, song_key: str | None) -> int:
    """Semitones a ``{transpose}`` value moves chords by.

    The value is either a number of semitones or a key, in which case the
    distance is measured from the song key.

    Examples
    --------
    >>> transpose_distance("2", "C")
    2
    >>> transpose_distance("G", "C")
    -5
    >>> transpose_distance(None, "C")
    0
    """
    if not transpose_key:
        return 0
    if SEMITONES_RE.match(transpose_key.strip()):
        return int(transpose_key)

    origin = Key.parse(song_key)
    target = Key.parse(transpose_key)
    if origin is None or target is None:
        return 0
    return signed_distance(origin.distance_to(target))


def change_chord_type(chord: Chord, chord_type: str | None, key: Key | None) -> Chord:
    """Convert ``chord`` to ``chord_type`` when that is possible.

    Conversions between absolute and relative notations need an absolute
    key; without one the chord is returned unchanged.
    """
    if chord_type not in CHORD_TYPES or chord_type == chord.type:
        return chord
    if is_absolute_type(chord_type) == is_absolute_type(chord.type):
        return chord.convert(chord_type)
    if key is None or not is_absolute_type(key.type):
        return chord
    return chord.convert(chord_type, key)


def render_chord(
    chord_string: str,
    line: Line,
    song: Song,
    *,
    render_key: Key | None = None,
    use_unicode_modifier: bool = False,
    normalize_chords: bool = True,
) -> str:
    """Render chord text for display.

    The chord is transposed by the line's ``{transpose}`` value and, when
    ``render_key`` is given, from the song key to ``render_key``. It is
    then spelled for the key it ends up in. Text that is not a chord is
    returned unchanged.

    Parameters
    ----------
    chord_string : str
        Chord text of a chord/lyrics pair.
    line : Line
        Line the chord is on.
    song : Song
        Song the line belongs to.
    render_key : Key | None
        Key to render in, if different from the song key.
    use_unicode_modifier : bool
        Use ``♯`` and ``♭``.
    normalize_chords : bool
        Rewrite suffixes to their canonical spelling.
    """
    chord = parse_chord(chord_string.strip()) if chord_string.strip() else None
    if chord is None:
        return chord_string

    song_key = Key.wrap(song.key)
    distance = transpose_distance(line.transpose_key, song.key)
    if render_key is not None and song_key is not None:
        distance += signed_distance(song_key.distance_to(render_key))

    line_key = Key.parse(line.key) or song_key
    effective_key = render_key
    if effective_key is None and line_key is not None:
        effective_key = line_key.transpose(distance).normalize()

    style: ChordType | None = song.metadata.get_single(CHORD_STYLE)
    rendered = change_chord_type(chord.transpose(distance), style, effective_key)
    rendered = rendered.normalize(effective_key, normalize_suffix=normalize_chords)
    return rendered.to_string(use_unicode_modifier=use_unicode_modifier)
