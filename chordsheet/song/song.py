"""The song document: lines, metadata and build warnings.

A :class:`Song` is never changed in place. Transposing, changing the key
or editing metadata returns a new song that shares the unchanged (immutable)
lines and items with the original.

Examples
--------
>>> from chordsheet.parsers.chordpro import ChordProParser
>>> song = ChordProParser().parse("{key: C}\\nLet it [Am]be")
>>> changed = song.change_key("D")
>>> changed.key
'D'
>>> [item.chords for item in changed.lines[1].items]
['', 'Bm']
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from chordsheet.exceptions import NoKeySetError
from chordsheet.metadata import CAPO, KEY, Metadata, MetadataAccessors, MetadataValue
from chordsheet.song.items import CHORUS as CHORUS_TAG
from chordsheet.song.items import ChordLyricsPair, Item, Tag
from chordsheet.song.line import CHORUS, Line, Paragraph, lines_to_paragraphs
from chordsheet.theory.key import Key

logger = logging.getLogger(__name__)

MapItemsCallback = Callable[[Item], "Item | None"]
MapLinesCallback = Callable[[Line], "Line | None"]


@dataclass(frozen=True)
class ParserWarning:
    """A structural problem found while building a song.

    Parameters
    ----------
    message : str
        What went wrong.
    line_number : int | None
        1-based source line, when known.
    column : int | None
        1-based source column, when known.
    """

    message: str
    line_number: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        return f"Warning: {self.message} on line {self.line_number} column {self.column}"


def signed_distance(distance: int) -> int:
    """Shortest signed path for an upward distance of 0-11 semitones.

    Examples
    --------
    >>> signed_distance(2)
    2
    >>> signed_distance(10)
    -2
    """
    return distance if distance <= 6 else distance - 12


@dataclass(frozen=True)
class Song(MetadataAccessors):
    """A parsed song.

    Parameters
    ----------
    lines : tuple[Line, ...]
        Lines in document order.
    metadata : Metadata
        Values of the meta directives. Treat it as read-only, use
        :meth:`change_metadata` to get a song with different values.
    warnings : tuple[ParserWarning, ...]
        Structural warnings collected while building the song.
    """

    lines: tuple[Line, ...] = ()
    metadata: Metadata = field(default_factory=Metadata)
    warnings: tuple[ParserWarning, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        # Every song owns its metadata, including songs made with replace()
        object.__setattr__(self, "metadata", self.metadata.clone())

    def get_metadata(self, name: str) -> MetadataValue | None:
        return self.metadata.get(name)

    def get_single_metadata(self, name: str) -> str | None:
        return self.metadata.get_single(name)

    def clone(self) -> Song:
        return replace(self)

    # ------------------------------------------------------------------
    # Paragraphs
    # ------------------------------------------------------------------

    @property
    def paragraphs(self) -> tuple[Paragraph, ...]:
        return lines_to_paragraphs(self.lines)

    @property
    def body_lines(self) -> tuple[Line, ...]:
        """Lines after the leading ones that render nothing (the header)."""
        for index, line in enumerate(self.lines):
            if line.has_renderable_items():
                return self.lines[index:]
        return ()

    @property
    def body_paragraphs(self) -> tuple[Paragraph, ...]:
        return lines_to_paragraphs(self.body_lines)

    @property
    def expanded_body_paragraphs(self) -> tuple[Paragraph, ...]:
        """Body paragraphs with each ``{chorus}`` followed by the last chorus before it."""
        expanded: list[Line] = []
        offset = len(self.lines) - len(self.body_lines)
        for index, line in enumerate(self.body_lines, start=offset):
            expanded.append(line)
            if any(isinstance(item, Tag) and item.name == CHORUS_TAG for item in line.items):
                expanded.extend(self._last_chorus_before(index))
        return lines_to_paragraphs(expanded)

    def _last_chorus_before(self, index: int) -> list[Line]:
        chorus: list[Line] = []
        for line in reversed(self.lines[:index]):
            if line.type == CHORUS:
                content = line.map_items(
                    lambda item: None if isinstance(item, Tag) and item.is_section_delimiter() else item
                )
                if content.has_renderable_items():
                    chorus.insert(0, content)
            elif chorus:
                break
        return chorus

    # ------------------------------------------------------------------
    # Structural rewrites
    # ------------------------------------------------------------------

    def map_items(self, func: MapItemsCallback) -> Song:
        """Return a song with every item replaced by ``func(item)``.

        Returning None removes the item.

        Examples
        --------
        >>> from chordsheet.parsers.chordpro import ChordProParser
        >>> song = ChordProParser().parse("[C]Let it [G]be")
        >>> upper = song.map_items(
        ...     lambda item: item.set_lyrics(item.lyrics.upper())
        ...     if isinstance(item, ChordLyricsPair) else item
        ... )
        >>> [item.lyrics for item in upper.lines[0].items]
        ['LET IT ', 'BE']
        """
        return replace(self, lines=tuple(line.map_items(func) for line in self.lines))

    def map_lines(self, func: MapLinesCallback) -> Song:
        """Return a song with every line replaced by ``func(line)``.

        Returning None removes the line.
        """
        mapped = (func(line) for line in self.lines)
        return replace(self, lines=tuple(line for line in mapped if line is not None))

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def change_metadata(self, name: str, value: str | None) -> Song:
        """Return a song with directive ``name`` set to ``value``.

        Existing ``name`` directives are updated where they are. Without
        one, a directive line is inserted before the first line that holds
        anything but directives. ``None`` removes every ``name`` directive
        along with the metadata entry.
        """
        metadata = self.metadata.clone()
        metadata.set(name, value)

        if value is None:
            return replace(self, lines=self._with_line_keys(name, self._remove_tags(name)), metadata=metadata)

        found = False
        lines: list[Line] = []
        for line in self.lines:
            items: list[Item] = []
            for item in line.items:
                if isinstance(item, Tag) and item.name == name:
                    found = True
                    item = item.set_value(value)
                items.append(item)
            lines.append(replace(line, items=tuple(items)))

        if not found:
            position = next(
                (index for index, line in enumerate(lines) if not self._is_header_line(line)),
                len(lines),
            )
            lines.insert(position, Line(items=(Tag(name, value),)))

        return replace(self, lines=self._with_line_keys(name, lines), metadata=metadata)

    @staticmethod
    def _with_line_keys(name: str, lines: tuple[Line, ...] | list[Line]) -> tuple[Line, ...]:
        """Point every line at the {key} directive in effect where it starts."""
        if name != KEY:
            return tuple(lines)
        keyed: list[Line] = []
        current: str | None = None
        for line in lines:
            keyed.append(line if line.key == current else replace(line, key=current))
            for item in line.items:
                if isinstance(item, Tag) and item.name == KEY:
                    current = item.value
        return tuple(keyed)

    @staticmethod
    def _is_header_line(line: Line) -> bool:
        return line.is_not_empty() and all(isinstance(item, Tag) for item in line.items)

    def _remove_tags(self, name: str) -> tuple[Line, ...]:
        lines: list[Line] = []
        for line in self.lines:
            kept = line.map_items(lambda item: None if isinstance(item, Tag) and item.name == name else item)
            if kept.is_empty() and line.is_not_empty():
                continue
            lines.append(kept)
        return tuple(lines)

    def set_key(self, key: Key | str | int | None) -> Song:
        """Return a song with the ``key`` directive and metadata set to ``key``."""
        return self.change_metadata(KEY, None if key is None else str(key))

    def set_capo(self, capo: int | str | None) -> Song:
        """Return a song with the ``capo`` directive and metadata set to ``capo``."""
        return self.change_metadata(CAPO, None if capo is None else str(capo))

    # ------------------------------------------------------------------
    # Transposition
    # ------------------------------------------------------------------

    def transpose(self, delta: int, *, normalize_chord_suffix: bool = False) -> Song:
        """Transpose every chord and the song key by ``delta`` semitones.

        Chords that do not parse are left as they are. Works without a
        known key, in which case chords keep the spelling transposition
        gives them.
        """
        key = Key.wrap(self.key)
        new_key = key.transpose(delta).normalize() if key is not None else None
        logger.debug("Transposing song by %d semitones (key %s -> %s)", delta, key, new_key)
        return self._transpose(delta, key, new_key, normalize_chord_suffix=normalize_chord_suffix)

    def transpose_up(self, *, normalize_chord_suffix: bool = False) -> Song:
        return self.transpose(1, normalize_chord_suffix=normalize_chord_suffix)

    def transpose_down(self, *, normalize_chord_suffix: bool = False) -> Song:
        return self.transpose(-1, normalize_chord_suffix=normalize_chord_suffix)

    def get_transpose_distance(self, new_key: Key | str) -> int:
        """Signed semitone distance from the song key to ``new_key``.

        Raises
        ------
        NoKeySetError
            If the song has no key.
        """
        key = Key.wrap(self.key)
        if key is None:
            raise NoKeySetError()
        return signed_distance(key.distance_to(new_key))

    def change_key(self, new_key: Key | str) -> Song:
        """Return a song in ``new_key``, with every chord transposed to match.

        Raises
        ------
        NoKeySetError
            If the song has no key to transpose from.
        """
        target = Key.wrap_or_fail(new_key)
        delta = self.get_transpose_distance(target)
        logger.debug("Changing song key from %s to %s (%d semitones)", self.key, target, delta)
        return self._transpose(delta, Key.wrap(self.key), target)

    def _transpose(
        self,
        delta: int,
        key: Key | None,
        new_key: Key | None,
        *,
        normalize_chord_suffix: bool = False,
    ) -> Song:
        def transpose_key(value: str | None) -> str | None:
            parsed = Key.parse(value)
            if parsed is None:
                return value
            if new_key is not None and Key.equals(parsed, key):
                return str(new_key)
            return str(parsed.transpose(delta).normalize())

        def transpose_line(line: Line) -> Line:
            line_key = transpose_key(line.key) or (str(new_key) if new_key is not None else None)
            items: list[Item] = []
            for item in line.items:
                if isinstance(item, Tag) and item.name == KEY:
                    item = item.set_value(transpose_key(item.value) or item.value)
                elif isinstance(item, ChordLyricsPair):
                    item = item.transpose(delta, line_key, normalize_chord_suffix=normalize_chord_suffix)
                items.append(item)
            return replace(line, items=tuple(items), key=transpose_key(line.key))

        metadata = self.metadata.clone()
        if new_key is not None:
            metadata.set(KEY, str(new_key))
        return replace(self, lines=tuple(transpose_line(line) for line in self.lines), metadata=metadata)
