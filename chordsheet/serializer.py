"""Conversion between songs and plain JSON-compatible objects.

The serialized form is::

    {"type": "chordSheet", "lines": [
        {"type": "line", "items": [
            {"type": "tag", "name": "title", "value": "Let it be"},
            {"type": "comment", "comment": "favorite"},
            {"type": "chordLyricsPair", "chords": "Am", "lyrics": "Let it be"},
            {"type": "ternary", "variable": "composer", "valueTest": None,
             "trueExpression": [...], "falseExpression": [...]},
        ]},
    ]}

Literals are serialized as bare strings. Composite expressions have no
serialized form of their own; their children are written in their place.
"""

from __future__ import annotations

import logging
from typing import Any

from chordsheet.builder import DocumentBuilder
from chordsheet.exceptions import UnknownNodeTypeError
from chordsheet.expressions import Composite, Evaluatable, Literal, Ternary
from chordsheet.song.items import META, ChordLyricsPair, Comment, Item, Tag
from chordsheet.song.line import Line
from chordsheet.song.song import Song

logger = logging.getLogger(__name__)

CHORD_SHEET = "chordSheet"
LINE = "line"
TAG = "tag"
COMMENT = "comment"
CHORD_LYRICS_PAIR = "chordLyricsPair"
TERNARY = "ternary"

SerializedNode = dict[str, Any] | str


class ChordSheetSerializer:
    """Serialize songs to plain objects and back.

    Examples
    --------
    >>> from chordsheet.parsers.chordpro import ChordProParser
    >>> song = ChordProParser().parse("{title: Let it be}\\nLet it [Am]be")
    >>> serializer = ChordSheetSerializer()
    >>> data = serializer.serialize(song)
    >>> data["lines"][1]["items"][1]
    {'type': 'chordLyricsPair', 'chords': 'Am', 'lyrics': 'be'}
    >>> serializer.deserialize(data) == song
    True
    """

    def serialize(self, song: Song) -> dict[str, Any]:
        """Serialize ``song``; warnings and fonts are not included."""
        serialized = {
            "type": CHORD_SHEET,
            "lines": [self.serialize_line(line) for line in song.lines],
        }
        logger.debug("Serialized %d lines", len(song.lines))
        return serialized

    def serialize_line(self, line: Line) -> dict[str, Any]:
        items: list[SerializedNode] = []
        for item in line.items:
            items.extend(self.serialize_item(item))
        return {"type": LINE, "items": items}

    def serialize_item(self, item: Item) -> list[SerializedNode]:
        """Serialize one item; composites expand to several nodes."""
        if isinstance(item, Tag):
            return [self.serialize_tag(item)]
        if isinstance(item, ChordLyricsPair):
            return [self.serialize_chord_lyrics_pair(item)]
        if isinstance(item, Comment):
            return [{"type": COMMENT, "comment": item.content}]
        return self.serialize_expression((item,))

    def serialize_tag(self, tag: Tag) -> dict[str, Any]:
        value = f"{tag.name} {tag.value}" if tag.original_name == META else tag.value
        serialized: dict[str, Any] = {"type": TAG, "name": tag.original_name, "value": value}
        serialized.update(self._location(tag))
        return serialized

    def serialize_chord_lyrics_pair(self, pair: ChordLyricsPair) -> dict[str, Any]:
        return {"type": CHORD_LYRICS_PAIR, "chords": pair.chords, "lyrics": pair.lyrics}

    def serialize_ternary(self, ternary: Ternary) -> dict[str, Any]:
        serialized: dict[str, Any] = {
            "type": TERNARY,
            "variable": ternary.variable,
            "valueTest": ternary.value_test,
            "trueExpression": self.serialize_expression(ternary.true_expression),
            "falseExpression": self.serialize_expression(ternary.false_expression),
        }
        serialized.update(self._location(ternary))
        return serialized

    def serialize_expression(self, expressions: tuple[Evaluatable, ...]) -> list[SerializedNode]:
        serialized: list[SerializedNode] = []
        for expression in expressions:
            if isinstance(expression, Literal):
                serialized.append(expression.string)
            elif isinstance(expression, Ternary):
                serialized.append(self.serialize_ternary(expression))
            elif isinstance(expression, Composite):
                serialized.extend(self.serialize_expression(expression.expressions))
            else:
                raise UnknownNodeTypeError(type(expression).__name__)
        return serialized

    @staticmethod
    def _location(node: Tag | Ternary) -> dict[str, Any]:
        if node.line is None:
            return {}
        return {"location": {"offset": node.offset, "line": node.line, "column": node.column}}

    # ------------------------------------------------------------------
    # Deserialization
    # ------------------------------------------------------------------

    def deserialize(self, serialized_song: dict[str, Any]) -> Song:
        """Rebuild a song from :meth:`serialize` output.

        Raises
        ------
        UnknownNodeTypeError
            If a node has a ``type`` this serializer does not know.
        """
        if not isinstance(serialized_song, dict) or serialized_song.get("type") != CHORD_SHEET:
            raise UnknownNodeTypeError(self._node_type(serialized_song))

        builder = DocumentBuilder()
        for serialized_line in serialized_song.get("lines", []):
            self._parse_line(builder, serialized_line)
        song = builder.build()
        logger.debug("Deserialized %d lines", len(song.lines))
        return song

    def _parse_line(self, builder: DocumentBuilder, serialized_line: SerializedNode) -> None:
        if not isinstance(serialized_line, dict) or serialized_line.get("type") != LINE:
            raise UnknownNodeTypeError(self._node_type(serialized_line))

        builder.add_line()
        for serialized_item in serialized_line.get("items", []):
            builder.add_item(self.parse_ast_component(serialized_item))

    def parse_ast_component(self, node: SerializedNode) -> Item:
        """Turn one serialized item back into an AST item."""
        if isinstance(node, str):
            return Literal(node)

        node_type = self._node_type(node)
        if node_type == TAG:
            return self._parse_tag(node)
        if node_type == CHORD_LYRICS_PAIR:
            return ChordLyricsPair(node.get("chords") or "", node.get("lyrics") or "")
        if node_type == COMMENT:
            return Comment(node["comment"])
        if node_type == TERNARY:
            return self._parse_ternary(node)
        raise UnknownNodeTypeError(node_type)

    def _parse_tag(self, node: dict[str, Any]) -> Tag:
        location = node.get("location") or {}
        name, value = node["name"], node.get("value") or ""
        if name == META:
            name, _, value = value.partition(" ")
        return Tag(
            name,
            value,
            original_name=META if node["name"] == META else None,
            line=location.get("line"),
            column=location.get("column"),
            offset=location.get("offset"),
        )

    def _parse_ternary(self, node: dict[str, Any]) -> Ternary:
        location = node.get("location") or {}
        return Ternary(
            variable=node.get("variable"),
            value_test=node.get("valueTest"),
            true_expression=self._parse_expression(node.get("trueExpression") or []),
            false_expression=self._parse_expression(node.get("falseExpression") or []),
            line=location.get("line"),
            column=location.get("column"),
            offset=location.get("offset"),
        )

    def _parse_expression(self, nodes: list[SerializedNode]) -> tuple[Evaluatable, ...]:
        expressions: list[Evaluatable] = []
        for node in nodes:
            if isinstance(node, str):
                expressions.append(Literal(node))
            elif self._node_type(node) == TERNARY:
                expressions.append(self._parse_ternary(node))
            else:
                raise UnknownNodeTypeError(self._node_type(node))
        return tuple(expressions)

    @staticmethod
    def _node_type(node: object) -> object:
        if isinstance(node, dict):
            return node.get("type")
        return type(node).__name__
