"""Exception types raised by chordsheet.

Structural problems found while building a song are not raised; they are
collected as :class:`~chordsheet.song.ParserWarning` values instead.
"""

from __future__ import annotations


class ChordSheetError(Exception):
    """Base exception for chordsheet."""


class ParseError(ChordSheetError, ValueError):
    """Raised by the ``parse_or_fail`` variants when text is not recognized."""

    def __init__(self, text: str | None, kind: str):
        self.text = text
        self.kind = kind
        super().__init__(f"Could not parse {kind}: {text!r}")


class InvalidConversionError(ChordSheetError, ValueError):
    """Raised when a notation conversion needs a reference key it did not get."""

    def __init__(self, key: object, target_type: str, reason: str = "a reference key is required"):
        self.key = key
        self.target_type = target_type
        self.reason = reason
        super().__init__(f"Cannot convert {key} to {target_type}: {reason}")


class NoKeySetError(ChordSheetError):
    """Raised when changing the key of a song whose current key is unknown."""

    def __init__(self) -> None:
        super().__init__("Cannot change song key, the original key is unknown")


class UnknownNodeTypeError(ChordSheetError, ValueError):
    """Raised when deserializing a node with an unrecognized ``type``."""

    def __init__(self, node_type: object):
        self.node_type = node_type
        super().__init__(f"Unknown node type: {node_type!r}")
