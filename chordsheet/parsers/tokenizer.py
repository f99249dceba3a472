"""Column-aware tokenizer for chords-over-words sheets.

A chord belongs to the lyrics under its first column, so each token keeps
its span along with its text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from chordsheet.theory.chord import Chord

TokenKind = Literal["chord", "word", "punct", "other"]

TOKEN_RE = re.compile(r"\S+")


@dataclass(frozen=True)
class Token:
    """One run of non-space characters on a sheet row.

    Parameters
    ----------
    text : str
        Characters of the run.
    start : int
        First column, counted from 0.
    end : int
        Column just past the run.
    kind : TokenKind
        Set by :func:`~chordsheet.parsers.chord_detector.classify_token`.
    chord : Chord | None
        The parsed chord for chord tokens.

    Examples
    --------
    >>> Token(text="Lam", start=4, end=7).kind
    'other'
    """

    text: str
    start: int
    end: int
    kind: TokenKind = "other"
    chord: Chord | None = None


def tokenize_line(line: str) -> list[Token]:
    """Split a sheet row on whitespace, keeping columns.

    Leading whitespace is significant, so the row is never stripped.

    Examples
    --------
    >>> [(t.text, t.start, t.end) for t in tokenize_line("   Am    C/G")]
    [('Am', 3, 5), ('C/G', 9, 12)]
    >>> [t.text for t in tokenize_line("Let it be,  let")]
    ['Let', 'it', 'be,', 'let']
    """
    return [
        Token(text=match.group(), start=match.start(), end=match.end())
        for match in TOKEN_RE.finditer(line)
    ]
