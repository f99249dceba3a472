"""Tell chord rows from lyric rows in chords-over-words sheets.

Letter-name chords must pass a quality regex and then pychord. Chords in
the other notations (``Lam``, ``IV``, ``b3``) are read with
:meth:`~chordsheet.theory.Chord.parse` and accepted when their suffix is
one a letter-name chord could carry.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import replace
from typing import Literal

from pychord import Chord as PyChord

from chordsheet.parsers.tokenizer import Token, tokenize_line
from chordsheet.theory.chord import parse_chord
from chordsheet.theory.tables import SYMBOL

MAX_CHORD_LENGTH = 15
CHORD_LINE_THRESHOLD = 0.6

NOTE_PATTERN = r"[A-G][b#]?"
QUALITY_PATTERNS = (
    r"[mM](?:aj)?(?:7|9|11|13)?",
    r"dim7?",
    r"aug7?",
    r"sus[24]?7?",
    r"add[29]",
    r"[5679]",
    r"11",
    r"13",
    r"m7(?:-5|b5)",
    r"m(?:M|maj)7",
)
CHORD_RE = re.compile(rf"^{NOTE_PATTERN}(?:{'|'.join(QUALITY_PATTERNS)})*(?:/{NOTE_PATTERN})?$")

# Lowercase lyric words that read as chords. "Am" and "La" stay chords.
FALSE_POSITIVES_LOWERCASE: frozenset[str] = frozenset(
    {"a", "am", "be", "i", "do", "re", "mi", "fa", "sol", "la", "si"}
)

SECTION_HEADER_RE = re.compile(r"^\s*\[(?P<name>[^\]]+)\]\s*$")
COMMENT_LINE_RE = re.compile(r"^\s*\((?P<text>.+?)\)\s*$")

RowKind = Literal["chord", "lyric", "empty", "comment", "section_header"]


def is_chord_symbol(text: str) -> bool:
    """Check whether text is a chord symbol pychord accepts.

    Examples
    --------
    >>> is_chord_symbol("Gm7")
    True
    >>> is_chord_symbol("Hello")
    False
    """
    if not CHORD_RE.match(text):
        return False
    try:
        PyChord(text)
    except ValueError:
        return False
    return True


def is_chord(text: str) -> bool:
    """Check if text is a chord in any supported notation.

    Examples
    --------
    >>> is_chord("C/E")
    True
    >>> is_chord("Sol7")
    True
    >>> is_chord("IV")
    True
    >>> is_chord("am")
    False
    >>> is_chord("Very")
    False
    """
    if not text or len(text) > MAX_CHORD_LENGTH:
        return False
    if text.islower() and text in FALSE_POSITIVES_LOWERCASE:
        return False
    if is_chord_symbol(text):
        return True

    # Other notations must carry a suffix a chord symbol could carry
    chord = parse_chord(text)
    if chord is None or chord.type == SYMBOL:
        return False
    return is_chord_symbol(f"C{chord.suffix or ''}")


def classify_token(token: Token) -> Token:
    """Return ``token`` with its kind set to chord, punct, word or other.

    Chord tokens also carry the parsed :class:`~chordsheet.theory.Chord`.

    Examples
    --------
    >>> classify_token(Token(text="Lam", start=0, end=3)).kind
    'chord'
    >>> classify_token(Token(text="|", start=0, end=1)).kind
    'punct'
    >>> classify_token(Token(text="2x", start=0, end=2)).kind
    'word'
    """
    if is_chord(token.text):
        return replace(token, kind="chord", chord=parse_chord(token.text))
    if not any(c.isalnum() for c in token.text):
        return replace(token, kind="punct")
    if any(c.isalpha() for c in token.text):
        return replace(token, kind="word")
    return token


def classify_tokens(tokens: list[Token]) -> list[Token]:
    return [classify_token(token) for token in tokens]


def tokenize_and_classify(line: str) -> list[Token]:
    return classify_tokens(tokenize_line(line))


def classify_line(line: str, tokens: list[Token] | None = None) -> RowKind:
    """Decide what kind of row ``line`` is.

    A chord row holds no words, and chords make up at least
    ``CHORD_LINE_THRESHOLD`` of its tokens, so bar lines and repeat
    marks may sit between the chords. ``[Am]`` on its own is a chord row,
    not a section label.

    Parameters
    ----------
    line : str
        Raw sheet line.
    tokens : list[Token] | None
        Tokens from :func:`tokenize_and_classify`, when the caller already
        has them.

    Examples
    --------
    >>> classify_line("   ")
    'empty'
    >>> classify_line("[Chorus]")
    'section_header'
    >>> classify_line("(x2)")
    'comment'
    >>> classify_line("Do   Sol | Lam  Fa")
    'chord'
    >>> classify_line("Am I wrong")
    'lyric'
    """
    if not line.strip():
        return "empty"
    if SECTION_HEADER_RE.match(line) and not is_chord(line.strip()[1:-1]):
        return "section_header"
    if COMMENT_LINE_RE.match(line):
        return "comment"

    kinds = Counter(token.kind for token in tokens or tokenize_and_classify(line))
    chords = kinds["chord"]
    if chords and not kinds["word"] and chords >= CHORD_LINE_THRESHOLD * sum(kinds.values()):
        return "chord"
    return "lyric"
