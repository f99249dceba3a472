"""Reader for ``%{...}`` meta expressions.

Supported forms::

    %{title}                      value of title
    %{title|yes}                  "yes" when title is set
    %{title|yes|no}               "yes" when title is set, else "no"
    %{key=C|in C|not in C}        compare the value first
    %{composer|by %{}}            %{} is the value being tested

A backslash makes the next character literal, so ``\\|`` and ``\\}`` can be
used inside branches.
"""

from __future__ import annotations

from chordsheet.exceptions import ParseError
from chordsheet.expressions import Composite, Evaluatable, Literal, Ternary

EXPRESSION_START = "%{"
ESCAPE = "\\"


class _MetaReader:
    def __init__(self, text: str, position: int, line: int | None, column: int | None, offset: int):
        self.text = text
        self.position = position
        self.line = line
        self.column = column
        self.offset = offset

    def peek(self) -> str:
        return self.text[self.position] if self.position < len(self.text) else ""

    def fail(self) -> ParseError:
        return ParseError(self.text, "meta expression")

    def read_expression(self) -> Ternary:
        start = self.position
        if not self.text.startswith(EXPRESSION_START, start):
            raise self.fail()
        self.position += len(EXPRESSION_START)

        variable = self.read_until("=|}").strip() or None
        value_test = None
        true_expression: tuple[Evaluatable, ...] = ()
        false_expression: tuple[Evaluatable, ...] = ()

        if self.peek() == "=":
            self.position += 1
            value_test = self.read_until("|}")
        if self.peek() == "|":
            self.position += 1
            true_expression = self.read_branch("|}")
        if self.peek() == "|":
            self.position += 1
            false_expression = self.read_branch("}")
        if self.peek() != "}":
            raise self.fail()
        self.position += 1

        return Ternary(
            variable=variable,
            value_test=value_test,
            true_expression=true_expression,
            false_expression=false_expression,
            line=self.line,
            column=None if self.column is None else self.column + start - self.offset,
            offset=start,
        )

    def read_until(self, stops: str) -> str:
        chars: list[str] = []
        while self.position < len(self.text) and self.peek() not in stops:
            if self.peek() == ESCAPE and self.position + 1 < len(self.text):
                self.position += 1
            chars.append(self.peek())
            self.position += 1
        return "".join(chars)

    def read_branch(self, stops: str) -> tuple[Evaluatable, ...]:
        parts: list[Evaluatable] = []
        chars: list[str] = []
        while self.position < len(self.text) and self.peek() not in stops:
            if self.text.startswith(EXPRESSION_START, self.position):
                if chars:
                    parts.append(Literal("".join(chars)))
                    chars = []
                parts.append(self.read_expression())
                continue
            if self.peek() == ESCAPE and self.position + 1 < len(self.text):
                self.position += 1
            chars.append(self.peek())
            self.position += 1
        if chars:
            parts.append(Literal("".join(chars)))
        return tuple(parts)


def read_meta_expression(
    text: str,
    position: int = 0,
    *,
    line: int | None = None,
    column: int | None = None,
) -> tuple[Ternary, int]:
    """Read the meta expression starting at ``text[position]``.

    Parameters
    ----------
    text : str
        Text containing the expression.
    position : int
        Index of the ``%`` that opens the expression.
    line, column : int | None
        Source line and column of ``text[position]``, recorded on the result.

    Returns
    -------
    tuple[Ternary, int]
        The expression and the index just past its closing brace.

    Raises
    ------
    ParseError
        If the expression is not terminated.

    Examples
    --------
    >>> ternary, end = read_meta_expression("%{title|%{}|Untitled} rest")
    >>> ternary.variable, end
    ('title', 21)
    >>> ternary.false_expression
    (Literal(string='Untitled'),)
    """
    reader = _MetaReader(text, position, line, column, position)
    return reader.read_expression(), reader.position


def parse_meta_expression(text: str) -> Ternary:
    """Parse text that consists of exactly one meta expression."""
    ternary, end = read_meta_expression(text.strip())
    if end != len(text.strip()):
        raise ParseError(text, "meta expression")
    return ternary


def parse_meta_text(text: str) -> Composite:
    """Parse text with embedded meta expressions into a Composite.

    Examples
    --------
    >>> from chordsheet.metadata import Metadata
    >>> composite = parse_meta_text("%{artist} - %{title}")
    >>> composite.evaluate(Metadata({"artist": "The Beatles", "title": "Let it be"}))
    'The Beatles - Let it be'
    """
    reader = _MetaReader(text, 0, None, None, 0)
    return Composite(expressions=reader.read_branch(""))
