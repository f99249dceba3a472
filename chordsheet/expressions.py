"""Meta expressions embedded in chord sheet text.

A meta expression such as ``%{composer|%{}|No composer}`` is read into a
tree of :class:`Literal`, :class:`Ternary` and :class:`Composite` nodes.
Evaluating the tree against song :class:`~chordsheet.metadata.Metadata`
yields plain text.

Examples
--------
>>> from chordsheet.metadata import Metadata
>>> ternary = Ternary(
...     variable="composer",
...     true_expression=(Ternary(),),
...     false_expression=(Literal("No composer"),),
... )
>>> ternary.evaluate(Metadata({"composer": ["John", "Paul"]}), ", ")
'John, Paul'
>>> ternary.evaluate(Metadata(), ", ")
'No composer'
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chordsheet.metadata import Metadata, MetadataValue


def value_to_string(value: MetadataValue, separator: str) -> str:
    """Join a multi-value metadata entry with ``separator``."""
    if isinstance(value, list):
        return separator.join(value)
    return value


def evaluate_expressions(
    expressions: Iterable[Evaluatable],
    metadata: Metadata,
    separator: str,
    upper_context: MetadataValue | None = None,
) -> str:
    """Evaluate a sequence of expressions and concatenate the results."""
    return "".join(expression.evaluate(metadata, separator, upper_context) for expression in expressions)


@dataclass(frozen=True)
class Literal:
    """Verbatim text inside a meta expression.

    Parameters
    ----------
    string : str
        The text.
    """

    string: str

    def evaluate(
        self,
        metadata: Metadata | None = None,
        separator: str = ", ",
        upper_context: MetadataValue | None = None,
    ) -> str:
        return self.string

    def is_renderable(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.string


@dataclass(frozen=True)
class Ternary:
    """Conditional text depending on a metadata value.

    ``%{name}`` renders the value of ``name``. ``%{name|yes|no}`` renders
    ``yes`` when ``name`` has a value and ``no`` otherwise, and
    ``%{name=value|yes|no}`` compares the value first. Inside a branch, an
    empty ``%{}`` stands for the value being tested.

    Parameters
    ----------
    variable : str | None
        Metadata name to test. None for the ``%{}`` placeholder.
    value_test : str | None
        Value the metadata entry must equal for the true branch.
    true_expression : tuple[Evaluatable, ...]
        Rendered when the test passes.
    false_expression : tuple[Evaluatable, ...]
        Rendered when the test fails.
    line, column, offset : int | None
        Position of the expression in the source text.
    """

    variable: str | None = None
    value_test: str | None = None
    true_expression: tuple[Evaluatable, ...] = ()
    false_expression: tuple[Evaluatable, ...] = ()
    line: int | None = field(default=None, compare=False)
    column: int | None = field(default=None, compare=False)
    offset: int | None = field(default=None, compare=False)

    def evaluate(
        self,
        metadata: Metadata,
        separator: str = ", ",
        upper_context: MetadataValue | None = None,
    ) -> str:
        """Evaluate the expression.

        Parameters
        ----------
        metadata : Metadata
            Metadata the variable is looked up in.
        separator : str
            Joins multi-value metadata entries.
        upper_context : str | list[str] | None
            Value tested by the enclosing expression, used by ``%{}``.

        Raises
        ------
        ValueError
            If a ``%{}`` placeholder is evaluated outside of any expression.
        """
        if self.variable:
            return self.evaluate_with_variable(metadata, separator)

        if upper_context is None:
            msg = "Unexpected empty expression"
            raise ValueError(msg)

        return value_to_string(upper_context, separator)

    def evaluate_with_variable(self, metadata: Metadata, separator: str) -> str:
        value = metadata.get(self.variable)
        if value and self._matches(value):
            return self.evaluate_for_truthy_value(metadata, separator, value)
        return evaluate_expressions(self.false_expression, metadata, separator)

    def evaluate_for_truthy_value(self, metadata: Metadata, separator: str, value: MetadataValue) -> str:
        if self.true_expression:
            return evaluate_expressions(self.true_expression, metadata, separator, value)
        return value_to_string(value, separator)

    def _matches(self, value: MetadataValue) -> bool:
        if self.value_test is None:
            return True
        if isinstance(value, list):
            return self.value_test in value
        return value == self.value_test

    def is_renderable(self) -> bool:
        return True


@dataclass(frozen=True)
class Composite:
    """Concatenation of expressions.

    When ``variable`` is set, the value of that metadata entry becomes the
    context for ``%{}`` placeholders among the children.
    """

    expressions: tuple[Evaluatable, ...] = ()
    variable: str | None = None

    def evaluate(
        self,
        metadata: Metadata,
        separator: str = ", ",
        upper_context: MetadataValue | None = None,
    ) -> str:
        context = metadata.get(self.variable) if self.variable else upper_context
        return evaluate_expressions(self.expressions, metadata, separator, context)

    def is_renderable(self) -> bool:
        return True


Evaluatable = Literal | Ternary | Composite

EVALUATABLE_TYPES: tuple[type, ...] = (Literal, Ternary, Composite)


def is_evaluatable(item: object) -> bool:
    return isinstance(item, EVALUATABLE_TYPES)
