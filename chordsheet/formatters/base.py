"""Shared formatter plumbing."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from chordsheet.configuration import Configuration
from chordsheet.expressions import Evaluatable
from chordsheet.metadata import Metadata
from chordsheet.song.song import Song


class Formatter:
    """Base class for formatters.

    Parameters
    ----------
    configuration : Configuration | Mapping | None
        A :class:`Configuration`, or a mapping accepted by
        :meth:`Configuration.from_dict`.
    """

    def __init__(self, configuration: Configuration | Mapping[str, Any] | None = None):
        self.configuration = Configuration.from_dict(configuration)

    def format(self, song: Song) -> str:
        raise NotImplementedError

    def evaluate(self, expression: Evaluatable, metadata: Metadata) -> str:
        return expression.evaluate(metadata, self.configuration.separator)
