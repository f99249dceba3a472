"""Formatter configuration."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any

from chordsheet.theory.key import Key

DEFAULT_SEPARATOR = ", "

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake_case(name: str) -> str:
    """Convert ``expandChorusDirective`` to ``expand_chorus_directive``."""
    return _CAMEL_RE.sub("_", name).lower()


@dataclass(frozen=True)
class MetadataConfiguration:
    """How metadata values are rendered.

    Parameters
    ----------
    separator : str
        Joins the values of a metadata entry that has several.
    """

    separator: str = DEFAULT_SEPARATOR


@dataclass(frozen=True)
class Configuration:
    """Options shared by all formatters.

    Parameters
    ----------
    evaluate : bool
        Render meta expressions as their value instead of their source.
    metadata : MetadataConfiguration
        Metadata rendering options.
    key : Key | None
        Key to render chords in. Chords are transposed from the song key,
        which must be set for this to have any effect.
    expand_chorus_directive : bool
        Render the last chorus after each ``{chorus}`` directive.
    use_unicode_modifiers : bool
        Render sharps and flats as ``♯`` and ``♭``.
    normalize_chords : bool
        Rewrite chord suffixes to their canonical spelling.
    """

    evaluate: bool = False
    metadata: MetadataConfiguration = field(default_factory=MetadataConfiguration)
    key: Key | None = None
    expand_chorus_directive: bool = False
    use_unicode_modifiers: bool = False
    normalize_chords: bool = True

    @classmethod
    def from_dict(cls, configuration: Mapping[str, Any] | None = None) -> Configuration:
        """Build a configuration from a plain mapping.

        Both camelCase and snake_case keys are accepted. Unknown keys are
        ignored.

        Examples
        --------
        >>> config = Configuration.from_dict(
        ...     {"evaluate": True, "metadata": {"separator": " & "}, "key": "D"}
        ... )
        >>> config.metadata.separator, str(config.key)
        (' & ', 'D')
        >>> Configuration.from_dict({"expandChorusDirective": True}).expand_chorus_directive
        True
        """
        if configuration is None:
            return cls()
        if isinstance(configuration, Configuration):
            return configuration

        known = {f.name for f in fields(cls)}
        options: dict[str, Any] = {}
        for name, value in configuration.items():
            name = to_snake_case(name)
            if name in known:
                options[name] = value

        metadata = options.get("metadata")
        if isinstance(metadata, Mapping):
            options["metadata"] = MetadataConfiguration(
                separator=metadata.get("separator", DEFAULT_SEPARATOR)
            )
        if options.get("key") is not None:
            options["key"] = Key.wrap_or_fail(options["key"])

        return cls(**options)

    @property
    def separator(self) -> str:
        return self.metadata.separator
