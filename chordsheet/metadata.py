"""Song metadata store.

Metadata maps a directive name to a single string, or to a list of strings
when the same directive occurs more than once. Values can be read by plain
name or with a 1-based (``name.1``) or negative (``name.-1``) array index.

Examples
--------
>>> metadata = Metadata({"lyricist": "Pete", "author": ["John", "Mary"]})
>>> metadata.get("author")
['John', 'Mary']
>>> metadata.get("author.1")
'John'
>>> metadata.get("author.-1")
'Mary'
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping

from chordsheet.theory.key import Key

MetadataValue = str | list[str]

KEY = "key"
CAPO = "capo"
# Readonly value computed from key and capo
CAPO_KEY = "_key"

READONLY_KEYS: frozenset[str] = frozenset({CAPO_KEY})

ARRAY_KEY_RE = re.compile(r"^(?P<name>.+)\.(?P<index>-?\d+)$")


class MetadataAccessors:
    """Named shortcuts for common metadata entries.

    Subclasses provide :meth:`get_metadata` and :meth:`get_single_metadata`.
    """

    def get_metadata(self, name: str) -> MetadataValue | None:
        raise NotImplementedError

    def get_single_metadata(self, name: str) -> str | None:
        raise NotImplementedError

    @property
    def key(self) -> str | None:
        return self.get_single_metadata(KEY)

    @property
    def title(self) -> str | None:
        return self.get_single_metadata("title")

    @property
    def subtitle(self) -> str | None:
        return self.get_single_metadata("subtitle")

    @property
    def capo(self) -> MetadataValue | None:
        return self.get_metadata(CAPO)

    @property
    def duration(self) -> str | None:
        return self.get_single_metadata("duration")

    @property
    def tempo(self) -> str | None:
        return self.get_single_metadata("tempo")

    @property
    def time(self) -> MetadataValue | None:
        return self.get_metadata("time")

    @property
    def year(self) -> str | None:
        return self.get_single_metadata("year")

    @property
    def album(self) -> MetadataValue | None:
        return self.get_metadata("album")

    @property
    def copyright(self) -> str | None:
        return self.get_single_metadata("copyright")

    @property
    def lyricist(self) -> MetadataValue | None:
        return self.get_metadata("lyricist")

    @property
    def artist(self) -> MetadataValue | None:
        return self.get_metadata("artist")

    @property
    def composer(self) -> MetadataValue | None:
        return self.get_metadata("composer")


class Metadata(MetadataAccessors):
    """Ordered multi-value mapping from directive name to value(s).

    Parameters
    ----------
    metadata : Mapping[str, str | list[str]] | None
        Initial values. Lists are copied.
    """

    def __init__(self, metadata: Mapping[str, MetadataValue] | None = None):
        self._values: dict[str, MetadataValue] = {}
        for name, value in (metadata or {}).items():
            self._values[name] = list(value) if isinstance(value, list) else value

    def __repr__(self) -> str:
        return f"Metadata({self._values!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Metadata):
            return NotImplemented
        return self._values == other._values

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def items(self) -> list[tuple[str, MetadataValue]]:
        return [(name, self._copy_value(value)) for name, value in self._values.items()]

    def to_dict(self) -> dict[str, MetadataValue]:
        return dict(self.items())

    def contains(self, name: str) -> bool:
        return name in self._values

    def add(self, name: str, value: str) -> None:
        """Add a value, keeping earlier values for the same name.

        A second distinct value turns a single string into a list, and every
        later value is appended to it, repeats included. Adding the same
        single value twice, or adding to a readonly name, is a no-op.

        Examples
        --------
        >>> metadata = Metadata()
        >>> metadata.add("composer", "John")
        >>> metadata.add("composer", "Paul")
        >>> metadata.get("composer")
        ['John', 'Paul']
        """
        if name in READONLY_KEYS:
            return

        current = self._values.get(name)
        if current is None:
            self._values[name] = value
        elif isinstance(current, list):
            current.append(value)
        elif current != value:
            self._values[name] = [current, value]

    def set(self, name: str, value: MetadataValue | None) -> None:
        """Replace the value for ``name``; None deletes it."""
        if name in READONLY_KEYS:
            return
        if value is None:
            self._values.pop(name, None)
        else:
            self._values[name] = self._copy_value(value)

    def merge(self, other: Metadata | Mapping[str, MetadataValue]) -> Metadata:
        """Return a new store with the values of ``other`` added to this one.

        Overlapping names accumulate their values. Names keep the order in
        which they were first seen.
        """
        merged = self.clone()
        items = other.items() if isinstance(other, Metadata) else other.items()
        for name, value in items:
            for single in value if isinstance(value, list) else [value]:
                merged.add(name, single)
        return merged

    def get(self, name: str) -> MetadataValue | None:
        """Read a value by name or by array index.

        Parameters
        ----------
        name : str
            Plain name (``"author"``), 1-based index (``"author.2"``) or
            negative index from the end (``"author.-1"``). ``"_key"`` returns
            the key transposed by the capo.

        Returns
        -------
        str | list[str] | None
            The value(s), or None when absent or out of range.
        """
        if name == CAPO_KEY:
            return self.calculate_key_from_capo()
        if name in self._values:
            return self._copy_value(self._values[name])
        return self.get_array_item(name)

    def get_metadata(self, name: str) -> MetadataValue | None:
        return self.get(name)

    def get_single(self, name: str) -> str | None:
        """Return the value, or the first value when there are several."""
        value = self.get(name)
        if isinstance(value, list):
            return value[0] if value else None
        return value

    def get_single_metadata(self, name: str) -> str | None:
        return self.get_single(name)

    @staticmethod
    def parse_array_key(name: str) -> tuple[str, int] | None:
        """Split ``"author.-1"`` into ``("author", -1)``."""
        match = ARRAY_KEY_RE.match(name)
        if not match:
            return None
        return match.group("name"), int(match.group("index"))

    def get_array_item(self, name: str) -> str | None:
        parsed = self.parse_array_key(name)
        if parsed is None:
            return None

        base, index = parsed
        value = self._values.get(base)
        if value is None or index == 0:
            return None

        values = value if isinstance(value, list) else [value]
        position = index - 1 if index > 0 else len(values) + index
        if 0 <= position < len(values):
            return values[position]
        return None

    def calculate_key_from_capo(self) -> str | None:
        """Key sounding with the capo applied, e.g. key C with capo 2 is D."""
        capo = self.get_single(CAPO)
        key = Key.parse(self.get_single(KEY))
        if not capo or key is None:
            return None
        try:
            frets = int(capo)
        except ValueError:
            return None
        return str(key.transpose(frets).normalize())

    def clone(self) -> Metadata:
        return Metadata(self._values)

    @staticmethod
    def _copy_value(value: MetadataValue) -> MetadataValue:
        return list(value) if isinstance(value, list) else value
