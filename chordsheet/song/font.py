"""Fonts set with the legacy ChordPro font directives.

``{textfont}``, ``{textsize}``, ``{textcolour}``, ``{chordfont}``,
``{chordsize}`` and ``{chordcolour}`` each push a value; the same directive
without a value restores the previous one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from chordsheet.song.items import Tag

SizeUnit = Literal["px", "%"]

FONT_SIZE_RE = re.compile(r"^(?P<size>\d+(?:\.\d+)?)\s*(?P<unit>%|px)?$")

FONT_DIRECTIVE_RE = re.compile(r"^(?P<target>text|chord)(?P<property>font|size|colour)$")


@dataclass(frozen=True)
class FontSize:
    """A font size in pixels or as a percentage.

    Examples
    --------
    >>> str(FontSize(30, "px"))
    '30px'
    >>> str(FontSize.parse("50%", FontSize(30, "px")))
    '15px'
    """

    size: float
    unit: SizeUnit = "px"

    @classmethod
    def parse(cls, font_size: str, parent: FontSize | None = None) -> FontSize:
        """Parse ``"30"``, ``"30px"`` or ``"120%"``.

        Percentages scale ``parent`` when there is one. Unreadable sizes
        fall back to ``parent``, or to 100%.
        """
        match = FONT_SIZE_RE.match(font_size.strip())
        if not match:
            return parent if parent is not None else cls(100, "%")

        size = float(match.group("size"))
        if match.group("unit") == "%":
            if parent is not None:
                return parent.multiply(size)
            return cls(size, "%")
        return cls(size, "px")

    def multiply(self, percentage: float) -> FontSize:
        return FontSize(self.size * percentage / 100, self.unit)

    def __str__(self) -> str:
        size = int(self.size) if float(self.size).is_integer() else self.size
        return f"{size}{self.unit}"


@dataclass(frozen=True)
class Font:
    """Font family, size and colour; any of them may be unset."""

    font: str | None = None
    size: FontSize | None = None
    colour: str | None = None

    def to_css_string(self) -> str:
        """Render the font as CSS declarations.

        Examples
        --------
        >>> Font(font='"Times New Roman"').to_css_string()
        "font-family: 'Times New Roman'"
        >>> Font(font="Verdana", colour="red").to_css_string()
        'color: red; font-family: Verdana'
        >>> Font(font="Verdana", size=FontSize(30, "px")).to_css_string()
        'font: 30px Verdana'
        """
        properties: list[str] = []
        if self.colour:
            properties.append(f"color: {self.colour}")

        font = self.font.replace('"', "'") if self.font else None
        if font and self.size:
            properties.append(f"font: {self.size} {font}")
        elif font:
            properties.append(f"font-family: {font}")
        elif self.size:
            properties.append(f"font-size: {self.size}")

        return "; ".join(properties)


@dataclass
class FontStack:
    """Running text and chord fonts while a song is being built."""

    _values: dict[str, list[str]] = field(default_factory=dict)
    _sizes: dict[str, list[FontSize]] = field(default_factory=dict)

    def apply_tag(self, tag: Tag) -> None:
        match = FONT_DIRECTIVE_RE.match(tag.name)
        if not match:
            return

        target, prop = match.group("target"), match.group("property")
        if prop == "size":
            stack = self._sizes.setdefault(target, [])
            if tag.has_value():
                parent = stack[-1] if stack else None
                stack.append(FontSize.parse(tag.value, parent))
            elif stack:
                stack.pop()
            return

        values = self._values.setdefault(tag.name, [])
        if tag.has_value():
            values.append(tag.value)
        elif values:
            values.pop()

    def _font(self, target: str) -> Font:
        fonts = self._values.get(f"{target}font") or [None]
        colours = self._values.get(f"{target}colour") or [None]
        sizes = self._sizes.get(target) or [None]
        return Font(font=fonts[-1], size=sizes[-1], colour=colours[-1])

    @property
    def text_font(self) -> Font:
        return self._font("text")

    @property
    def chord_font(self) -> Font:
        return self._font("chord")
