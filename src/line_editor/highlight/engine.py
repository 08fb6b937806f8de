"""Rule-driven per-cell coloring of the edit buffer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence

from line_editor.runtime.telemetry import span

from .columns import Text, char_length, sequence_length
from .rules import Color, HighlightRule


@dataclass(slots=True)
class ColorMap:
    """One color per character cell; unmapped cells read as default."""

    colors: List[Color] = field(default_factory=list)

    @classmethod
    def blank(cls, size: int) -> "ColorMap":
        return cls(colors=[Color.DEFAULT] * size)

    def __len__(self) -> int:
        return len(self.colors)

    def __iter__(self) -> Iterator[Color]:
        return iter(self.colors)

    def __getitem__(self, index: int) -> Color:
        if 0 <= index < len(self.colors):
            return self.colors[index]
        return Color.DEFAULT

    def paint(self, start: int, length: int, color: Color) -> None:
        end = min(start + length, len(self.colors))
        for index in range(max(start, 0), end):
            self.colors[index] = color

    def spans(self) -> Iterator[tuple[int, int, Color]]:
        """Yield ``(start, end, color)`` runs covering every cell."""

        start = 0
        for index in range(1, len(self.colors) + 1):
            if index == len(self.colors) or self.colors[index] != self.colors[start]:
                yield start, index, self.colors[start]
                start = index


def _apply_rule(raw: bytes, rule: HighlightRule, colors: ColorMap) -> None:
    position = 0
    rest = raw
    while rest:
        match = rule.regex.search(rest)
        if match is None:
            return
        begin, end = match.span()
        position += char_length(rest[:begin])
        if begin == end:
            # An empty match colors nothing; step over one character.
            if begin >= len(rest):
                return
            end = begin + sequence_length(rest[begin])
            position += char_length(rest[begin:end])
        else:
            length = char_length(rest[begin:end])
            colors.paint(position, length, rule.color)
            position += length
        rest = rest[end:]


def colorize(
    buffer: Text,
    rules: Sequence[HighlightRule],
    *,
    logger_name: Optional[str] = None,
) -> ColorMap:
    """Color ``buffer`` by applying ``rules`` in order.

    Each rule scans the not-yet-consumed suffix repeatedly, so its own
    matches never overlap and ``^`` anchors at the start of each suffix.
    Later rules overwrite cells painted by earlier ones.
    """

    raw = buffer.encode("utf-8") if isinstance(buffer, str) else bytes(buffer)
    colors = ColorMap.blank(char_length(raw))
    with span(
        "highlight::colorize",
        logger_name=logger_name,
        component="highlight",
        metadata={"cells": len(colors), "rules": len(rules)},
    ):
        for rule in rules:
            _apply_rule(raw, rule, colors)
    return colors


__all__ = ["ColorMap", "colorize"]
