"""Highlight colors and pattern rules."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Pattern, Union


class Color(str, Enum):
    """Terminal foreground colors a rule can assign to a cell."""

    DEFAULT = "default"
    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    GRAY = "gray"
    BRIGHT_BLACK = "brightblack"
    BRIGHT_RED = "brightred"
    BRIGHT_GREEN = "brightgreen"
    BRIGHT_YELLOW = "brightyellow"
    BRIGHT_BLUE = "brightblue"
    BRIGHT_MAGENTA = "brightmagenta"
    BRIGHT_CYAN = "brightcyan"
    WHITE = "white"


PatternSource = Union[str, bytes, Pattern[str], Pattern[bytes]]


def _compile(pattern: PatternSource) -> Pattern[bytes]:
    if isinstance(pattern, re.Pattern):
        source = pattern.pattern
        flags = pattern.flags & ~re.UNICODE
    else:
        source = pattern
        flags = 0
    if isinstance(source, str):
        source = source.encode("utf-8")
    return re.compile(source, flags)


@dataclass(frozen=True, slots=True)
class HighlightRule:
    """Colors every match of ``pattern``.

    Patterns run against the UTF-8 encoded buffer, so ``\\s``, ``\\w`` and
    ``\\b`` only know about ASCII.
    """

    pattern: PatternSource
    color: Color
    regex: Pattern[bytes] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", Color(self.color))
        object.__setattr__(self, "regex", _compile(self.pattern))


DEFAULT_COMMANDS = (
    "help",
    "quit",
    "set",
    "enable",
    "disable",
    "match",
    "let",
    "m",
    "l",
    "q",
)


def command_rules(
    commands: Iterable[str], color: Color = Color.BRIGHT_MAGENTA
) -> list[HighlightRule]:
    """Rules coloring ``commands`` when they lead the line."""

    return [
        HighlightRule(rf"^\s*{re.escape(command)}\b", color)
        for command in commands
        if command
    ]


def literal_rules() -> list[HighlightRule]:
    return [
        HighlightRule("true", Color.YELLOW),
        HighlightRule("false", Color.YELLOW),
        HighlightRule("[0-9]+", Color.BLUE),
        HighlightRule(r'".*?"', Color.YELLOW),
        HighlightRule(r"'.*?'", Color.YELLOW),
    ]


def default_rules(commands: Iterable[str] = DEFAULT_COMMANDS) -> tuple[HighlightRule, ...]:
    """Command keywords first, then booleans, numbers and quoted strings."""

    return tuple(command_rules(commands) + literal_rules())


__all__ = [
    "Color",
    "DEFAULT_COMMANDS",
    "HighlightRule",
    "PatternSource",
    "command_rules",
    "default_rules",
    "literal_rules",
]
