"""UTF-8 column mapping and rule-based syntax highlighting."""

from .columns import byte_to_char_index, char_index_to_byte, char_length, sequence_length
from .rules import (
    Color,
    DEFAULT_COMMANDS,
    HighlightRule,
    command_rules,
    default_rules,
    literal_rules,
)
from .engine import ColorMap, colorize

__all__ = [
    "byte_to_char_index",
    "char_index_to_byte",
    "char_length",
    "sequence_length",
    "Color",
    "DEFAULT_COMMANDS",
    "HighlightRule",
    "command_rules",
    "default_rules",
    "literal_rules",
    "ColorMap",
    "colorize",
]
