"""Backend-agnostic interactive line reading with completion and highlighting."""

from .completion import (
    Completer,
    Completion,
    CompletionAction,
    ListCompleter,
    WordListCompleter,
    resolve,
)
from .config import EditorConfig, close_brackets, suppress_after_comma
from .editor import LineEditor
from .highlight import Color, ColorMap, HighlightRule, colorize, default_rules
from .history import History, default_history_path

__all__ = [
    "Color",
    "ColorMap",
    "Completer",
    "Completion",
    "CompletionAction",
    "EditorConfig",
    "HighlightRule",
    "History",
    "LineEditor",
    "ListCompleter",
    "WordListCompleter",
    "close_brackets",
    "colorize",
    "default_history_path",
    "default_rules",
    "resolve",
    "suppress_after_comma",
]

__version__ = "0.1.0"
