"""Editor configuration and environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Callable, Literal, Mapping, Optional, Sequence, Tuple

from line_editor.highlight import HighlightRule, default_rules

ENV_PREFIX = "LINE_EDITOR_"

BackendKind = Literal["legacy", "modern"]
SuppressPredicate = Callable[[str], bool]
InsertionCloser = Callable[[str], Tuple[str, int]]

BACKEND_KINDS: tuple[str, ...] = ("legacy", "modern")
DEFAULT_HISTORY_SIZES: Mapping[str, int] = {"legacy": 800, "modern": 120}


def suppress_after_comma(text_before_cursor: str) -> bool:
    """A trailing comma ends a token, so there is nothing to complete."""

    return text_before_cursor.endswith(",")


def close_brackets(text: str) -> Tuple[str, int]:
    """Close a string argument or call opened by an inserted completion.

    Returns the text to insert and how many characters the cursor then moves
    back, leaving it inside the closed pair.
    """

    if text.endswith('"'):
        return text + '")', 2
    if text.endswith("("):
        return text + ")", 1
    return text, 0


def _env_int(env: Mapping[str, str], name: str) -> Optional[int]:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _env_flag(env: Mapping[str, str], name: str) -> Optional[bool]:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None:
        return None
    return raw.lower() in {"1", "true", "yes", "on"}


@dataclass(slots=True)
class EditorConfig:
    """Construction-time settings shared by every backend."""

    backend: str = "modern"
    max_history_size: Optional[int] = None
    max_hint_rows: int = 8
    max_line_size: int = 9999
    suppress_completion: Optional[SuppressPredicate] = suppress_after_comma
    close_insertion: Optional[InsertionCloser] = close_brackets
    propagate_completer_errors: bool = False
    retry_on_interrupt: bool = True
    rules: Sequence[HighlightRule] = field(default_factory=default_rules)

    def __post_init__(self) -> None:
        self.backend = self.backend.lower()
        if self.backend not in BACKEND_KINDS:
            raise ValueError(
                f"backend must be one of {BACKEND_KINDS}, got '{self.backend}'"
            )
        if self.max_history_size is not None and self.max_history_size <= 0:
            raise ValueError("max_history_size must be positive")
        if self.max_hint_rows < 0:
            raise ValueError("max_hint_rows cannot be negative")
        if self.max_line_size <= 0:
            raise ValueError("max_line_size must be positive")
        self.rules = tuple(self.rules)

    @property
    def history_size(self) -> int:
        if self.max_history_size is not None:
            return self.max_history_size
        return DEFAULT_HISTORY_SIZES[self.backend]

    def should_suppress(self, text_before_cursor: str) -> bool:
        if self.suppress_completion is None:
            return False
        return bool(self.suppress_completion(text_before_cursor))

    def closed_insertion(self, text: str) -> Tuple[str, int]:
        if self.close_insertion is None:
            return text, 0
        return self.close_insertion(text)

    def with_overrides(self, **changes: object) -> "EditorConfig":
        return replace(self, **changes)

    @classmethod
    def from_env(
        cls, env: Optional[Mapping[str, str]] = None, **defaults: object
    ) -> "EditorConfig":
        """Build a config from ``defaults`` overridden by ``LINE_EDITOR_*``."""

        source = os.environ if env is None else env
        values = dict(defaults)

        backend = source.get(f"{ENV_PREFIX}BACKEND")
        if backend:
            values["backend"] = backend
        history_size = _env_int(source, "HISTORY_SIZE")
        if history_size is not None:
            values["max_history_size"] = history_size
        hint_rows = _env_int(source, "HINT_ROWS")
        if hint_rows is not None:
            values["max_hint_rows"] = hint_rows
        if _env_flag(source, "NO_COMMA_SUPPRESSION"):
            values["suppress_completion"] = None
        if _env_flag(source, "NO_AUTO_CLOSE"):
            values["close_insertion"] = None

        return cls(**values)  # type: ignore[arg-type]


__all__ = [
    "BACKEND_KINDS",
    "BackendKind",
    "DEFAULT_HISTORY_SIZES",
    "EditorConfig",
    "InsertionCloser",
    "SuppressPredicate",
    "close_brackets",
    "suppress_after_comma",
]
