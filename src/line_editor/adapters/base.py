"""Backend-neutral adapter contract shared by every terminal backend."""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional, Union

from line_editor.completion import Completer, CompletionAction
from line_editor.config import EditorConfig
from line_editor.highlight import ColorMap, byte_to_char_index, colorize
from line_editor.history import History
from line_editor.runtime.telemetry import record_event, span

Hint = Union[str, List[str]]

_TRAILING_WORD = re.compile(r"[^\s,()\"']*\Z")


class ReadState(str, Enum):
    """Lifecycle of a single ``read_line`` call."""

    IDLE = "idle"
    READING = "reading"
    COMPLETING = "completing"
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"


def strip_line_endings(line: str) -> str:
    return line.rstrip("\r\n")


def hint_suffix(item: str, typed_word: str) -> str:
    """The part of ``item`` still to be typed after ``typed_word``."""

    return item[len(typed_word) :] if item.startswith(typed_word) else item


class BackendAdapter:
    """Binds completion, highlighting and history to one backend.

    Subclasses only translate backend callbacks into ``on_request_*`` calls
    and implement ``_read_raw``; the decisions live here.
    """

    kind: str = "backend"

    def __init__(
        self,
        prompt: str,
        history: History,
        config: EditorConfig,
        *,
        logger_name: Optional[str] = None,
    ) -> None:
        self.prompt = prompt
        self.history = history
        self.config = config
        self.completer: Optional[Completer] = None
        self.state = ReadState.IDLE
        self._logger_name = logger_name

    def set_completer(self, completer: Optional[Completer]) -> None:
        self.completer = completer

    def text_before_cursor(self, buffer: str, cursor: int) -> str:
        return buffer[: byte_to_char_index(buffer, cursor)]

    # ---------------- Callbacks ----------------

    def on_request_completion(self, buffer: str, cursor: int) -> CompletionAction:
        """Resolve the completion for ``buffer`` with a byte-offset ``cursor``."""

        previous = self.state
        self.state = ReadState.COMPLETING
        try:
            with span(
                "adapter::completion",
                logger_name=self._logger_name,
                component="adapter",
                metadata={"backend": self.kind, "cursor": cursor},
            ) as handle:
                if self.config.should_suppress(self.text_before_cursor(buffer, cursor)):
                    handle.add_metadata("suppressed", True)
                    return CompletionAction.show()
                if self.completer is None:
                    return CompletionAction.show()
                try:
                    return self.completer.complete(buffer, cursor)
                except Exception as exc:
                    if self.config.propagate_completer_errors:
                        raise
                    record_event(
                        "completer.failed",
                        level="warning",
                        data={"backend": self.kind, "error": repr(exc)},
                        logger_name=self._logger_name,
                    )
                    return CompletionAction.show()
        finally:
            self.state = previous

    def on_request_highlight(self, buffer: str) -> ColorMap:
        return colorize(buffer, self.config.rules, logger_name=self._logger_name)

    def on_request_hint(self, buffer: str, cursor: int) -> Optional[Hint]:
        """Inline hint text for an insert, or up to ``max_hint_rows`` items.

        Listed items lose the part of the word already typed before the cursor.
        """

        action = self.on_request_completion(buffer, cursor)
        if action.is_insert:
            return action.text
        if action.items and self.config.max_hint_rows:
            word = _TRAILING_WORD.search(self.text_before_cursor(buffer, cursor)).group(0)
            items = action.items[: self.config.max_hint_rows]
            return [hint_suffix(item, word) for item in items]
        return None

    # ---------------- Reading ----------------

    def read_line(self) -> Optional[str]:
        """Block until a line is submitted; ``None`` on end-of-input."""

        self.state = ReadState.READING
        while True:
            try:
                raw = self._read_raw()
            except KeyboardInterrupt:
                if self.config.retry_on_interrupt:
                    continue
                self.state = ReadState.IDLE
                raise
            except EOFError:
                self.state = ReadState.CANCELLED
                return None
            break

        line = strip_line_endings(raw)[: self.config.max_line_size]
        self.state = ReadState.SUBMITTED
        if self.history.add(line):
            self._on_history_added(line)
        return line

    def _read_raw(self) -> str:  # pragma: no cover - abstract override
        """Read one raw line; raise ``EOFError`` at end-of-input."""

        raise NotImplementedError

    # ---------------- History hooks ----------------

    def _on_history_added(self, line: str) -> None:
        del line

    def history_reloaded(self) -> None:
        """Called after the shared history was replaced wholesale."""

    def close(self) -> None:
        """Release backend resources."""


__all__ = ["BackendAdapter", "Hint", "ReadState", "hint_suffix", "strip_line_endings"]
