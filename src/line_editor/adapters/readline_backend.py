"""Legacy backend on the stdlib ``readline`` module (GNU readline or libedit).

Readline only lets a completer hand back replacement words, so listing
candidates is synthesized here: the list is written below the line, then the
prompt and buffer are reprinted and the cursor is walked back to where it
was. Nothing outside this module relies on that trick.
"""

from __future__ import annotations

import sys
from types import ModuleType
from typing import Any, Callable, Optional, Sequence, TextIO

from line_editor.config import EditorConfig
from line_editor.highlight import char_index_to_byte, char_length
from line_editor.history import History

from .base import BackendAdapter

GNU_BINDINGS = (
    "set editing-mode emacs",
    "tab: complete",
    '"\\C-r": reverse-search-history',
    '"\\C-w": backward-kill-word',
    '"\\e[3~": delete-char',
    '"\\e[1;5C": forward-word',
    '"\\e[1;5D": backward-word',
)

LIBEDIT_BINDINGS = (
    "bind -e",
    "bind ^I rl_complete",
    "bind ^R em-inc-search-prev",
    "bind ^W ed-delete-prev-word",
    "bind \\e[3~ ed-delete-next-char",
    "bind \\e[1;5C em-next-word",
    "bind \\e[1;5D ed-prev-word",
)

BELL = "\a"


def _load_readline() -> ModuleType:
    import readline

    return readline


def is_libedit(module: Any) -> bool:
    backend = getattr(module, "backend", None)
    if backend is not None:
        return backend == "editline"
    return "libedit" in (getattr(module, "__doc__", None) or "")


def render_completion_list(
    prompt: str, buffer: str, cursor: int, items: Sequence[str]
) -> str:
    """Terminal output listing ``items`` without disturbing the edit line.

    ``cursor`` is a byte offset. The cursor first moves to the end of the
    line, the items are printed one per line, and after reprinting the
    prompt and buffer the cursor moves back over the text that followed it.
    """

    trailing = char_length(buffer.encode("utf-8")[cursor:])
    parts = []
    if trailing:
        parts.append(f"\x1b[{trailing}C")
    parts.append("\n")
    parts.extend(f"{item}\n" for item in items)
    parts.append(prompt)
    parts.append(buffer)
    if trailing:
        parts.append(f"\x1b[{trailing}D")
    return "".join(parts)


class ReadlineAdapter(BackendAdapter):
    """Drives completion from readline's tab key hook."""

    kind = "legacy"

    def __init__(
        self,
        prompt: str,
        history: History,
        config: EditorConfig,
        *,
        readline_module: Optional[Any] = None,
        input_fn: Optional[Callable[[str], str]] = None,
        output: Optional[TextIO] = None,
        logger_name: Optional[str] = None,
    ) -> None:
        super().__init__(prompt, history, config, logger_name=logger_name)
        self._readline = readline_module if readline_module is not None else _load_readline()
        self._input = input_fn or input
        self._out = output or sys.stdout
        self._matches: list[str] = []
        self._configure()
        self.history_reloaded()

    def _configure(self) -> None:
        rl = self._readline
        set_auto_history = getattr(rl, "set_auto_history", None)
        if set_auto_history is not None:
            set_auto_history(False)
        rl.set_completer_delims(" \t\n")
        rl.set_completer(self.complete)
        bindings = LIBEDIT_BINDINGS if is_libedit(rl) else GNU_BINDINGS
        for binding in bindings:
            rl.parse_and_bind(binding)

    # ---------------- Completion hook ----------------

    def complete(self, text: str, state: int) -> Optional[str]:
        """Readline completer entry point, called with increasing ``state``."""

        if state == 0:
            self._matches = self._completion_matches(text)
        if state < len(self._matches):
            return self._matches[state]
        return None

    def _completion_matches(self, text: str) -> list[str]:
        rl = self._readline
        buffer = rl.get_line_buffer()
        # readline reports the completion end (the cursor) as a character index.
        cursor = char_index_to_byte(buffer, rl.get_endidx())
        action = self.on_request_completion(buffer, cursor)

        if action.is_insert:
            return [text + action.text]
        if action.items:
            self._write(render_completion_list(self.prompt, buffer, cursor, action.items))
        else:
            self._write(BELL)
        # Replacing the word with itself leaves the buffer untouched.
        return [text]

    def _write(self, data: str) -> None:
        self._out.write(data)
        self._out.flush()

    # ---------------- Reading ----------------

    def _read_raw(self) -> str:
        return self._input(self.prompt)

    # ---------------- History ----------------

    def _on_history_added(self, line: str) -> None:
        rl = self._readline
        rl.add_history(line)
        while rl.get_current_history_length() > self.history.max_size:
            rl.remove_history_item(0)

    def history_reloaded(self) -> None:
        rl = self._readline
        rl.clear_history()
        for entry in self.history:
            rl.add_history(entry)

    def close(self) -> None:
        self._readline.set_completer(None)
        self._write("\n")


__all__ = [
    "GNU_BINDINGS",
    "LIBEDIT_BINDINGS",
    "ReadlineAdapter",
    "is_libedit",
    "render_completion_list",
]
