"""Line editor facade owning prompt, history and backend lifecycle."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from line_editor.adapters import BackendAdapter, ReadState, create_adapter
from line_editor.completion import (
    CandidateFunction,
    CandidateSource,
    Completer,
    CompletionAction,
    ListCompleter,
)
from line_editor.config import EditorConfig
from line_editor.history import History, PathLike, default_history_path
from line_editor.runtime.telemetry import record_event


class LineEditor:
    """Reads lines interactively through the configured backend.

    History is loaded when the editor is built and saved by ``close`` (or on
    leaving a ``with`` block). An empty ``history_path`` selects
    ``~/.<prog_name>-history``; without a home directory history stays
    in memory.
    """

    def __init__(
        self,
        prog_name: str,
        history_path: Optional[PathLike] = "",
        *,
        config: Optional[EditorConfig] = None,
        completer: Union[Completer, CandidateSource, CandidateFunction, None] = None,
        logger_name: Optional[str] = None,
        **backend_options: Any,
    ) -> None:
        if not prog_name:
            raise ValueError("prog_name cannot be empty")
        self.prog_name = prog_name
        self.config = config or EditorConfig()
        self._prompt = f"{prog_name}> "
        self._logger_name = logger_name
        self.history_path: Optional[Path] = (
            Path(history_path) if history_path else default_history_path(prog_name)
        )
        self.history = History(self.config.history_size, logger_name=logger_name)
        self._adapter = create_adapter(
            self.config.backend,
            self._prompt,
            self.history,
            self.config,
            logger_name=logger_name,
            **backend_options,
        )
        self._closed = False

        if completer is not None:
            if hasattr(completer, "complete"):
                self.set_completer(completer)  # type: ignore[arg-type]
            else:
                self.set_list_completer(completer)  # type: ignore[arg-type]

        self.load_history()
        record_event(
            "editor.created",
            level="debug",
            data={
                "prog": prog_name,
                "backend": self._adapter.kind,
                "history_path": self.history_path,
            },
            logger_name=logger_name,
        )

    @property
    def prompt(self) -> str:
        return self._prompt

    @property
    def adapter(self) -> BackendAdapter:
        return self._adapter

    @property
    def state(self) -> ReadState:
        return self._adapter.state

    # ---------------- Completion ----------------

    def set_completer(self, completer: Optional[Completer]) -> None:
        """Install a completer that returns actions directly."""

        self._adapter.set_completer(completer)

    def set_list_completer(
        self, source: Union[CandidateSource, CandidateFunction]
    ) -> None:
        """Install a candidate source resolved through the common-prefix rule."""

        self._adapter.set_completer(ListCompleter(source, logger_name=self._logger_name))

    def get_completion_action(self, buffer: str, cursor: int) -> CompletionAction:
        return self._adapter.on_request_completion(buffer, cursor)

    # ---------------- Reading ----------------

    def read_line(self) -> Optional[str]:
        """Prompt for a line; ``None`` once input has ended."""

        if self._closed:
            raise RuntimeError("LineEditor is closed")
        return self._adapter.read_line()

    # ---------------- History ----------------

    def load_history(self) -> bool:
        loaded = self.history.load(self.history_path)
        self._adapter.history_reloaded()
        return loaded

    def save_history(self) -> bool:
        return self.history.save(self.history_path)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.save_history()
        self._adapter.close()

    def __enter__(self) -> "LineEditor":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["LineEditor"]
