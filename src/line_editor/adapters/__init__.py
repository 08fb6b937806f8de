"""Terminal backend adapters and explicit backend selection."""

from __future__ import annotations

from typing import Any, Dict, Optional, Type

from line_editor.config import EditorConfig
from line_editor.history import History

from .base import BackendAdapter, Hint, ReadState, hint_suffix, strip_line_endings
from .prompt_toolkit_backend import PromptToolkitAdapter
from .readline_backend import ReadlineAdapter, render_completion_list


class UnknownBackendError(ValueError):
    """Raised when no adapter is registered for a backend kind."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            f"Unknown backend '{kind}'; expected one of {sorted(ADAPTERS)}"
        )
        self.kind = kind


ADAPTERS: Dict[str, Type[BackendAdapter]] = {
    ReadlineAdapter.kind: ReadlineAdapter,
    PromptToolkitAdapter.kind: PromptToolkitAdapter,
}


def create_adapter(
    kind: str,
    prompt: str,
    history: History,
    config: EditorConfig,
    *,
    logger_name: Optional[str] = None,
    **backend_options: Any,
) -> BackendAdapter:
    """Instantiate the adapter registered for ``kind``.

    ``backend_options`` go to the adapter constructor unchanged (for example
    ``readline_module`` for the legacy backend or ``input``/``output`` for
    the modern one).
    """

    try:
        adapter_cls = ADAPTERS[kind]
    except KeyError as exc:
        raise UnknownBackendError(kind) from exc
    return adapter_cls(
        prompt, history, config, logger_name=logger_name, **backend_options
    )


__all__ = [
    "ADAPTERS",
    "BackendAdapter",
    "Hint",
    "PromptToolkitAdapter",
    "ReadState",
    "ReadlineAdapter",
    "UnknownBackendError",
    "create_adapter",
    "hint_suffix",
    "render_completion_list",
    "strip_line_endings",
]
