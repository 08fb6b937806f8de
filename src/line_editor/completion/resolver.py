"""Turns a raw candidate set into a single completion action."""

from __future__ import annotations

from typing import Optional, Sequence

from line_editor.runtime.telemetry import span

from .models import Completion, CompletionAction


def common_prefix(candidates: Sequence[Completion]) -> str:
    """Longest string that starts every candidate's ``typed_text``.

    Comparison is per character, so multi-byte characters are never split.
    """

    if not candidates:
        raise ValueError("common_prefix requires at least one candidate")

    prefix = candidates[0].typed_text
    for candidate in candidates[1:]:
        text = candidate.typed_text
        limit = min(len(prefix), len(text))
        length = 0
        while length < limit and prefix[length] == text[length]:
            length += 1
        prefix = prefix[:length]
        if not prefix:
            break
    return prefix


def resolve(
    candidates: Sequence[Completion], *, logger_name: Optional[str] = None
) -> CompletionAction:
    """Insert the shared prefix when there is one, otherwise list candidates.

    A non-empty prefix is always safe to insert; with a single candidate it
    is the whole completion. When several candidates share a prefix the user
    can press tab again once it is inserted, at which point the prefix is
    empty and the list is shown.
    """

    with span(
        "completion::resolve",
        logger_name=logger_name,
        component="completion",
        metadata={"candidates": len(candidates)},
    ) as handle:
        if not candidates:
            handle.add_metadata("action", "empty")
            return CompletionAction.show()

        prefix = common_prefix(candidates)
        if prefix:
            handle.add_metadata("action", "insert")
            return CompletionAction.insert(prefix)

        handle.add_metadata("action", "show")
        return CompletionAction.show(c.display_text for c in candidates)


__all__ = ["common_prefix", "resolve"]
