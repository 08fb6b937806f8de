"""Completer capabilities supplied by the embedding tool."""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional, Protocol, Sequence, Union

from line_editor.highlight.columns import byte_to_char_index

from .models import Completion, CompletionAction
from .resolver import resolve

_WORD_BREAK = re.compile(r"[\s,]")


class Completer(Protocol):
    """Anything that maps ``(buffer, cursor)`` straight to an action.

    ``cursor`` is a byte offset into the UTF-8 encoded buffer.
    """

    def complete(self, buffer: str, cursor: int) -> CompletionAction: ...


class CandidateSource(Protocol):
    """Tool-specific candidate provider."""

    def get_completions(self, buffer: str, cursor: int) -> Sequence[Completion]: ...


CandidateFunction = Callable[[str, int], Sequence[Completion]]


class ListCompleter:
    """Adapts a candidate source into a ``Completer`` through ``resolve``."""

    def __init__(
        self,
        source: Union[CandidateSource, CandidateFunction],
        *,
        logger_name: Optional[str] = None,
    ) -> None:
        getter = getattr(source, "get_completions", None)
        if getter is None:
            if not callable(source):
                raise TypeError("source must be callable or define get_completions")
            getter = source
        self._get_completions: CandidateFunction = getter
        self._logger_name = logger_name

    def get_completions(self, buffer: str, cursor: int) -> list[Completion]:
        return list(self._get_completions(buffer, cursor))

    def complete(self, buffer: str, cursor: int) -> CompletionAction:
        return resolve(
            self.get_completions(buffer, cursor), logger_name=self._logger_name
        )


class WordListCompleter:
    """Completes the word before the cursor from a fixed vocabulary.

    Words are delimited by whitespace and commas. Each candidate types the
    remainder of a vocabulary word; matches keep vocabulary order.
    """

    def __init__(self, words: Iterable[str]) -> None:
        self.words = tuple(dict.fromkeys(word for word in words if word))

    def current_word(self, buffer: str, cursor: int) -> str:
        before = buffer[: byte_to_char_index(buffer, cursor)]
        parts = _WORD_BREAK.split(before)
        return parts[-1] if parts else ""

    def get_completions(self, buffer: str, cursor: int) -> list[Completion]:
        prefix = self.current_word(buffer, cursor)
        return [
            Completion(typed_text=word[len(prefix) :], display_text=word)
            for word in self.words
            if word.startswith(prefix)
        ]


__all__ = [
    "CandidateFunction",
    "CandidateSource",
    "Completer",
    "ListCompleter",
    "WordListCompleter",
]
