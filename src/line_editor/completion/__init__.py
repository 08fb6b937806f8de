"""Completion candidates, resolution and completer capabilities."""

from .models import Completion, CompletionAction
from .resolver import common_prefix, resolve
from .completer import (
    CandidateFunction,
    CandidateSource,
    Completer,
    ListCompleter,
    WordListCompleter,
)

__all__ = [
    "Completion",
    "CompletionAction",
    "common_prefix",
    "resolve",
    "CandidateFunction",
    "CandidateSource",
    "Completer",
    "ListCompleter",
    "WordListCompleter",
]
