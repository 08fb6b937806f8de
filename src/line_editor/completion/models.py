"""Dataclasses describing completion candidates and resolved actions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal


@dataclass(frozen=True, slots=True)
class Completion:
    """One candidate offered for the text at the cursor.

    ``typed_text`` is what accepting the candidate types at the cursor,
    ``display_text`` is only shown to the user.
    """

    typed_text: str
    display_text: str

    @classmethod
    def plain(cls, text: str) -> "Completion":
        return cls(typed_text=text, display_text=text)


@dataclass(frozen=True, slots=True)
class CompletionAction:
    """Outcome of resolving a candidate set.

    ``kind == "insert"`` carries ``text`` to insert at the cursor;
    ``kind == "show"`` carries ``items`` to list. An empty ``show`` means
    there is nothing to complete.
    """

    kind: Literal["insert", "show"]
    text: str = ""
    items: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.kind == "insert":
            if self.items:
                raise ValueError("insert action cannot carry completion items")
            if not self.text:
                raise ValueError("insert action requires text")
        elif self.kind == "show":
            if self.text:
                raise ValueError("show action cannot carry insert text")
            object.__setattr__(self, "items", tuple(self.items))
        else:
            raise ValueError(f"Unknown completion action kind '{self.kind}'")

    @classmethod
    def insert(cls, text: str) -> "CompletionAction":
        return cls(kind="insert", text=text)

    @classmethod
    def show(cls, items: Iterable[str] = ()) -> "CompletionAction":
        return cls(kind="show", items=tuple(items))

    @property
    def is_insert(self) -> bool:
        return self.kind == "insert"

    @property
    def is_empty(self) -> bool:
        return self.kind == "show" and not self.items


__all__ = ["Completion", "CompletionAction"]
