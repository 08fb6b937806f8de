"""Bounded input history with best-effort file persistence."""

from __future__ import annotations

import os
from collections import deque
from contextlib import suppress
from pathlib import Path
from typing import Deque, Iterable, Iterator, Optional, Union

from line_editor.runtime.telemetry import record_event

PathLike = Union[str, "os.PathLike[str]"]


def default_history_path(prog_name: str) -> Optional[Path]:
    """``~/.<prog_name>-history``, or ``None`` when there is no home."""

    try:
        home = Path.home()
    except (RuntimeError, KeyError, OSError):
        return None
    if not str(home) or str(home) == "~":
        return None
    return home / f".{prog_name}-history"


class History:
    """Previously entered lines, oldest first.

    Empty lines and repeats of the most recent entry are never stored. Once
    ``max_size`` is reached the oldest entry is evicted.
    """

    def __init__(
        self,
        max_size: int = 800,
        entries: Iterable[str] = (),
        *,
        logger_name: Optional[str] = None,
    ) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self._entries: Deque[str] = deque(maxlen=max_size)
        self._logger_name = logger_name
        for entry in entries:
            self.add(entry)

    @property
    def max_size(self) -> int:
        assert self._entries.maxlen is not None
        return self._entries.maxlen

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> str:
        return self._entries[index]

    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def latest(self) -> Optional[str]:
        return self._entries[-1] if self._entries else None

    def add(self, line: str) -> bool:
        """Append ``line``; returns False when it was rejected."""

        if not line or line == self.latest():
            return False
        self._entries.append(line)
        return True

    def clear(self) -> None:
        self._entries.clear()

    def load(self, path: Optional[PathLike]) -> bool:
        """Replace the entries with the contents of ``path``.

        A missing or unreadable file leaves the history empty.
        """

        self.clear()
        if path is None:
            return False
        try:
            text = Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            return False
        except (OSError, UnicodeDecodeError) as exc:
            record_event(
                "history.load_failed",
                level="warning",
                data={"path": str(path), "error": str(exc)},
                logger_name=self._logger_name,
            )
            return False

        for line in text.splitlines():
            self.add(line)
        record_event(
            "history.loaded",
            level="debug",
            data={"path": str(path), "entries": len(self._entries)},
            logger_name=self._logger_name,
        )
        return True

    def save(self, path: Optional[PathLike]) -> bool:
        """Write the entries to ``path``; failures are logged and ignored."""

        if path is None:
            return False
        target = Path(path)
        tmp_path = target.with_name(f"{target.name}.tmp")
        payload = "".join(f"{entry}\n" for entry in self._entries)
        try:
            tmp_path.write_text(payload, encoding="utf-8")
            tmp_path.replace(target)
        except OSError as exc:
            with suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            record_event(
                "history.save_failed",
                level="warning",
                data={"path": str(target), "error": str(exc)},
                logger_name=self._logger_name,
            )
            return False
        return True


__all__ = ["History", "default_history_path"]
