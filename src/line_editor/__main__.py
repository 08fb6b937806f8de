"""Interactive demo: ``python -m line_editor``."""

from __future__ import annotations

import argparse
import os
from typing import Optional, Sequence

from line_editor.completion import WordListCompleter
from line_editor.config import BACKEND_KINDS, EditorConfig
from line_editor.editor import LineEditor
from line_editor.highlight import DEFAULT_COMMANDS, default_rules

DEMO_COMMANDS = ("help", "quit", "set", "enable", "disable", "match", "let")


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Try the line editor: tab completion, history and highlighting."
    )
    parser.add_argument(
        "--backend",
        choices=BACKEND_KINDS,
        default=os.environ.get("LINE_EDITOR_BACKEND", "modern"),
        help="Terminal backend (default: modern)",
    )
    parser.add_argument(
        "--history-file",
        default="",
        help="History file (default: ~/.<prog>-history)",
    )
    parser.add_argument(
        "--prog",
        default="line-editor",
        help="Program name used for the prompt and history file",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    config = EditorConfig.from_env(rules=default_rules(DEFAULT_COMMANDS)).with_overrides(
        backend=args.backend
    )
    with LineEditor(
        args.prog,
        args.history_file,
        config=config,
        completer=WordListCompleter(DEMO_COMMANDS),
    ) as editor:
        while True:
            line = editor.read_line()
            if line is None or line.strip() in {"quit", "q"}:
                break
            if line:
                print(line)
    return 0


if __name__ == "__main__":  # pragma: no cover - manual demo
    raise SystemExit(main())
