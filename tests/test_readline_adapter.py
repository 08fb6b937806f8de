from __future__ import annotations

import io
from typing import Callable, Iterable, List, Optional

import pytest

from line_editor.adapters import (
    ReadlineAdapter,
    ReadState,
    hint_suffix,
    render_completion_list,
)
from line_editor.adapters.readline_backend import GNU_BINDINGS, LIBEDIT_BINDINGS
from line_editor.completion import Completion, ListCompleter
from line_editor.config import EditorConfig
from line_editor.history import History


class FakeReadline:
    """In-memory stand-in for the stdlib readline module."""

    def __init__(self, *, doc: str = "GNU readline") -> None:
        self.__doc__ = doc
        self.line_buffer = ""
        self.endidx = 0
        self.completer: Optional[Callable[[str, int], Optional[str]]] = None
        self.bindings: List[str] = []
        self.history: List[str] = []
        self.auto_history = True
        self.delims = ""

    def set_auto_history(self, enabled: bool) -> None:
        self.auto_history = enabled

    def set_completer(self, completer: Optional[Callable[[str, int], Optional[str]]]) -> None:
        self.completer = completer

    def set_completer_delims(self, delims: str) -> None:
        self.delims = delims

    def parse_and_bind(self, binding: str) -> None:
        self.bindings.append(binding)

    def get_line_buffer(self) -> str:
        return self.line_buffer

    def get_endidx(self) -> int:
        return self.endidx

    def add_history(self, line: str) -> None:
        self.history.append(line)

    def clear_history(self) -> None:
        self.history.clear()

    def get_current_history_length(self) -> int:
        return len(self.history)

    def remove_history_item(self, index: int) -> None:
        del self.history[index]

    def press_tab(self, buffer: str, cursor: int, text: str) -> List[str]:
        """Simulate readline collecting matches for the word ``text``."""

        self.line_buffer = buffer
        self.endidx = cursor
        assert self.completer is not None
        matches = []
        state = 0
        while True:
            match = self.completer(text, state)
            if match is None:
                return matches
            matches.append(match)
            state += 1


def scripted_input(lines: Iterable[object]) -> Callable[[str], str]:
    pending = list(lines)
    prompts: List[str] = []

    def read(prompt: str) -> str:
        prompts.append(prompt)
        item = pending.pop(0)
        if isinstance(item, BaseException):
            raise item
        return str(item)

    read.prompts = prompts  # type: ignore[attr-defined]
    return read


def make_adapter(
    *,
    words: Iterable[str] = ("help", "hello", "quit"),
    lines: Iterable[object] = (),
    config: Optional[EditorConfig] = None,
    history: Optional[History] = None,
    readline: Optional[FakeReadline] = None,
) -> tuple[ReadlineAdapter, FakeReadline, io.StringIO]:
    fake = readline or FakeReadline()
    out = io.StringIO()
    vocabulary = list(words)

    def source(buffer: str, cursor: int) -> List[Completion]:
        prefix = buffer.encode("utf-8")[:cursor].decode("utf-8").split(" ")[-1]
        return [
            Completion(typed_text=word[len(prefix) :], display_text=word)
            for word in vocabulary
            if word.startswith(prefix)
        ]

    adapter = ReadlineAdapter(
        "tool> ",
        history if history is not None else History(max_size=800),
        config or EditorConfig(backend="legacy"),
        readline_module=fake,
        input_fn=scripted_input(lines),
        output=out,
    )
    adapter.set_completer(ListCompleter(source))
    return adapter, fake, out


def test_adapter_configures_gnu_readline() -> None:
    _adapter, fake, _out = make_adapter()

    assert fake.auto_history is False
    assert fake.completer is not None
    assert fake.bindings == list(GNU_BINDINGS)


def test_adapter_configures_libedit() -> None:
    fake = FakeReadline(doc="Importing this module enables command line editing using libedit readline.")
    make_adapter(readline=fake)

    assert fake.bindings == list(LIBEDIT_BINDINGS)


def test_tab_inserts_common_prefix() -> None:
    _adapter, fake, out = make_adapter()

    matches = fake.press_tab("say he", 6, "he")

    assert matches == ["hel"]
    assert out.getvalue() == ""


def test_tab_lists_candidates_and_restores_line() -> None:
    _adapter, fake, out = make_adapter(words=("help", "quit"))

    matches = fake.press_tab("x ", 2, "")

    assert matches == [""]
    assert out.getvalue() == "\nhelp\nquit\ntool> x "


def test_list_restores_cursor_inside_line() -> None:
    output = render_completion_list("tool> ", "ab cé", 3, ["one", "two"])

    assert output == "\x1b[2C\none\ntwo\ntool> ab cé\x1b[2D"


def test_cursor_is_converted_from_characters() -> None:
    adapter, fake, _out = make_adapter(words=("élan", "éloge"))
    seen: List[tuple[str, int]] = []

    def source(buffer: str, cursor: int) -> List[Completion]:
        seen.append((buffer, cursor))
        return []

    adapter.set_completer(ListCompleter(source))
    fake.press_tab("é é", 3, "é")

    assert seen == [("é é", 5)]


def test_no_candidates_rings_bell() -> None:
    _adapter, fake, out = make_adapter()

    matches = fake.press_tab("zzz", 3, "zzz")

    assert matches == ["zzz"]
    assert out.getvalue() == "\a"


def test_trailing_comma_suppresses_completion() -> None:
    adapter, fake, out = make_adapter()

    assert adapter.on_request_completion("he,", 3).is_empty
    fake.press_tab("he,", 3, "he,")
    assert out.getvalue() == "\a"


def test_suppression_can_be_disabled() -> None:
    config = EditorConfig(backend="legacy", suppress_completion=None)
    adapter, _fake, _out = make_adapter(config=config, words=(",x",))

    assert adapter.on_request_completion("a ,", 3).text == "x"


def test_failing_completer_degrades_to_no_completions() -> None:
    adapter, _fake, _out = make_adapter()

    def broken(buffer: str, cursor: int) -> List[Completion]:
        raise RuntimeError("symbol table unavailable")

    adapter.set_completer(ListCompleter(broken))

    assert adapter.on_request_completion("he", 2).is_empty
    assert adapter.state is ReadState.IDLE


def test_failing_completer_can_propagate() -> None:
    config = EditorConfig(backend="legacy", propagate_completer_errors=True)
    adapter, _fake, _out = make_adapter(config=config)

    def broken(buffer: str, cursor: int) -> List[Completion]:
        raise RuntimeError("boom")

    adapter.set_completer(ListCompleter(broken))

    with pytest.raises(RuntimeError):
        adapter.on_request_completion("he", 2)


def test_without_completer_nothing_is_offered() -> None:
    adapter, _fake, _out = make_adapter()
    adapter.set_completer(None)

    assert adapter.on_request_completion("he", 2).is_empty


def test_hint_reflects_action() -> None:
    adapter, _fake, _out = make_adapter(words=("help", "quit", "query"))
    adapter.config.max_hint_rows = 1

    assert adapter.on_request_hint("he", 2) == "lp"
    assert adapter.on_request_hint("", 0) == ["help"]
    assert adapter.on_request_hint("zz", 2) is None
    assert adapter.on_request_hint("q,", 2) is None


def test_read_line_strips_newlines_and_records_history() -> None:
    adapter, fake, _out = make_adapter(lines=["match foo\r\n", "match foo", ""])

    assert adapter.read_line() == "match foo"
    assert adapter.state is ReadState.SUBMITTED
    assert adapter.read_line() == "match foo"
    assert adapter.read_line() == ""

    assert adapter.history.entries() == ("match foo",)
    assert fake.history == ["match foo"]


def test_end_of_input_returns_none() -> None:
    adapter, _fake, _out = make_adapter(lines=[EOFError()])

    assert adapter.read_line() is None
    assert adapter.state is ReadState.CANCELLED


def test_interrupt_restarts_the_read() -> None:
    adapter, _fake, _out = make_adapter(lines=[KeyboardInterrupt(), "quit"])

    assert adapter.read_line() == "quit"


def test_interrupt_propagates_when_configured() -> None:
    config = EditorConfig(backend="legacy", retry_on_interrupt=False)
    adapter, _fake, _out = make_adapter(config=config, lines=[KeyboardInterrupt()])

    with pytest.raises(KeyboardInterrupt):
        adapter.read_line()


def test_readline_history_is_trimmed_to_bound() -> None:
    history = History(max_size=2)
    adapter, fake, _out = make_adapter(history=history, lines=["a", "b", "c"])
    assert adapter.history is history
    for _ in range(3):
        adapter.read_line()

    assert fake.history == ["b", "c"]
    assert adapter.history.entries() == ("b", "c")


def test_history_reload_mirrors_entries() -> None:
    history = History(max_size=10, entries=["one", "two"])
    _adapter, fake, _out = make_adapter(history=history)

    assert fake.history == ["one", "two"]


def test_close_releases_completer_and_ends_line() -> None:
    adapter, fake, out = make_adapter()

    adapter.close()

    assert fake.completer is None
    assert out.getvalue() == "\n"


def test_listed_hints_drop_the_typed_word() -> None:
    adapter, _fake, _out = make_adapter(words=("quit", "qa", "help"))

    assert adapter.on_request_hint("set q", 5) == ["uit", "a"]
    assert hint_suffix("quit", "x") == "quit"
