from __future__ import annotations

import asyncio
from typing import Iterator, List, Optional

import pytest
from prompt_toolkit.auto_suggest import Suggestion
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document
from prompt_toolkit.input import DummyInput, create_pipe_input
from prompt_toolkit.input.base import PipeInput
from prompt_toolkit.output import DummyOutput

from line_editor.adapters import PromptToolkitAdapter, ReadState
from line_editor.adapters.prompt_toolkit_backend import (
    HintSuggest,
    HookCompleter,
    HookLexer,
    SharedHistory,
    color_style,
    cursor_offset,
)
from line_editor.completion import Completion, ListCompleter, WordListCompleter
from line_editor.config import EditorConfig
from line_editor.highlight import Color, HighlightRule
from line_editor.history import History


class BellOutput(DummyOutput):
    def __init__(self) -> None:
        super().__init__()
        self.bells = 0

    def bell(self) -> None:
        self.bells += 1


@pytest.fixture
def pipe() -> Iterator[PipeInput]:
    with create_pipe_input() as pipe_input:
        yield pipe_input


def make_adapter(
    pipe_input: Optional[PipeInput] = None,
    *,
    words: tuple[str, ...] = ("help", "hello", "quit"),
    history: Optional[History] = None,
    config: Optional[EditorConfig] = None,
    output: Optional[DummyOutput] = None,
) -> PromptToolkitAdapter:
    adapter = PromptToolkitAdapter(
        "tool> ",
        history if history is not None else History(max_size=120),
        config or EditorConfig(backend="modern"),
        input=pipe_input or DummyInput(),
        output=output or DummyOutput(),
    )
    adapter.set_completer(ListCompleter(WordListCompleter(words)))
    return adapter


def test_cursor_offset_is_in_bytes() -> None:
    document = Document("héllo", cursor_position=2)

    assert cursor_offset(document) == 3


def test_color_style_maps_to_ansi_names() -> None:
    assert color_style(Color.DEFAULT) == ""
    assert color_style(Color.BRIGHT_MAGENTA) == "fg:ansibrightmagenta"


def test_lexer_renders_color_runs() -> None:
    config = EditorConfig(rules=[HighlightRule("[0-9]+", Color.BLUE)])
    adapter = make_adapter(config=config)
    lexer = HookLexer(adapter)

    get_line = lexer.lex_document(Document("é = 42"))

    assert get_line(0) == [("", "é = "), ("fg:ansiblue", "42")]
    assert get_line(3) == []


def test_completer_yields_insert_text() -> None:
    adapter = make_adapter()
    completer = HookCompleter(adapter)

    completions = list(
        completer.get_completions(Document("he", cursor_position=2), CompleteEvent())
    )

    assert [c.text for c in completions] == ["l"]


def test_completer_lists_display_only_items() -> None:
    adapter = make_adapter(words=("help", "quit"))
    completer = HookCompleter(adapter)

    completions = list(completer.get_completions(Document(""), CompleteEvent()))

    assert [c.text for c in completions] == ["", ""]
    assert [c.display_text for c in completions] == ["help", "quit"]


def test_completer_honors_comma_suppression() -> None:
    adapter = make_adapter()
    completer = HookCompleter(adapter)

    completions = list(completer.get_completions(Document("he,"), CompleteEvent()))

    assert completions == []


def test_hint_suggest_returns_inline_text() -> None:
    adapter = make_adapter()
    suggest = HintSuggest(adapter)
    document = Document("qu")

    suggestion = suggest.get_suggestion(Buffer(document=document), document)

    assert isinstance(suggestion, Suggestion)
    assert suggestion.text == "it"


def test_hint_suggest_ignores_lists() -> None:
    adapter = make_adapter()
    suggest = HintSuggest(adapter)
    document = Document("")

    assert suggest.get_suggestion(Buffer(document=document), document) is None


def test_shared_history_serves_entries_oldest_first() -> None:
    history = History(max_size=5, entries=["one", "two"])
    shared = SharedHistory(history)

    shared.append_string("ignored")

    assert shared.get_strings() == ["one", "two"]
    assert list(shared.load_history_strings()) == ["two", "one"]


def test_read_line_returns_submitted_text(pipe: PipeInput) -> None:
    adapter = make_adapter(pipe)
    pipe.send_text("set x\r")

    assert adapter.read_line() == "set x"
    assert adapter.state is ReadState.SUBMITTED
    assert adapter.history.entries() == ("set x",)


def test_tab_inserts_completion(pipe: PipeInput) -> None:
    adapter = make_adapter(pipe)
    pipe.send_text("qu\t\r")

    assert adapter.read_line() == "quit"


def test_tab_with_candidate_list_keeps_buffer(pipe: PipeInput) -> None:
    adapter = make_adapter(pipe, words=("help", "quit"))
    pipe.send_text("x \t\r")

    assert adapter.read_line() == "x "


def test_end_of_input_returns_none(pipe: PipeInput) -> None:
    adapter = make_adapter(pipe)
    pipe.send_text("\x04")

    assert adapter.read_line() is None
    assert adapter.state is ReadState.CANCELLED


def test_history_entries_are_recalled(pipe: PipeInput) -> None:
    history = History(max_size=10, entries=["let a = 1"])
    adapter = make_adapter(pipe, history=history)
    pipe.send_text("\x1b[A\r")

    assert adapter.read_line() == "let a = 1"


def test_long_lines_are_truncated(pipe: PipeInput) -> None:
    adapter = make_adapter(pipe, config=EditorConfig(max_line_size=4))
    pipe.send_text("abcdefgh\r")

    line = adapter.read_line()

    assert line == "abcd"
    assert adapter.history.entries() == ("abcd",)


def test_completion_state_is_restored() -> None:
    adapter = make_adapter()
    seen: List[ReadState] = []

    def source(buffer: str, cursor: int) -> List[Completion]:
        seen.append(adapter.state)
        return []

    adapter.set_completer(ListCompleter(source))
    adapter.on_request_completion("x", 1)

    assert seen == [ReadState.COMPLETING]
    assert adapter.state is ReadState.IDLE


def test_tab_closes_inserted_call(pipe: PipeInput) -> None:
    adapter = make_adapter(pipe, words=("hasName(",))
    # The cursor lands between the parentheses, so "x" becomes the argument.
    pipe.send_text("hasN\tx\r")

    assert adapter.read_line() == "hasName(x)"


def test_tab_without_auto_close_inserts_verbatim(pipe: PipeInput) -> None:
    config = EditorConfig(close_insertion=None)
    adapter = make_adapter(pipe, words=("hasName(",), config=config)
    pipe.send_text("hasN\tx\r")

    assert adapter.read_line() == "hasName(x"


def test_tab_without_candidates_rings_bell(pipe: PipeInput) -> None:
    output = BellOutput()
    adapter = make_adapter(pipe, output=output)
    pipe.send_text("zz\t\r")

    assert adapter.read_line() == "zz"
    assert output.bells == 1


def test_tab_with_candidate_list_opens_menu() -> None:
    adapter = make_adapter(words=("help", "quit"))
    buffer = Buffer(completer=HookCompleter(adapter), document=Document("x "))

    async def press_tab() -> None:
        adapter.apply_completion(buffer)
        for _ in range(5):
            await asyncio.sleep(0)

    asyncio.run(press_tab())

    assert buffer.complete_state is not None
    assert [c.display_text for c in buffer.complete_state.completions] == [
        "help",
        "quit",
    ]
    assert buffer.text == "x "


def test_toolbar_hints_drop_the_typed_word() -> None:
    adapter = make_adapter(words=("quit", "qa"))

    assert adapter.on_request_hint("q", 1) == ["uit", "a"]
