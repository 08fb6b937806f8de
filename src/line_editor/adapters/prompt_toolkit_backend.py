"""Modern backend on ``prompt_toolkit`` with highlighting and hints."""

from __future__ import annotations

from typing import Any, AsyncGenerator, Callable, Iterable, List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.application.current import get_app
from prompt_toolkit.auto_suggest import AutoSuggest, Suggestion
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.completion import Completer as PromptCompleter
from prompt_toolkit.completion import Completion as PromptCompletion
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import FormattedText, StyleAndTextTuples
from prompt_toolkit.history import History as PromptHistory
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.lexers import Lexer
from prompt_toolkit.shortcuts import CompleteStyle
from prompt_toolkit.styles import Style

from line_editor.config import EditorConfig
from line_editor.highlight import Color, ColorMap, char_index_to_byte
from line_editor.history import History

from .base import BackendAdapter

PROMPT_STYLE = Style.from_dict(
    {
        "prompt": "ansigreen",
        "hint": "ansibrightblack",
        "bottom-toolbar": "noreverse",
    }
)


def cursor_offset(document: Document) -> int:
    """Byte offset of the cursor in ``document``."""

    return char_index_to_byte(document.text, document.cursor_position)


def color_style(color: Color) -> str:
    if color is Color.DEFAULT:
        return ""
    return f"fg:ansi{color.value}"


def color_fragments(text: str, colors: ColorMap) -> StyleAndTextTuples:
    return [
        (color_style(color), text[start:end]) for start, end, color in colors.spans()
    ]


class HookCompleter(PromptCompleter):
    """Offers the resolved action through prompt_toolkit's completion menu."""

    def __init__(self, adapter: "PromptToolkitAdapter") -> None:
        self._adapter = adapter

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[PromptCompletion]:
        action = self._adapter.on_request_completion(
            document.text, cursor_offset(document)
        )
        if action.is_insert:
            yield PromptCompletion(action.text, start_position=0)
            return
        # Listed items are display-only; picking one leaves the buffer as is.
        for item in action.items:
            yield PromptCompletion("", start_position=0, display=item)


class HookLexer(Lexer):
    def __init__(self, adapter: "PromptToolkitAdapter") -> None:
        self._adapter = adapter

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        def get_line(lineno: int) -> StyleAndTextTuples:
            try:
                line = lines[lineno]
            except IndexError:
                return []
            return color_fragments(line, self._adapter.on_request_highlight(line))

        return get_line


class HintSuggest(AutoSuggest):
    """Shows a single-string hint inline after the cursor."""

    def __init__(self, adapter: "PromptToolkitAdapter") -> None:
        self._adapter = adapter

    def get_suggestion(self, buffer: Buffer, document: Document) -> Optional[Suggestion]:
        hint = self._adapter.on_request_hint(document.text, cursor_offset(document))
        if isinstance(hint, str) and hint:
            return Suggestion(hint)
        return None


class SharedHistory(PromptHistory):
    """Serves the editor's ``History`` to prompt_toolkit buffers.

    Submitted lines are recorded by the adapter, so prompt_toolkit's own
    appends are ignored.
    """

    def __init__(self, history: History) -> None:
        super().__init__()
        self._history = history

    async def load(self) -> AsyncGenerator[str, None]:
        for entry in reversed(self._history.entries()):
            yield entry

    def get_strings(self) -> List[str]:
        return list(self._history.entries())

    def append_string(self, string: str) -> None:
        del string

    def load_history_strings(self) -> Iterable[str]:
        return reversed(self._history.entries())

    def store_string(self, string: str) -> None:
        del string


class PromptToolkitAdapter(BackendAdapter):
    """Wires completion, highlight and hint callbacks into a PromptSession."""

    kind = "modern"

    def __init__(
        self,
        prompt: str,
        history: History,
        config: EditorConfig,
        *,
        input: Optional[Any] = None,
        output: Optional[Any] = None,
        logger_name: Optional[str] = None,
    ) -> None:
        super().__init__(prompt, history, config, logger_name=logger_name)
        self.session: PromptSession[str] = PromptSession(
            history=SharedHistory(history),
            completer=HookCompleter(self),
            lexer=HookLexer(self),
            auto_suggest=HintSuggest(self),
            bottom_toolbar=self.hint_toolbar,
            key_bindings=self._key_bindings(),
            style=PROMPT_STYLE,
            complete_while_typing=False,
            complete_style=CompleteStyle.MULTI_COLUMN,
            reserve_space_for_menu=config.max_hint_rows,
            input=input,
            output=output,
        )

    def _key_bindings(self) -> KeyBindings:
        bindings = KeyBindings()

        @bindings.add("tab")
        def _(event: KeyPressEvent) -> None:
            self.apply_completion(event.current_buffer, event)

        return bindings

    def apply_completion(self, buffer: Buffer, event: Optional[KeyPressEvent] = None) -> None:
        if buffer.complete_state is not None:
            buffer.complete_next()
            return
        document = buffer.document
        action = self.on_request_completion(document.text, cursor_offset(document))
        if action.is_insert:
            text, back = self.config.closed_insertion(action.text)
            buffer.insert_text(text)
            buffer.cursor_position -= back
        elif action.items:
            buffer.start_completion(select_first=False)
        elif event is not None:
            event.app.output.bell()

    def hint_toolbar(self) -> FormattedText:
        """Multi-row hints rendered below the prompt."""

        document = get_app().current_buffer.document
        hint = self.on_request_hint(document.text, cursor_offset(document))
        if isinstance(hint, list) and hint:
            return FormattedText([("class:hint", "\n".join(hint))])
        return FormattedText([])

    def prompt_message(self) -> FormattedText:
        return FormattedText([("class:prompt", self.prompt)])

    def _read_raw(self) -> str:
        return self.session.prompt(self.prompt_message())


__all__ = [
    "HintSuggest",
    "HookCompleter",
    "HookLexer",
    "PROMPT_STYLE",
    "PromptToolkitAdapter",
    "SharedHistory",
    "color_fragments",
    "color_style",
    "cursor_offset",
]
