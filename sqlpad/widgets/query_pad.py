"""Query editor widget wired to the SQL intelligence service."""

from __future__ import annotations

import os

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Static, TextArea

from sqlpad.sqlintel import SQLContext, SqlIntelService, Suggestion
from sqlpad.sqlintel.debounce import Debouncer
from sqlpad.sqlintel.usage import EditEvent, TextRange

VISIBLE_SUGGESTIONS = 8


class QueryPad(Container):
    """Editor surface that shows ranked completions for the cursor position."""

    DEFAULT_CSS = """
    QueryPad {
        layout: vertical;
        border: round $primary 40%;
        padding: 1 2;
        height: 1fr;
        background: $surface;
    }

    QueryPad .panel-title {
        text-style: bold;
    }

    QueryPad TextArea {
        height: 1fr;
        border: heavy $primary;
    }

    #query-suggestions {
        height: auto;
        min-height: 3;
        border-top: solid $surface-darken-2;
        padding-top: 1;
    }

    #query-context {
        color: $text-muted;
    }

    QueryPad:focus-within {
        border: round $primary;
        background: $surface-lighten-1;
    }
    """

    BINDINGS = Container.BINDINGS + [
        Binding("tab", "accept_suggestion", "Accept suggestion", show=False, priority=True),
        Binding("ctrl+f", "format_buffer", "Format SQL"),
        Binding("ctrl+l", "alias_tables", "Alias tables"),
    ]

    def __init__(
        self,
        sql_service: SqlIntelService,
        *,
        selected_database: str | None = None,
        debounce_seconds: float = 0.15,
    ) -> None:
        super().__init__(id="query-pad")
        self._sql_service = sql_service
        self._selected_database = selected_database
        self._debouncer = Debouncer(debounce_seconds)
        self._editor: TextArea | None = None
        self._suggestion_panel: Static | None = None
        self._context_panel: Static | None = None
        self._suggestions: list[Suggestion] = []
        self._word_range: TextRange | None = None
        self._last_text = ""

    def compose(self) -> ComposeResult:
        """Compose the editor + suggestion panes."""

        yield Static("Query Pad", classes="panel-title")
        yield TextArea(id="query-editor")
        yield Static("Suggestions appear here.", id="query-suggestions")
        yield Static("", id="query-context")

    def on_mount(self) -> None:
        self._editor = self.query_one("#query-editor", TextArea)
        self._suggestion_panel = self.query_one("#query-suggestions", Static)
        self._context_panel = self.query_one("#query-context", Static)

    def on_unmount(self) -> None:
        self._debouncer.cancel()

    @property
    def editor(self) -> TextArea | None:
        return self._editor

    @property
    def suggestions(self) -> tuple[Suggestion, ...]:
        """Suggestions currently on display, best first."""

        return tuple(self._suggestions)

    @property
    def word_range(self) -> TextRange | None:
        return self._word_range

    @property
    def selected_database(self) -> str | None:
        return self._selected_database

    def set_selected_database(self, database: str | None) -> None:
        self._selected_database = database

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        text = event.text_area.text
        edit = edit_between(self._last_text, text)
        self._last_text = text
        tracker = self._sql_service.tracker
        if edit is not None and tracker is not None:
            tracker.check_for_accepted_suggestion(edit, text)
        self._debouncer.submit(self.refresh_suggestions)

    async def refresh_suggestions(self) -> list[Suggestion]:
        """Resolve the context at the cursor and render fresh suggestions."""

        if not self._editor:
            return []
        text = self._editor.text
        row, column = self._editor.cursor_location
        self._last_text = text
        offset = self._editor.document.get_index_from_location((row, column))
        context = self._sql_service.analyze(text, offset, self._selected_database)
        word_start = max(0, column - len(context.current_word))
        self._word_range = TextRange(row, word_start, row, column)
        self._suggestions = await self._sql_service.suggestions_from_context(
            context,
            word_range=self._word_range,
        )
        self._render_context(context)
        self._render_suggestions()
        return list(self._suggestions)

    def action_accept_suggestion(self) -> None:
        """Replace the word under the cursor with the top suggestion."""

        if not self._editor or not self._suggestions or self._word_range is None:
            return
        suggestion = self._suggestions[0]
        word_range = self._word_range
        self._editor.replace(
            suggestion.text,
            (word_range.start_line, word_range.start_column),
            (word_range.end_line, word_range.end_column),
        )
        tracker = self._sql_service.tracker
        if tracker is not None:
            tracker.check_for_accepted_suggestion(
                EditEvent(changed_range=word_range, inserted_text=suggestion.text),
                self._editor.text,
            )
        self._suggestions = []
        self._word_range = None
        self._render_suggestions()

    def action_format_buffer(self) -> None:
        if not self._editor:
            return
        self._replace_buffer(self._sql_service.format(self._editor.text))

    def action_alias_tables(self) -> None:
        if not self._editor:
            return
        self._replace_buffer(self._sql_service.add_aliases(self._editor.text))

    def _replace_buffer(self, text: str) -> None:
        if not self._editor or text == self._editor.text:
            return
        self._editor.replace(text, (0, 0), self._editor.document.end)

    def _render_suggestions(self) -> None:
        if not self._suggestion_panel:
            return
        if not self._suggestions:
            self._suggestion_panel.update("No suggestions yet.")
            return
        rows = [
            f"{entry.label} · {entry.detail or entry.category.value}"
            for entry in self._suggestions[:VISIBLE_SUGGESTIONS]
        ]
        self._suggestion_panel.update("\n".join(rows))

    def _render_context(self, context: SQLContext) -> None:
        if not self._context_panel:
            return
        tables = ", ".join(
            f"{ref.database + '.' if ref.database else ''}{ref.table}{' ' + ref.alias if ref.alias else ''}"
            for ref in context.from_tables
        )
        lines = [
            f"Clause: {context.clause_type.value}",
            f"Tables: {tables or 'none'}",
        ]
        if context.is_after_dot and context.database_prefix:
            lines.append(f"Prefix: {context.database_prefix}")
        self._context_panel.update("\n".join(lines))


def edit_between(before: str, after: str) -> EditEvent | None:
    """Describe the change from ``before`` to ``after`` as one edit.

    The changed span is widened to whole identifiers on both sides so that
    completing ``sh`` to ``shop`` reports ``shop`` as the inserted text.
    """

    if before == after:
        return None
    start = len(os.path.commonprefix([before, after]))
    limit = min(len(before), len(after)) - start
    suffix = 0
    while suffix < limit and before[-1 - suffix] == after[-1 - suffix]:
        suffix += 1
    while start > 0 and _is_identifier_char(before[start - 1]):
        start -= 1
    while suffix > 0 and _is_identifier_char(after[len(after) - suffix]):
        suffix -= 1
    start_line, start_column = _location(before, start)
    end_line, end_column = _location(before, len(before) - suffix)
    return EditEvent(
        changed_range=TextRange(start_line, start_column, end_line, end_column),
        inserted_text=after[start : len(after) - suffix],
    )


def _is_identifier_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def _location(text: str, offset: int) -> tuple[int, int]:
    line = text.count("\n", 0, offset)
    return line, offset - (text.rfind("\n", 0, offset) + 1)


__all__ = ["QueryPad", "VISIBLE_SUGGESTIONS", "edit_between"]
