"""Main SQL intelligence service coordinating context resolution, ranking and formatting."""

from __future__ import annotations

import logging

import sqlglot
from sqlglot.errors import ParseError, TokenError

from .aliases import apply_table_aliases
from .context import resolve
from .metadata import MetadataCache, SchemaProvider, StaticSchemaProvider
from .models import SQLContext, Suggestion, SuggestionCategory
from .suggestions import build_suggestions, filter_by_prefix
from .usage import TextRange, UsageTracker, sort_text

LOG = logging.getLogger(__name__)

MAX_SUGGESTIONS = 50


class SqlIntelService:
    """Facade the editor talks to on every completion trigger."""

    def __init__(
        self,
        metadata: MetadataCache | None = None,
        *,
        tracker: UsageTracker | None = None,
        max_suggestions: int = MAX_SUGGESTIONS,
        dialect: str = "clickhouse",
    ) -> None:
        self._metadata = metadata or MetadataCache(StaticSchemaProvider())
        self._tracker = tracker
        self._max_suggestions = max_suggestions
        self._dialect = dialect

    @property
    def metadata(self) -> MetadataCache:
        return self._metadata

    @property
    def tracker(self) -> UsageTracker | None:
        return self._tracker

    def analyze(self, buffer: str, cursor: int, selected_database: str | None = None) -> SQLContext:
        """Resolve the completion context at ``cursor``."""

        return resolve(buffer, cursor, selected_database)

    async def suggest(
        self,
        buffer: str,
        cursor: int,
        selected_database: str | None = None,
        *,
        word_range: TextRange | None = None,
    ) -> list[Suggestion]:
        """Return ordered suggestions for the current cursor location."""

        context = self.analyze(buffer, cursor, selected_database)
        return await self.suggestions_from_context(context, word_range=word_range)

    async def suggestions_from_context(
        self,
        context: SQLContext,
        *,
        word_range: TextRange | None = None,
    ) -> list[Suggestion]:
        """Build, filter and rank suggestions for a resolved context.

        When a tracker and the range of the word being completed are known, the
        returned suggestions are recorded as shown so a later edit can be
        matched against them.
        """

        schema = await self._metadata.schema()
        functions = await self._metadata.functions()
        keywords = await self._metadata.keywords()
        candidates = filter_by_prefix(
            build_suggestions(context, schema, functions, keywords),
            context.current_word,
        )
        for entry in candidates:
            entry.sort_text = self.sort_text_for(entry.label, entry.category)
        candidates.sort(key=lambda item: (item.sort_text or "", item.label))
        shown = candidates[: self._max_suggestions]
        if self._tracker is not None and word_range is not None:
            self._tracker.record_pending_suggestions(shown, word_range)
        return shown

    def sort_text_for(self, label: str, category: SuggestionCategory) -> str:
        if self._tracker is None:
            return sort_text(label, category)
        return self._tracker.get_sort_text(label, category)

    def set_provider(self, provider: SchemaProvider) -> None:
        """Swap the metadata source, e.g. after switching connections."""

        self._metadata.set_provider(provider)

    def refresh_metadata(self) -> None:
        self._metadata.invalidate()

    def format(self, buffer: str) -> str:
        """Pretty-print ``buffer``; returns it unchanged when it does not parse."""

        if not buffer.strip():
            return buffer
        try:
            statements = sqlglot.transpile(buffer, read=self._dialect, write=self._dialect, pretty=True)
        except (ParseError, TokenError) as exc:
            LOG.info("Skipping format, buffer does not parse: %s", exc)
            return buffer
        statements = [statement for statement in statements if statement.strip()]
        if not statements:
            return buffer
        formatted = ";\n\n".join(statements)
        if buffer.rstrip().endswith(";"):
            formatted += ";"
        return formatted

    def add_aliases(self, buffer: str) -> str:
        """Give every FROM/JOIN table without an alias a generated one."""

        return apply_table_aliases(buffer)


__all__ = ["MAX_SUGGESTIONS", "SqlIntelService"]
