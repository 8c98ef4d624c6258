"""Usage tracking that promotes frequently accepted suggestions.

Suggestions shown to the user are remembered for a short window. When an edit
arrives that inserts one of them at the spot where it was offered, the
suggestion counts as accepted and its usage counter for the active connection
is bumped and persisted.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Protocol

from pydantic import BaseModel, ConfigDict, Field

from .models import SuggestionCategory
from .storage import KeyValueStore, MemoryStore

LOG = logging.getLogger(__name__)

STORAGE_VERSION = 1
MATCH_WINDOW_MS = 1000
STORAGE_KEY_PREFIX = "sql-autocomplete-usage"

BASE_PRIORITY: dict[SuggestionCategory, int] = {
    SuggestionCategory.COLUMN: 10,
    SuggestionCategory.TABLE: 20,
    SuggestionCategory.DATABASE: 25,
    SuggestionCategory.FUNCTION: 30,
    SuggestionCategory.KEYWORD: 40,
    SuggestionCategory.OPERATOR: 50,
}
MAX_USAGE_BOOST = 9


class UsageEntry(BaseModel):
    """Acceptance counter for one ``category:label`` key."""

    model_config = ConfigDict(populate_by_name=True)

    count: int = 0
    last_used: int = Field(alias="lastUsed")
    category: SuggestionCategory


class UsageData(BaseModel):
    """Persisted usage record for a single connection."""

    model_config = ConfigDict(populate_by_name=True)

    version: int = STORAGE_VERSION
    last_updated: int = Field(alias="lastUpdated")
    items: dict[str, UsageEntry] = Field(default_factory=dict)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


@dataclass(frozen=True, slots=True)
class TextRange:
    """Editor range in line/column coordinates."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int


@dataclass(frozen=True, slots=True)
class EditEvent:
    """A text change reported by the host editor."""

    changed_range: TextRange
    inserted_text: str


@dataclass(frozen=True, slots=True)
class PendingSuggestion:
    """A suggestion that was shown and may be accepted shortly."""

    label: str
    key: str
    category: SuggestionCategory
    range: TextRange
    timestamp: int


@dataclass(frozen=True, slots=True)
class UsageStats:
    total_items: int
    total_usage: int
    by_category: dict[str, int] = field(default_factory=dict)


class ShownSuggestion(Protocol):
    label: str
    category: SuggestionCategory


def suggestion_key(label: str, category: SuggestionCategory | str) -> str:
    return f"{SuggestionCategory(category).value}:{label}"


def sort_text(label: str, category: SuggestionCategory | str, usage_count: int = 0) -> str:
    """Lexicographic sort key: two-digit priority, a hyphen, the lowercased label."""

    base = BASE_PRIORITY[SuggestionCategory(category)]
    boost = min(MAX_USAGE_BOOST, math.floor(math.log2(usage_count + 1)))
    priority = max(1, base - boost)
    return f"{priority:02d}-{label.lower()}"


class UsageTracker:
    """Per-connection usage statistics for autocomplete ranking."""

    def __init__(
        self,
        connection_id: str,
        store: KeyValueStore | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store if store is not None else MemoryStore()
        self._clock = clock
        self._connection_id = connection_id
        self._pending: list[PendingSuggestion] = []
        self._data = self._load()

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @property
    def usage_data(self) -> UsageData:
        """In-memory usage record for the active connection."""

        return self._data

    @property
    def pending(self) -> tuple[PendingSuggestion, ...]:
        return tuple(self._pending)

    def set_connection(self, connection_id: str) -> None:
        """Switch to another connection, loading its record and dropping pending state."""

        if connection_id == self._connection_id:
            return
        self._connection_id = connection_id
        self._data = self._load()
        self._pending = []

    def record_pending_suggestions(
        self,
        suggestions: Iterable[ShownSuggestion],
        word_range: TextRange,
    ) -> None:
        """Remember the suggestions that were just shown for ``word_range``."""

        now = self._now()
        self._pending = [entry for entry in self._pending if now - entry.timestamp < MATCH_WINDOW_MS]
        for suggestion in suggestions:
            category = SuggestionCategory(suggestion.category)
            self._pending.append(
                PendingSuggestion(
                    label=suggestion.label,
                    key=suggestion_key(suggestion.label, category),
                    category=category,
                    range=word_range,
                    timestamp=now,
                )
            )

    def check_for_accepted_suggestion(self, event: EditEvent, current_text: str | None) -> bool:
        """Count ``event`` as an acceptance if it inserts a pending suggestion.

        Returns ``True`` when a suggestion matched. The matched key is removed
        from the pending buffer so later edits cannot count it again.
        """

        if current_text is None:
            return False
        now = self._now()
        change = event.changed_range
        for pending in self._pending:
            if now - pending.timestamp > MATCH_WINDOW_MS:
                continue
            expected = pending.range
            range_matches = (
                change.start_line == expected.start_line
                and change.start_column >= expected.start_column
                and change.end_column <= expected.end_column + len(pending.label)
            )
            if range_matches and pending.label in event.inserted_text:
                self.record_usage(pending.key, pending.category)
                self._pending = [entry for entry in self._pending if entry.key != pending.key]
                return True
        return False

    def record_usage(self, key: str, category: SuggestionCategory | str) -> None:
        """Increment the counter for ``key`` and persist."""

        now = self._now()
        entry = self._data.items.get(key)
        if entry is None:
            self._data.items[key] = UsageEntry(count=1, last_used=now, category=SuggestionCategory(category))
        else:
            entry.count += 1
            entry.last_used = now
        self._save()

    def get_usage_count(self, key: str) -> int:
        entry = self._data.items.get(key)
        return entry.count if entry else 0

    def get_sort_text(self, label: str, category: SuggestionCategory | str) -> str:
        """Sort key for a candidate, boosted by how often it was accepted."""

        return sort_text(label, category, self.get_usage_count(suggestion_key(label, category)))

    def clear_usage_data(self) -> None:
        """Forget all usage for the active connection."""

        self._data = self._empty()
        self._save()

    def get_stats(self) -> UsageStats:
        items = self._data.items.values()
        by_category: dict[str, int] = {}
        for item in items:
            by_category[item.category.value] = by_category.get(item.category.value, 0) + 1
        return UsageStats(
            total_items=len(self._data.items),
            total_usage=sum(item.count for item in items),
            by_category=by_category,
        )

    def _storage_key(self) -> str:
        return f"{STORAGE_KEY_PREFIX}:{self._connection_id}"

    def _load(self) -> UsageData:
        try:
            stored = self._store.get(self._storage_key())
            if stored:
                data = UsageData.model_validate_json(stored)
                if data.version == STORAGE_VERSION:
                    return data
                LOG.info(
                    "Discarding usage data for %s with version %s",
                    self._connection_id,
                    data.version,
                )
        except Exception as exc:
            LOG.warning("Failed to load autocomplete usage data for %s: %s", self._connection_id, exc)
        return self._empty()

    def _save(self) -> None:
        self._data.last_updated = self._now()
        try:
            self._store.set(self._storage_key(), self._data.to_json())
        except Exception as exc:
            LOG.warning("Failed to save autocomplete usage data for %s: %s", self._connection_id, exc)

    def _empty(self) -> UsageData:
        return UsageData(version=STORAGE_VERSION, last_updated=self._now(), items={})

    def _now(self) -> int:
        return round(self._clock() * 1000)


__all__ = [
    "BASE_PRIORITY",
    "EditEvent",
    "MATCH_WINDOW_MS",
    "PendingSuggestion",
    "STORAGE_VERSION",
    "TextRange",
    "UsageData",
    "UsageEntry",
    "UsageStats",
    "UsageTracker",
    "sort_text",
    "suggestion_key",
]
