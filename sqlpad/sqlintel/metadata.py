"""Schema metadata providers and the caller-owned cache feeding suggestions."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Iterable, Mapping, Protocol, Sequence, Tuple, TypeVar

from .catalog import DEFAULT_KEYWORDS
from .functions import DEFAULT_FUNCTIONS
from .models import ColumnInfo, SchemaTree

LOG = logging.getLogger(__name__)

T = TypeVar("T")


class SchemaProvider(Protocol):
    """Protocol for services that describe the connected server."""

    async def fetch_schema(self) -> SchemaTree:
        """Return the database -> table -> columns tree."""

    async def fetch_functions(self) -> Sequence[str]:
        """Return the names of callable SQL functions."""

    async def fetch_keywords(self) -> Sequence[str]:
        """Return the keywords offered as fallback suggestions."""


class StaticSchemaProvider:
    """Provider backed by in-memory data."""

    def __init__(
        self,
        schema: Mapping[str, Mapping[str, Sequence[ColumnInfo | str]]] | None = None,
        functions: Sequence[str] | None = None,
        keywords: Sequence[str] | None = None,
    ) -> None:
        self._schema: dict[str, dict[str, Tuple[ColumnInfo, ...]]] = {}
        self._functions = tuple(functions if functions is not None else DEFAULT_FUNCTIONS)
        self._keywords = tuple(keywords if keywords is not None else DEFAULT_KEYWORDS)
        self.update(schema or {})

    async def fetch_schema(self) -> SchemaTree:
        return self._schema

    async def fetch_functions(self) -> Sequence[str]:
        return self._functions

    async def fetch_keywords(self) -> Sequence[str]:
        return self._keywords

    def update(self, schema: Mapping[str, Mapping[str, Sequence[ColumnInfo | str]]]) -> None:
        """Replace the schema tree; bare strings are treated as untyped columns."""

        self._schema = {
            database: {
                table: tuple(_as_column(column) for column in columns)
                for table, columns in tables.items()
            }
            for database, tables in schema.items()
        }


def schema_from_rows(rows: Iterable[Sequence[Any] | Mapping[str, Any]]) -> dict[str, dict[str, Tuple[ColumnInfo, ...]]]:
    """Group ``(database, table, column_name, column_type)`` rows into a schema tree.

    Rows may be sequences or mappings with those keys, matching the shape of
    an ``information_schema``/``system.columns`` query.
    """

    grouped: dict[str, dict[str, list[ColumnInfo]]] = {}
    for row in rows:
        if isinstance(row, Mapping):
            database, table = row["database"], row["table"]
            column = ColumnInfo(name=row["column_name"], type=row.get("column_type", "") or "")
        else:
            database, table, name = row[0], row[1], row[2]
            column = ColumnInfo(name=name, type=row[3] if len(row) > 3 and row[3] else "")
        grouped.setdefault(database, {}).setdefault(table, []).append(column)
    return {
        database: {table: tuple(columns) for table, columns in tables.items()}
        for database, tables in grouped.items()
    }


class MetadataCache:
    """Caches schema, functions and keywords independently until invalidated."""

    def __init__(self, provider: SchemaProvider) -> None:
        self._provider = provider
        self._schema: SchemaTree | None = None
        self._functions: Tuple[str, ...] | None = None
        self._keywords: Tuple[str, ...] | None = None

    @property
    def provider(self) -> SchemaProvider:
        return self._provider

    async def schema(self) -> SchemaTree:
        if self._schema is None:
            loaded = await self._load("schema", self._provider.fetch_schema)
            if loaded is None:
                return {}
            self._schema = loaded
        return self._schema

    async def functions(self) -> Tuple[str, ...]:
        if self._functions is None:
            loaded = await self._load("functions", self._provider.fetch_functions)
            if loaded is None:
                return ()
            self._functions = tuple(loaded)
        return self._functions

    async def keywords(self) -> Tuple[str, ...]:
        if self._keywords is None:
            loaded = await self._load("keywords", self._provider.fetch_keywords)
            if loaded is None:
                return ()
            self._keywords = tuple(loaded)
        return self._keywords

    def invalidate(self, *, schema: bool = True, functions: bool = True, keywords: bool = True) -> None:
        """Drop cached values so the next access refetches them."""

        if schema:
            self._schema = None
        if functions:
            self._functions = None
        if keywords:
            self._keywords = None

    def set_provider(self, provider: SchemaProvider) -> None:
        """Point the cache at another server and forget everything cached."""

        self._provider = provider
        self.invalidate()

    @staticmethod
    async def _load(name: str, fetch: Callable[[], Awaitable[T]]) -> T | None:
        try:
            return await fetch()
        except Exception as exc:
            LOG.warning("Failed to load %s metadata: %s", name, exc)
            return None


def _as_column(column: ColumnInfo | str) -> ColumnInfo:
    if isinstance(column, ColumnInfo):
        return column
    return ColumnInfo(name=str(column))


__all__ = ["MetadataCache", "SchemaProvider", "StaticSchemaProvider", "schema_from_rows"]
