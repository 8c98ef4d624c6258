"""SQL intelligence services and helpers."""

from __future__ import annotations

from .aliases import apply_table_aliases, generate_alias
from .catalog import DEFAULT_KEYWORDS
from .clauses import classify
from .context import resolve
from .functions import DEFAULT_FUNCTIONS
from .metadata import MetadataCache, SchemaProvider, StaticSchemaProvider, schema_from_rows
from .models import (
    ClauseType,
    ColumnInfo,
    SQLContext,
    SchemaTree,
    Suggestion,
    SuggestionCategory,
    TableReference,
    Token,
    TokenType,
)
from .service import SqlIntelService
from .storage import FileStore, KeyValueStore, MemoryStore
from .suggestions import build_suggestions
from .tables import extract_tables
from .tokenizer import tokenize
from .usage import EditEvent, TextRange, UsageData, UsageEntry, UsageTracker

__all__ = [
    "ClauseType",
    "ColumnInfo",
    "DEFAULT_FUNCTIONS",
    "DEFAULT_KEYWORDS",
    "EditEvent",
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "MetadataCache",
    "SQLContext",
    "SchemaProvider",
    "SchemaTree",
    "SqlIntelService",
    "StaticSchemaProvider",
    "Suggestion",
    "SuggestionCategory",
    "TableReference",
    "TextRange",
    "Token",
    "TokenType",
    "UsageData",
    "UsageEntry",
    "UsageTracker",
    "apply_table_aliases",
    "build_suggestions",
    "classify",
    "extract_tables",
    "generate_alias",
    "resolve",
    "schema_from_rows",
    "tokenize",
]
