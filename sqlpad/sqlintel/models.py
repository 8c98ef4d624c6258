"""Core dataclasses shared by the SQL intelligence services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Sequence, Tuple


class TokenType(str, Enum):
    """Lexical classes produced by the tokenizer."""

    KEYWORD = "keyword"
    IDENTIFIER = "identifier"
    DOT = "dot"
    COMMA = "comma"
    OPERATOR = "operator"
    STRING = "string"
    NUMBER = "number"
    PAREN = "paren"
    COMMENT = "comment"
    WHITESPACE = "whitespace"
    UNKNOWN = "unknown"


class ClauseType(str, Enum):
    """Represents the SQL clause under the cursor."""

    SELECT = "SELECT"
    FROM = "FROM"
    WHERE = "WHERE"
    PREWHERE = "PREWHERE"
    GROUP_BY = "GROUP_BY"
    ORDER_BY = "ORDER_BY"
    HAVING = "HAVING"
    JOIN = "JOIN"
    ARRAY_JOIN = "ARRAY_JOIN"
    SAMPLE = "SAMPLE"
    FORMAT = "FORMAT"
    SETTINGS = "SETTINGS"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    SET = "SET"
    VALUES = "VALUES"
    CREATE = "CREATE"
    ALTER = "ALTER"
    DROP = "DROP"
    ENGINE = "ENGINE"
    TO = "TO"
    UNKNOWN = "UNKNOWN"


COLUMN_CLAUSES = frozenset(
    {
        ClauseType.SELECT,
        ClauseType.WHERE,
        ClauseType.PREWHERE,
        ClauseType.GROUP_BY,
        ClauseType.ORDER_BY,
        ClauseType.HAVING,
    }
)


class SuggestionCategory(str, Enum):
    """Kinds of completion candidates, also used as usage-tracking buckets."""

    COLUMN = "column"
    TABLE = "table"
    DATABASE = "database"
    FUNCTION = "function"
    KEYWORD = "keyword"
    OPERATOR = "operator"


@dataclass(frozen=True, slots=True)
class Token:
    """Classified slice of source text; ``start``/``end`` are half-open offsets."""

    type: TokenType
    value: str
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class TableReference:
    """A ``[database.]table [alias]`` occurrence from a FROM or JOIN."""

    database: str | None
    table: str
    alias: str | None = None
    # Offset after the table name, only recorded when no alias was written.
    end_position: int | None = None


@dataclass(frozen=True, slots=True)
class SQLContext:
    """Everything the suggestion builder needs to know about the cursor."""

    clause_type: ClauseType
    from_tables: Tuple[TableReference, ...]
    current_word: str
    is_after_dot: bool
    database_prefix: str | None = None
    table_prefix: str | None = None
    selected_database: str | None = None
    is_simple_select: bool = False


@dataclass(frozen=True, slots=True)
class ColumnInfo:
    """Column metadata supplied by the schema provider."""

    name: str
    type: str = ""


SchemaTree = Mapping[str, Mapping[str, Sequence[ColumnInfo]]]


@dataclass(slots=True)
class Suggestion:
    """Single autocomplete entry."""

    label: str
    category: SuggestionCategory
    insert_text: str | None = None
    detail: str | None = None
    sort_text: str | None = None

    @property
    def text(self) -> str:
        """Text inserted into the buffer when the suggestion is accepted."""

        return self.insert_text if self.insert_text is not None else self.label


__all__ = [
    "COLUMN_CLAUSES",
    "ClauseType",
    "ColumnInfo",
    "SQLContext",
    "SchemaTree",
    "Suggestion",
    "SuggestionCategory",
    "TableReference",
    "Token",
    "TokenType",
]
