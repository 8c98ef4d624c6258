"""Turn a resolved SQL context plus schema metadata into completion candidates."""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

from .models import (
    COLUMN_CLAUSES,
    ClauseType,
    ColumnInfo,
    SchemaTree,
    SQLContext,
    Suggestion,
    SuggestionCategory,
    TableReference,
)

CONDITION_OPERATORS: Tuple[str, ...] = ("AND", "OR", "NOT", "IN", "LIKE", "BETWEEN")
ORDER_DIRECTIONS: Tuple[str, ...] = ("ASC", "DESC")
_CONDITION_CLAUSES = frozenset({ClauseType.WHERE, ClauseType.PREWHERE, ClauseType.HAVING})


def build_suggestions(
    context: SQLContext,
    schema: SchemaTree,
    functions: Sequence[str] = (),
    keywords: Sequence[str] = (),
) -> list[Suggestion]:
    """Return deduplicated candidates for ``context``, contextual ones first."""

    suggestions: list[Suggestion] = []
    dotted = context.is_after_dot and context.database_prefix is not None
    if context.clause_type in COLUMN_CLAUSES:
        if dotted:
            suggestions.extend(_dotted_suggestions(context, schema))
        else:
            suggestions.extend(column_suggestions(context, schema))
            suggestions.extend(_clause_extras(context.clause_type, functions))
    elif dotted:
        suggestions.extend(table_suggestions(schema, context.database_prefix or ""))
    else:
        suggestions.extend(database_suggestions(schema))
        if context.selected_database:
            suggestions.extend(table_suggestions(schema, context.selected_database))

    if not context.is_after_dot:
        suggestions.extend(
            Suggestion(label=keyword, category=SuggestionCategory.KEYWORD, insert_text=keyword)
            for keyword in keywords
        )
    return dedupe(suggestions)


def find_database(schema: SchemaTree, database: str | None) -> tuple[str, dict] | None:
    """Case-insensitive database lookup returning ``(name, tables)``."""

    if not database:
        return None
    wanted = database.lower()
    for name, tables in schema.items():
        if name.lower() == wanted:
            return name, dict(tables)
    return None


def find_table(
    schema: SchemaTree,
    database: str | None,
    table: str,
) -> tuple[str, str, Sequence[ColumnInfo]] | None:
    """Case-insensitive table lookup returning ``(database, table, columns)``."""

    found = find_database(schema, database)
    if found is None:
        return None
    db_name, tables = found
    wanted = table.lower()
    for name, columns in tables.items():
        if name.lower() == wanted:
            return db_name, name, columns
    return None


def column_suggestions(context: SQLContext, schema: SchemaTree) -> list[Suggestion]:
    """Columns of the FROM/JOIN tables, or of the whole selected database."""

    suggestions: list[Suggestion] = []
    if context.from_tables:
        for ref in context.from_tables:
            found = find_table(schema, ref.database or context.selected_database, ref.table)
            if found is None:
                continue
            db_name, table_name, columns = found
            for column in columns:
                label = f"{ref.alias}.{column.name}" if ref.alias else column.name
                suggestions.append(_column(column, label, db_name, table_name))
        return suggestions

    found_db = find_database(schema, context.selected_database)
    if found_db is None:
        return suggestions
    db_name, tables = found_db
    for table_name, columns in tables.items():
        for column in columns:
            suggestions.append(_column(column, column.name, db_name, table_name))
    return suggestions


def table_suggestions(schema: SchemaTree, database: str) -> list[Suggestion]:
    found = find_database(schema, database)
    if found is None:
        return []
    db_name, tables = found
    return [
        Suggestion(
            label=table,
            category=SuggestionCategory.TABLE,
            insert_text=table,
            detail=f"Table in {db_name}",
        )
        for table in tables
    ]


def database_suggestions(schema: SchemaTree) -> list[Suggestion]:
    return [
        Suggestion(label=name, category=SuggestionCategory.DATABASE, insert_text=name, detail="Database")
        for name in schema
    ]


def filter_by_prefix(suggestions: Iterable[Suggestion], word: str) -> list[Suggestion]:
    """Keep suggestions whose label, or last dotted part of it, starts with ``word``."""

    if not word:
        return list(suggestions)
    prefix = word.lower()
    return [
        entry
        for entry in suggestions
        if entry.label.lower().startswith(prefix) or entry.label.rsplit(".", 1)[-1].lower().startswith(prefix)
    ]


def dedupe(suggestions: Iterable[Suggestion]) -> list[Suggestion]:
    """Drop repeated labels, keeping the first occurrence."""

    seen: set[str] = set()
    unique: list[Suggestion] = []
    for entry in suggestions:
        if entry.label in seen:
            continue
        seen.add(entry.label)
        unique.append(entry)
    return unique


def _dotted_suggestions(context: SQLContext, schema: SchemaTree) -> list[Suggestion]:
    """Resolve ``prefix.`` as alias, then table, then database, in that order."""

    prefix = context.database_prefix or ""
    if context.table_prefix:
        found = find_table(schema, prefix, context.table_prefix)
        return _columns_of(found)

    ref = _match_reference(context.from_tables, prefix, by_alias=True)
    if ref is None:
        ref = _match_reference(context.from_tables, prefix, by_alias=False)
    if ref is not None:
        return _columns_of(find_table(schema, ref.database or context.selected_database, ref.table))
    return table_suggestions(schema, prefix)


def _match_reference(
    references: Sequence[TableReference],
    prefix: str,
    *,
    by_alias: bool,
) -> TableReference | None:
    wanted = prefix.lower()
    for ref in references:
        name = ref.alias if by_alias else ref.table
        if name and name.lower() == wanted:
            return ref
    return None


def _columns_of(found: tuple[str, str, Sequence[ColumnInfo]] | None) -> list[Suggestion]:
    if found is None:
        return []
    db_name, table_name, columns = found
    return [_column(column, column.name, db_name, table_name) for column in columns]


def _column(column: ColumnInfo, label: str, database: str, table: str) -> Suggestion:
    detail = f"{column.type} - {database}.{table}" if column.type else f"{database}.{table}"
    return Suggestion(label=label, category=SuggestionCategory.COLUMN, insert_text=label, detail=detail)


def _clause_extras(clause: ClauseType, functions: Sequence[str]) -> list[Suggestion]:
    extras: list[Suggestion] = []
    if clause is ClauseType.SELECT:
        extras.append(
            Suggestion(label="*", category=SuggestionCategory.KEYWORD, insert_text="*", detail="All columns")
        )
        extras.extend(
            Suggestion(label=name, category=SuggestionCategory.FUNCTION, insert_text=f"{name}()")
            for name in functions
        )
    if clause in _CONDITION_CLAUSES:
        extras.extend(
            Suggestion(label=op, category=SuggestionCategory.OPERATOR, insert_text=op)
            for op in CONDITION_OPERATORS
        )
    if clause is ClauseType.ORDER_BY:
        extras.extend(
            Suggestion(label=direction, category=SuggestionCategory.KEYWORD, insert_text=direction)
            for direction in ORDER_DIRECTIONS
        )
    return extras


__all__ = [
    "CONDITION_OPERATORS",
    "build_suggestions",
    "column_suggestions",
    "database_suggestions",
    "dedupe",
    "filter_by_prefix",
    "find_database",
    "find_table",
    "table_suggestions",
]
