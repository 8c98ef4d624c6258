"""Extraction of ``[database.]table [AS] [alias]`` references from FROM/JOIN."""

from __future__ import annotations

from typing import Sequence

from .clauses import previous_significant
from .models import TableReference, Token, TokenType
from .tokenizer import BOUNDARY_KEYWORDS, is_word

_SKIPPABLE = (TokenType.WHITESPACE, TokenType.COMMENT)


def extract_tables(tokens: Sequence[Token]) -> list[TableReference]:
    """Return every table reference in source order.

    The whole token stream is scanned regardless of where the cursor is, so a
    JOIN typed below the cursor still contributes its table and alias.
    """

    tables: list[TableReference] = []
    count = len(tokens)
    i = 0
    while i < count:
        if not _is_trigger(tokens, i):
            i += 1
            continue

        i = _skip(tokens, i + 1)
        if i >= count:
            break
        first = tokens[i]
        if not is_word(first):
            continue
        after_first = _skip(tokens, i + 1)
        has_dot = after_first < count and tokens[after_first].type is TokenType.DOT
        if not has_dot and _is_boundary(first):
            # ``FROM WHERE`` while typing: the keyword is not a table name.
            continue

        database: str | None = None
        table_token: Token | None = first
        i += 1
        if has_dot:
            database = first.value
            i = _skip(tokens, after_first + 1)
            table_token = tokens[i] if i < count and is_word(tokens[i]) else None
            if table_token is None:
                continue
            i += 1

        alias: str | None = None
        j = _skip(tokens, i)
        if j < count and tokens[j].type is TokenType.KEYWORD and tokens[j].value.upper() == "AS":
            j = _skip(tokens, j + 1)
            i = j
        if j < count and is_word(tokens[j]) and not _is_boundary(tokens[j]):
            alias = tokens[j].value
            i = j + 1

        tables.append(
            TableReference(
                database=database,
                table=table_token.value,
                alias=alias,
                end_position=table_token.end if alias is None else None,
            )
        )
    return tables


def _is_trigger(tokens: Sequence[Token], index: int) -> bool:
    token = tokens[index]
    if token.type is not TokenType.KEYWORD:
        return False
    keyword = token.value.upper()
    if keyword == "FROM":
        return True
    if not keyword.endswith("JOIN"):
        return False
    # ARRAY JOIN unfolds array columns, it does not introduce a table.
    previous = previous_significant(tokens, index)
    return not (previous is not None and previous.value.upper() == "ARRAY")


def _is_boundary(token: Token) -> bool:
    return token.type is TokenType.KEYWORD and token.value.upper() in BOUNDARY_KEYWORDS


def _skip(tokens: Sequence[Token], index: int) -> int:
    while index < len(tokens) and tokens[index].type in _SKIPPABLE:
        index += 1
    return index


__all__ = ["extract_tables"]
