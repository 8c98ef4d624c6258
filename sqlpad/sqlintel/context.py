"""Resolve the completion context for a cursor position in a SQL buffer."""

from __future__ import annotations

from typing import Sequence

from .clauses import classify
from .models import ClauseType, SQLContext, Token, TokenType
from .tables import extract_tables
from .tokenizer import is_word, tokenize

_NON_SIMPLE_KEYWORDS = frozenset({"FROM", "WHERE", "GROUP", "ORDER", "HAVING", "LIMIT", "JOIN"})


def resolve(text: str, cursor_offset: int, selected_database: str | None = None) -> SQLContext:
    """Tokenize ``text`` and describe what is being typed at ``cursor_offset``.

    ``selected_database`` is the database picked in the UI; it is passed through
    untouched so the suggestion builder can fall back to it.
    """

    tokens = tokenize(text)
    offset = max(0, min(cursor_offset, len(text)))
    index = find_cursor_token(tokens, offset)

    current_word = ""
    is_after_dot = False
    database_prefix: str | None = None
    table_prefix: str | None = None

    if index >= 0:
        token = tokens[index]
        if is_word(token):
            current_word = _word_prefix(text, token, offset)
        dot_index = _dot_before(tokens, index, offset)
        if dot_index is not None:
            is_after_dot = True
            nearer = tokens[dot_index - 1] if dot_index >= 1 else None
            if is_word(nearer):
                earlier = tokens[dot_index - 3] if dot_index >= 3 else None
                if is_word(earlier) and tokens[dot_index - 2].type is TokenType.DOT:
                    database_prefix = earlier.value
                    table_prefix = nearer.value
                else:
                    database_prefix = nearer.value

    clause_type = classify(tokens, index)
    return SQLContext(
        clause_type=clause_type,
        from_tables=tuple(extract_tables(tokens)),
        current_word=current_word,
        is_after_dot=is_after_dot,
        database_prefix=database_prefix,
        table_prefix=table_prefix,
        selected_database=selected_database,
        is_simple_select=clause_type is ClauseType.SELECT and not _has_other_clauses(tokens),
    )


def find_cursor_token(tokens: Sequence[Token], offset: int) -> int:
    """Index of the token under ``offset``, or the nearest one before it; -1 if none."""

    for i, token in enumerate(tokens):
        if token.start <= offset <= token.end:
            return i
    for i in range(len(tokens) - 1, -1, -1):
        if tokens[i].end <= offset:
            return i
    return -1


def _dot_before(tokens: Sequence[Token], index: int, offset: int) -> int | None:
    token = tokens[index]
    # ``mydb.|`` -- nothing typed after the dot yet.
    if token.type is TokenType.DOT and token.end == offset:
        return index
    if is_word(token) and index >= 1 and tokens[index - 1].type is TokenType.DOT:
        return index - 1
    return None


def _word_prefix(text: str, token: Token, offset: int) -> str:
    typed = offset - token.start
    if text[token.start] == "`":
        typed -= 1
    return token.value[: max(0, typed)]


def _has_other_clauses(tokens: Sequence[Token]) -> bool:
    return any(
        token.type is TokenType.KEYWORD and token.value.upper() in _NON_SIMPLE_KEYWORDS
        for token in tokens
    )


__all__ = ["find_cursor_token", "resolve"]
