"""Clause detection via a backward keyword scan.

The scan is deliberately naive: the nearest clause keyword before the cursor
wins, so a WHERE inside a subquery is indistinguishable from a top-level one.
"""

from __future__ import annotations

from typing import Sequence

from .models import ClauseType, Token, TokenType

CLAUSE_KEYWORDS: dict[str, ClauseType] = {
    "SELECT": ClauseType.SELECT,
    "FROM": ClauseType.FROM,
    "WHERE": ClauseType.WHERE,
    "PREWHERE": ClauseType.PREWHERE,
    "HAVING": ClauseType.HAVING,
    "JOIN": ClauseType.JOIN,
    "SAMPLE": ClauseType.SAMPLE,
    "FORMAT": ClauseType.FORMAT,
    "SETTINGS": ClauseType.SETTINGS,
    "INSERT": ClauseType.INSERT,
    "UPDATE": ClauseType.UPDATE,
    "DELETE": ClauseType.DELETE,
    "SET": ClauseType.SET,
    "VALUES": ClauseType.VALUES,
    "CREATE": ClauseType.CREATE,
    "ALTER": ClauseType.ALTER,
    "DROP": ClauseType.DROP,
    "ENGINE": ClauseType.ENGINE,
    "TO": ClauseType.TO,
}

# Second word of a compound clause -> {first word -> clause}.
_COMPOUND_CLAUSES: dict[str, dict[str, ClauseType]] = {
    "BY": {"GROUP": ClauseType.GROUP_BY, "ORDER": ClauseType.ORDER_BY},
    "JOIN": {"ARRAY": ClauseType.ARRAY_JOIN},
}


def classify(tokens: Sequence[Token], cursor_token_index: int) -> ClauseType:
    """Return the clause the token at ``cursor_token_index`` belongs to."""

    if not tokens or cursor_token_index < 0:
        return ClauseType.UNKNOWN
    index = min(cursor_token_index, len(tokens) - 1)
    for i in range(index, -1, -1):
        token = tokens[i]
        if token.type is not TokenType.KEYWORD:
            continue
        keyword = token.value.upper()
        compound = _COMPOUND_CLAUSES.get(keyword)
        if compound:
            previous = previous_significant(tokens, i)
            if previous is not None and previous.type is TokenType.KEYWORD:
                clause = compound.get(previous.value.upper())
                if clause is not None:
                    return clause
        clause = CLAUSE_KEYWORDS.get(keyword)
        if clause is not None:
            return clause
    return ClauseType.UNKNOWN


def previous_significant(tokens: Sequence[Token], index: int) -> Token | None:
    """Nearest token before ``index`` that is not whitespace."""

    i = index - 1
    while i >= 0 and tokens[i].type is TokenType.WHITESPACE:
        i -= 1
    return tokens[i] if i >= 0 else None


__all__ = ["CLAUSE_KEYWORDS", "classify", "previous_significant"]
