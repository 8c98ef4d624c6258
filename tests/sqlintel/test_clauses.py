"""Tests for the backward-scan clause classifier."""

from __future__ import annotations

import pytest

from sqlpad.sqlintel import ClauseType, classify, tokenize
from sqlpad.sqlintel.context import find_cursor_token


def _clause_at_end(sql: str) -> ClauseType:
    tokens = tokenize(sql)
    return classify(tokens, find_cursor_token(tokens, len(sql)))


@pytest.mark.parametrize(
    ("sql", "expected"),
    [
        ("SELECT ", ClauseType.SELECT),
        ("SELECT * FROM ", ClauseType.FROM),
        ("SELECT * FROM t WHERE ", ClauseType.WHERE),
        ("SELECT * FROM t PREWHERE ", ClauseType.PREWHERE),
        ("SELECT a FROM t GROUP BY ", ClauseType.GROUP_BY),
        ("SELECT a FROM t GROUP\n   BY a, ", ClauseType.GROUP_BY),
        ("SELECT a FROM t ORDER BY ", ClauseType.ORDER_BY),
        ("SELECT a FROM t GROUP BY a HAVING ", ClauseType.HAVING),
        ("SELECT * FROM t LEFT JOIN ", ClauseType.JOIN),
        ("SELECT * FROM t INNER JOIN u ON ", ClauseType.JOIN),
        ("SELECT a FROM t ARRAY JOIN ", ClauseType.ARRAY_JOIN),
        ("INSERT INTO ", ClauseType.INSERT),
        ("UPDATE ", ClauseType.UPDATE),
        ("UPDATE t SET ", ClauseType.SET),
        ("DELETE ", ClauseType.DELETE),
        ("INSERT INTO t VALUES ", ClauseType.VALUES),
        ("select * from t where ", ClauseType.WHERE),
    ],
)
def test_classify_at_end_of_buffer(sql: str, expected: ClauseType) -> None:
    assert _clause_at_end(sql) is expected


def test_last_keyword_wins_even_inside_subquery() -> None:
    sql = "SELECT * FROM (SELECT id FROM t WHERE x = 1) AS s WHERE "

    assert _clause_at_end(sql) is ClauseType.WHERE
    assert _clause_at_end("SELECT * FROM (SELECT id FROM t WHERE ") is ClauseType.WHERE


def test_classify_uses_cursor_token_not_buffer_end() -> None:
    sql = "SELECT id FROM t WHERE x = 1"
    tokens = tokenize(sql)
    index = find_cursor_token(tokens, sql.index("id") + 1)

    assert classify(tokens, index) is ClauseType.SELECT


def test_by_without_group_or_order_is_ignored() -> None:
    assert _clause_at_end("BY x ") is ClauseType.UNKNOWN


def test_unknown_when_no_clause_keyword() -> None:
    assert _clause_at_end("foo bar ") is ClauseType.UNKNOWN
    assert classify([], 0) is ClauseType.UNKNOWN
    assert classify(tokenize("SELECT a"), -1) is ClauseType.UNKNOWN


def test_index_past_end_is_clamped() -> None:
    tokens = tokenize("SELECT * FROM t")

    assert classify(tokens, len(tokens) + 5) is ClauseType.FROM


def test_classify_is_idempotent() -> None:
    tokens = tokenize("SELECT a FROM t ORDER BY a")
    index = len(tokens) - 1

    assert classify(tokens, index) is classify(tokens, index) is ClauseType.ORDER_BY
