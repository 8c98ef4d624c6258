"""Tests for cursor context resolution."""

from __future__ import annotations

from sqlpad.sqlintel import ClauseType, SQLContext, resolve, tokenize
from sqlpad.sqlintel.context import find_cursor_token


def _resolve(marked: str, selected_database: str | None = None) -> SQLContext:
    """Resolve with the cursor placed at the ``|`` marker."""

    offset = marked.index("|")
    return resolve(marked.replace("|", "", 1), offset, selected_database)


def test_dot_after_database_sets_prefix() -> None:
    sql = "SELECT * FROM mydb.P"
    context = resolve(sql, len(sql), None)

    assert context.is_after_dot is True
    assert context.database_prefix == "mydb"
    assert context.table_prefix is None
    assert context.current_word == "P"
    assert context.clause_type is ClauseType.FROM


def test_dot_with_nothing_typed_yet() -> None:
    context = _resolve("SELECT * FROM mydb.|")

    assert context.is_after_dot is True
    assert context.database_prefix == "mydb"
    assert context.current_word == ""


def test_database_table_column_pattern() -> None:
    context = _resolve("SELECT mydb.users.na| FROM x")

    assert context.database_prefix == "mydb"
    assert context.table_prefix == "users"
    assert context.current_word == "na"
    assert context.clause_type is ClauseType.SELECT


def test_alias_dot_in_select_list() -> None:
    context = _resolve("SELECT o.| FROM orders o")

    assert context.is_after_dot is True
    assert context.database_prefix == "o"
    assert context.clause_type is ClauseType.SELECT
    assert [(ref.table, ref.alias) for ref in context.from_tables] == [("orders", "o")]


def test_current_word_is_prefix_up_to_cursor() -> None:
    context = _resolve("SELECT use|rname FROM t")

    assert context.current_word == "use"
    assert context.is_after_dot is False
    assert context.database_prefix is None


def test_joins_after_cursor_are_visible() -> None:
    context = _resolve("SELECT | FROM a JOIN b")

    assert [ref.table for ref in context.from_tables] == ["a", "b"]
    assert context.current_word == ""
    assert context.clause_type is ClauseType.SELECT


def test_selected_database_is_passed_through() -> None:
    context = _resolve("SELECT |", selected_database="analytics")

    assert context.selected_database == "analytics"


def test_simple_select_detection() -> None:
    assert _resolve("SELECT 1|").is_simple_select is True
    assert _resolve("SELECT a| FROM t").is_simple_select is False
    assert _resolve("SELECT * FROM t WHERE |").is_simple_select is False


def test_empty_and_out_of_range_input() -> None:
    empty = resolve("", 0, None)

    assert empty.clause_type is ClauseType.UNKNOWN
    assert empty.from_tables == ()
    assert empty.current_word == ""
    assert empty.is_after_dot is False

    clamped = resolve("SELECT", 100, None)
    assert clamped.current_word == "SELECT"
    assert clamped.clause_type is ClauseType.SELECT

    negative = resolve("SELECT", -3, None)
    assert negative.current_word == ""


def test_find_cursor_token_falls_back_to_previous_token() -> None:
    tokens = tokenize("ab cd")

    assert find_cursor_token(tokens, 1) == 0
    assert find_cursor_token(tokens, 99) == 2
    assert find_cursor_token([], 0) == -1


def test_malformed_input_does_not_raise() -> None:
    for text in ("'", "`", "/*", "SELECT ((( FROM . . JOIN", "..", ". x"):
        for offset in range(len(text) + 1):
            resolve(text, offset, None)
