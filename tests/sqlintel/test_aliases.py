"""Tests for table alias generation."""

from __future__ import annotations

from sqlpad.sqlintel import apply_table_aliases, generate_alias


def test_first_letter_then_two_letters_then_counter() -> None:
    assert generate_alias("Product", set()) == "p"
    assert generate_alias("Product", {"p"}) == "pr"
    assert generate_alias("Product", {"p", "pr"}) == "p1"
    assert generate_alias("Product", {"p", "pr", "p1", "p2"}) == "p3"


def test_empty_name_falls_back_to_t() -> None:
    assert generate_alias("", set()) == "t"
    assert generate_alias("", {"t"}) == "t"


def test_uppercase_and_single_character_names() -> None:
    assert generate_alias("ORDERS", set()) == "o"
    assert generate_alias("X", set()) == "x"
    assert generate_alias("X", {"x"}) == "x1"


def test_leading_non_letters_are_skipped() -> None:
    assert generate_alias("_tmp_events", set()) == "t"
    assert generate_alias("2024_sales", set()) == "s"


def test_caller_owns_the_conflict_set() -> None:
    used: set[str] = set()
    generated = []
    for table in ("Orders", "Product", "Permissions"):
        alias = generate_alias(table, used)
        used.add(alias)
        generated.append(alias)

    assert generated == ["o", "p", "pe"]


def test_conflict_set_is_expected_lowercase() -> None:
    assert generate_alias("Product", {"P", "PR"}) == "p"


def test_ladder_ignores_sql_keywords() -> None:
    assert generate_alias("Orders", {"o"}) == "or"
    assert generate_alias("Assets", {"a"}) == "as"


def test_second_candidate_uses_raw_leading_characters() -> None:
    assert generate_alias("_tmp", {"t"}) == "_t"
    assert generate_alias("2024_sales", {"s"}) == "20"
    assert generate_alias("2024_sales", {"s", "20"}) == "s1"


def test_generation_does_not_mutate_input() -> None:
    used = frozenset({"p"})

    assert generate_alias("Product", used) == "pr"
    assert used == frozenset({"p"})


def test_apply_table_aliases_inserts_after_each_table() -> None:
    sql = "SELECT * FROM orders JOIN products ON orders.id = products.order_id"

    assert apply_table_aliases(sql) == (
        "SELECT * FROM orders o JOIN products p ON orders.id = products.order_id"
    )


def test_apply_table_aliases_respects_existing_aliases() -> None:
    sql = "SELECT * FROM mydb.Product p JOIN mydb.Price"

    assert apply_table_aliases(sql) == "SELECT * FROM mydb.Product p JOIN mydb.Price pr"


def test_apply_table_aliases_leaves_aliased_queries_unchanged() -> None:
    sql = "SELECT * FROM orders AS o"

    assert apply_table_aliases(sql) == sql
    assert apply_table_aliases("SELECT 1") == "SELECT 1"


def test_apply_table_aliases_never_inserts_keywords() -> None:
    sql = "SELECT * FROM orders JOIN order_items JOIN offers JOIN assets"

    assert apply_table_aliases(sql) == (
        "SELECT * FROM orders o JOIN order_items o1 JOIN offers o2 JOIN assets a"
    )


def test_apply_table_aliases_skips_keyword_two_letter_candidate() -> None:
    sql = "SELECT * FROM accounts a JOIN assets"

    assert apply_table_aliases(sql) == "SELECT * FROM accounts a JOIN assets a1"
