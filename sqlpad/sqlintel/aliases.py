"""Short table alias generation."""

from __future__ import annotations

from typing import AbstractSet

from .catalog import DEFAULT_KEYWORDS
from .tables import extract_tables
from .tokenizer import BOUNDARY_KEYWORDS, tokenize

DEFAULT_ALIAS = "t"

# Words an inserted alias must never spell, lowercased to match the conflict set.
RESERVED_ALIASES: frozenset[str] = frozenset(
    word.lower()
    for word in (
        *BOUNDARY_KEYWORDS,
        *(part for keyword in DEFAULT_KEYWORDS for part in keyword.split()),
        "ALL", "ANY", "ASC", "AT", "BY", "CASE", "DESC", "DO", "ELSE", "END", "GO",
        "IF", "INTO", "IS", "NO", "NULL", "OF", "THEN", "WHEN", "WITH",
    )
)


def generate_alias(table_name: str, existing_aliases: AbstractSet[str]) -> str:
    """Return a short alias for ``table_name`` that is not in ``existing_aliases``.

    Candidates are tried in order: the first alphabetic character
    (``users`` -> ``u``), the first two characters (``us``), then the first
    candidate with a counter (``u1``, ``u2``, ...). ``existing_aliases`` is
    expected to hold lowercase aliases; the caller adds each generated alias
    to it before asking for the next one.
    """

    if not table_name:
        return DEFAULT_ALIAS

    first = next((char.lower() for char in table_name if char.isalpha()), DEFAULT_ALIAS)
    if first not in existing_aliases:
        return first

    if len(table_name) >= 2:
        first_two = table_name[:2].lower()
        if first_two not in existing_aliases:
            return first_two

    counter = 1
    while f"{first}{counter}" in existing_aliases:
        counter += 1
    return f"{first}{counter}"


def apply_table_aliases(text: str) -> str:
    """Append a generated alias to every FROM/JOIN table that has none.

    Aliases already written in ``text`` and SQL keywords are treated as taken.
    """

    references = extract_tables(tokenize(text))
    used = set(RESERVED_ALIASES)
    used.update(ref.alias.lower() for ref in references if ref.alias)
    insertions: list[tuple[int, str]] = []
    for ref in references:
        if ref.alias or ref.end_position is None:
            continue
        alias = generate_alias(ref.table, used)
        used.add(alias.lower())
        insertions.append((ref.end_position, alias))

    for position, alias in sorted(insertions, reverse=True):
        text = f"{text[:position]} {alias}{text[position:]}"
    return text


__all__ = ["DEFAULT_ALIAS", "RESERVED_ALIASES", "apply_table_aliases", "generate_alias"]
