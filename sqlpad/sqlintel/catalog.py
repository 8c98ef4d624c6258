"""Built-in keyword list used when the server does not provide one."""

from __future__ import annotations

from typing import Tuple

DEFAULT_KEYWORDS: Tuple[str, ...] = (
    "SELECT",
    "DISTINCT",
    "FROM",
    "WHERE",
    "PREWHERE",
    "GROUP BY",
    "HAVING",
    "ORDER BY",
    "LIMIT",
    "OFFSET",
    "JOIN",
    "INNER JOIN",
    "LEFT JOIN",
    "RIGHT JOIN",
    "FULL JOIN",
    "CROSS JOIN",
    "ARRAY JOIN",
    "ON",
    "USING",
    "AS",
    "AND",
    "OR",
    "NOT",
    "IN",
    "LIKE",
    "BETWEEN",
    "IS NULL",
    "IS NOT NULL",
    "UNION ALL",
    "INSERT INTO",
    "VALUES",
    "UPDATE",
    "SET",
    "DELETE FROM",
    "SAMPLE",
    "FORMAT",
    "SETTINGS",
    "CREATE TABLE",
    "ALTER TABLE",
    "DROP TABLE",
    "ENGINE",
)


__all__ = ["DEFAULT_KEYWORDS"]
