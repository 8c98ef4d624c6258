"""Function names offered in SELECT lists when the server provides none."""

from __future__ import annotations

from typing import Tuple

DEFAULT_FUNCTIONS: Tuple[str, ...] = (
    "count",
    "sum",
    "avg",
    "min",
    "max",
    "uniq",
    "uniqExact",
    "any",
    "argMax",
    "argMin",
    "groupArray",
    "coalesce",
    "if",
    "multiIf",
    "lower",
    "upper",
    "length",
    "concat",
    "substring",
    "now",
    "today",
    "toDate",
    "toDateTime",
    "toStartOfDay",
    "toStartOfHour",
    "toString",
    "toUInt64",
    "round",
)


__all__ = ["DEFAULT_FUNCTIONS"]
