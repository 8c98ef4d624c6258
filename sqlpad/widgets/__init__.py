"""Widget library for the Textual UI."""

from __future__ import annotations

from .query_pad import QueryPad

__all__ = ["QueryPad"]
