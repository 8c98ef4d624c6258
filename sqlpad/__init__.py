"""sqlpad: a terminal SQL editor with context-aware autocomplete."""

__version__ = "0.1.0"
