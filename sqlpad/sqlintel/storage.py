"""Key-value stores backing per-connection autocomplete state."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Protocol, runtime_checkable

DEFAULT_STORE_DIR = Path.home() / ".local" / "share" / "sqlpad" / "usage"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal string store; ``get`` returns ``None`` for unknown keys."""

    def get(self, key: str) -> str | None:
        """Return the stored value for ``key``."""

    def set(self, key: str, value: str) -> None:
        """Persist ``value`` under ``key``."""


class MemoryStore:
    """Dict-backed store (tests, or when nothing should touch disk)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class FileStore:
    """Store that keeps one JSON document per key inside ``directory``."""

    def __init__(self, directory: Path | None = None) -> None:
        self._directory = directory or DEFAULT_STORE_DIR

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        """File that holds ``key``; unsafe filename characters become ``_``."""

        return self.directory / f"{_UNSAFE_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> str | None:
        try:
            return self.path_for(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self.path_for(key).write_text(value, encoding="utf-8")


__all__ = ["DEFAULT_STORE_DIR", "FileStore", "KeyValueStore", "MemoryStore"]
