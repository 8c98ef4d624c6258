"""Async debounce helper used by the query pad to coalesce keystrokes."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

LOG = logging.getLogger(__name__)


class Debouncer:
    """Runs only the last coroutine submitted within ``delay`` seconds."""

    def __init__(self, delay: float = 0.15) -> None:
        self._delay = max(0.0, delay)
        self._task: asyncio.Task[Any] | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """Whether a submitted call is still waiting or running."""

        return self._task is not None and not self._task.done()

    def submit(self, coro_factory: Callable[[], Awaitable[Any]]) -> None:
        """Schedule ``coro_factory``; a stale pending call is cancelled first."""

        self.cancel()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._runner(coro_factory))

    def cancel(self) -> None:
        if self._task:
            self._task.cancel()
            self._task = None

    async def _runner(self, coro_factory: Callable[[], Awaitable[Any]]) -> None:
        try:
            await asyncio.sleep(self._delay)
            await coro_factory()
        except asyncio.CancelledError:
            return
        except Exception:
            LOG.exception("Debounced completion refresh failed")


__all__ = ["Debouncer"]
