"""Tests for the keystroke debouncer."""

from __future__ import annotations

import asyncio

import pytest

from sqlpad.sqlintel.debounce import Debouncer


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.mark.anyio
async def test_only_last_submission_runs() -> None:
    calls: list[int] = []
    debouncer = Debouncer(0.01)

    for value in range(3):

        async def _record(value: int = value) -> None:
            calls.append(value)

        debouncer.submit(_record)

    await asyncio.sleep(0.05)

    assert calls == [2]
    assert debouncer.pending is False


@pytest.mark.anyio
async def test_cancel_drops_pending_call() -> None:
    calls: list[str] = []
    debouncer = Debouncer(0.01)

    async def _record() -> None:
        calls.append("ran")

    debouncer.submit(_record)
    assert debouncer.pending is True
    debouncer.cancel()
    await asyncio.sleep(0.03)

    assert calls == []


@pytest.mark.anyio
async def test_failures_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    debouncer = Debouncer(0)

    async def _boom() -> None:
        raise RuntimeError("boom")

    debouncer.submit(_boom)
    await asyncio.sleep(0.01)

    assert "Debounced completion refresh failed" in caplog.text
    assert Debouncer(-1).delay == 0.0
