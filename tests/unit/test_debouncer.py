"""Unit tests for the debouncer."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from src.services.debouncer import Debouncer

DELAY = 0.05


class TestDebouncer:
    """Tests for Debouncer scheduling and cancellation."""

    @pytest.mark.asyncio
    async def test_runs_after_delay(self):
        """Callback runs once the quiet period elapses."""
        callback = AsyncMock()
        debouncer = Debouncer(DELAY)

        debouncer.schedule(callback)
        assert debouncer.pending
        callback.assert_not_called()

        await asyncio.sleep(DELAY * 5)

        callback.assert_awaited_once()
        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_rapid_schedules_run_only_last(self):
        """Only the final schedule within the quiet period runs."""
        calls = []
        debouncer = Debouncer(DELAY)

        for text in ["L", "Lo", "Lon", "Lond"]:
            async def record(text=text):
                calls.append(text)

            debouncer.schedule(record)
            await asyncio.sleep(0)

        await asyncio.sleep(DELAY * 5)

        assert calls == ["Lond"]

    @pytest.mark.asyncio
    async def test_cancel_prevents_run(self):
        callback = AsyncMock()
        debouncer = Debouncer(DELAY)

        debouncer.schedule(callback)
        debouncer.cancel()
        await asyncio.sleep(DELAY * 5)

        callback.assert_not_called()
        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_cancel_is_idempotent(self):
        debouncer = Debouncer(DELAY)

        debouncer.cancel()
        debouncer.schedule(AsyncMock())
        debouncer.cancel()
        debouncer.cancel()

        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_cancel_stops_in_flight_callback(self):
        """A callback already running is cancelled before its side effect."""
        started = asyncio.Event()
        results = []

        async def slow_lookup():
            started.set()
            await asyncio.sleep(DELAY * 10)
            results.append("stale")

        debouncer = Debouncer(0)
        debouncer.schedule(slow_lookup)
        await started.wait()

        debouncer.cancel()
        await asyncio.sleep(DELAY * 12)

        assert results == []

    @pytest.mark.asyncio
    async def test_callback_error_is_logged_not_raised(self):
        callback = AsyncMock(side_effect=RuntimeError("boom"))
        debouncer = Debouncer(0)

        task = debouncer.schedule(callback)
        await task

        callback.assert_awaited_once()
        assert task.exception() is None

    @pytest.mark.asyncio
    async def test_aclose_waits_for_cancellation(self):
        callback = AsyncMock()
        debouncer = Debouncer(DELAY)

        task = debouncer.schedule(callback)
        await debouncer.aclose()

        assert task.cancelled()
        callback.assert_not_called()
