"""Tests for latest-request-wins month loading."""

import asyncio

import pytest

from src.journal.loader import MonthlyTradesLoader, service_month_fetcher


class ControlledFetch:
    """Fetch whose per-month results are released by the test."""

    def __init__(self):
        self.events: dict[tuple[int, int], asyncio.Event] = {}
        self.results: dict[tuple[int, int], object] = {}
        self.calls: list[tuple[int, int]] = []

    def release(self, year, month, result):
        self.results[(year, month)] = result
        self.events.setdefault((year, month), asyncio.Event()).set()

    async def __call__(self, year, month):
        self.calls.append((year, month))
        event = self.events.setdefault((year, month), asyncio.Event())
        await event.wait()
        result = self.results[(year, month)]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.mark.asyncio
class TestMonthlyTradesLoader:
    async def test_single_load_applies(self):
        fetch = ControlledFetch()
        loader = MonthlyTradesLoader(fetch)
        fetch.release(2024, 3, ["a", "b"])
        assert await loader.load(2024, 3) == ["a", "b"]
        assert (loader.state.year, loader.state.month) == (2024, 3)
        assert loader.state.loading is False

    async def test_older_response_arriving_last_is_discarded(self):
        fetch = ControlledFetch()
        updates = []
        loader = MonthlyTradesLoader(fetch, on_update=updates.append)

        feb = asyncio.create_task(loader.load(2024, 2))
        mar = asyncio.create_task(loader.load(2024, 3))
        await asyncio.sleep(0)

        fetch.release(2024, 3, ["march"])
        assert await mar == ["march"]
        fetch.release(2024, 2, ["february"])
        assert await feb is None

        assert loader.state.month == 3
        assert loader.state.trades == ["march"]
        assert len(updates) == 1

    async def test_superseded_failure_is_swallowed(self):
        fetch = ControlledFetch()
        loader = MonthlyTradesLoader(fetch)

        feb = asyncio.create_task(loader.load(2024, 2))
        mar = asyncio.create_task(loader.load(2024, 3))
        await asyncio.sleep(0)

        fetch.release(2024, 2, RuntimeError("timeout"))
        assert await feb is None
        fetch.release(2024, 3, ["march"])
        assert await mar == ["march"]
        assert loader.state.error is None

    async def test_latest_failure_keeps_previous_trades(self):
        fetch = ControlledFetch()
        loader = MonthlyTradesLoader(fetch)
        fetch.release(2024, 2, ["february"])
        await loader.load(2024, 2)

        fetch.release(2024, 3, RuntimeError("boom"))
        with pytest.raises(RuntimeError):
            await loader.load(2024, 3)

        assert loader.state.trades == ["february"]
        assert isinstance(loader.state.error, RuntimeError)
        assert loader.state.loading is False

    async def test_generation_increments(self):
        fetch = ControlledFetch()
        loader = MonthlyTradesLoader(fetch)
        fetch.release(2024, 1, [])
        await loader.load(2024, 1)
        await loader.load(2024, 1)
        assert loader.generation == 2

    async def test_service_fetcher_runs_sync_service(self):
        class Journal:
            def get_month_trades(self, user_id, year, month):
                return [(user_id, year, month)]

        fetch = service_month_fetcher(Journal(), "user-1")
        assert await fetch(2024, 3) == [("user-1", 2024, 3)]
