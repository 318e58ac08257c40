"""Month trade loader for calendar and analytics navigation.

Each ``load`` takes a new generation number. When its fetch resolves the
result is applied only if no newer load has started since; otherwise it
is dropped, so quick month navigation never shows an older month's data.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from src.logging_config import log_performance

logger = logging.getLogger(__name__)

MonthFetcher = Callable[[int, int], Awaitable[list]]


@dataclass
class MonthState:
    year: Optional[int] = None
    month: Optional[int] = None
    trades: list = field(default_factory=list)
    loading: bool = False
    error: Optional[Exception] = None


class MonthlyTradesLoader:
    """Latest-request-wins loader of one month's trades.

    Args:
        fetch: Coroutine function ``fetch(year, month) -> list``.
        on_update: Optional callback invoked with the new state after an
            applied result.

    Example:
        loader = MonthlyTradesLoader(fetch_month)
        await asyncio.gather(loader.load(2024, 2), loader.load(2024, 3))
        loader.state.month  # 3
    """

    def __init__(self, fetch: MonthFetcher, on_update: Optional[Callable[[MonthState], Any]] = None):
        self._fetch = fetch
        self._on_update = on_update
        self._generation = 0
        self.state = MonthState()

    @property
    def generation(self) -> int:
        return self._generation

    @log_performance(threshold_ms=1000)
    async def load(self, year: int, month: int) -> Optional[list]:
        """Fetch a month; returns the trades if applied, None if superseded.

        A failed fetch that is still the latest keeps the previous trades
        and records the error on the state before re-raising.
        """
        self._generation += 1
        generation = self._generation
        self.state.loading = True

        try:
            trades = await self._fetch(year, month)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if generation == self._generation:
                self.state.loading = False
                self.state.error = e
                logger.warning("Month load %04d-%02d failed: %s", year, month, e)
                raise
            logger.debug("Ignoring failure of superseded month load %04d-%02d", year, month)
            return None

        if generation != self._generation:
            logger.debug("Discarding stale month load %04d-%02d (generation %d < %d)",
                         year, month, generation, self._generation)
            return None

        self.state = MonthState(year=year, month=month, trades=list(trades))
        if self._on_update is not None:
            self._on_update(self.state)
        return self.state.trades


def service_month_fetcher(journal_service, user_id: str) -> MonthFetcher:
    """Adapt the synchronous JournalService to the loader's async fetch signature."""

    async def fetch(year: int, month: int) -> list:
        return await asyncio.to_thread(journal_service.get_month_trades, user_id, year, month)

    return fetch
