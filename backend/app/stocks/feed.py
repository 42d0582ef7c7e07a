"""Background refresh of quotes for every watched ticker."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

from .interface import QuoteSource
from .models import Quote
from .registry import TickerRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FeedEntry:
    """A quote on the feed and when it was stored (Unix seconds)."""

    quote: Quote
    updated_at: float

    def to_dict(self) -> dict:
        return {**self.quote.to_dict(), "updated_at": self.updated_at}


class QuoteFeed:
    """Thread-safe board of the latest successfully fetched quote per ticker.

    Writer: QuoteFeedUpdater.
    Readers: HTTP routes.

    A ticker whose refreshes keep failing keeps its last quote, so readers
    should look at `updated_at` to judge how stale it is.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._entries: dict[str, FeedEntry] = {}
        self._clock = clock
        self._lock = Lock()
        self._version: int = 0  # Bumped on every update

    def update(self, quote: Quote) -> None:
        entry = FeedEntry(quote=quote, updated_at=self._clock())
        with self._lock:
            self._entries[quote.ticker] = entry
            self._version += 1

    def get(self, ticker: str) -> FeedEntry | None:
        with self._lock:
            return self._entries.get(ticker)

    def get_all(self) -> dict[str, FeedEntry]:
        """Snapshot of all current entries. Returns a shallow copy."""
        with self._lock:
            return dict(self._entries)

    @property
    def version(self) -> int:
        return self._version

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class QuoteFeedUpdater:
    """Polls the quote source for every ticker in the registry.

    Runs a background asyncio task that refreshes all registered tickers every
    `update_interval` seconds and writes successful quotes to the QuoteFeed.
    The quote source's own cache decides how often the upstream is really hit.
    """

    def __init__(
        self,
        registry: TickerRegistry,
        source: QuoteSource,
        feed: QuoteFeed,
        update_interval: float = 5.0,
    ) -> None:
        self._registry = registry
        self._source = source
        self._feed = feed
        self._interval = update_interval
        self._task: asyncio.Task | None = None

    async def start(self) -> None:
        # Immediate first refresh so the feed has data right away
        await self.refresh_once()

        self._task = asyncio.create_task(self._run_loop(), name="quote-feed-updater")
        logger.info("Quote feed updater started: %.1fs interval", self._interval)

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Quote feed updater stopped")

    async def refresh_once(self) -> int:
        """Refresh every registered ticker once. Returns how many quotes were updated."""
        tickers = self._registry.snapshot()
        if not tickers:
            return 0

        results = await asyncio.gather(
            *(self._source.get_quote(ticker) for ticker in tickers),
            return_exceptions=True,
        )
        updated = 0
        for ticker, result in zip(tickers, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, Exception):
                logger.error("Refreshing %s failed: %s", ticker, result)
            elif result is not None:
                self._feed.update(result)
                updated += 1
        logger.debug("Quote feed refresh: updated %d/%d tickers", updated, len(tickers))
        return updated

    async def _run_loop(self) -> None:
        """Refresh on interval. First refresh already happened in start()."""
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.refresh_once()
            except Exception:
                logger.exception("Quote feed refresh failed")
