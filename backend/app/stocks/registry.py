"""Thread-safe registry of the tickers clients are watching."""

from __future__ import annotations

import logging
from threading import Lock

logger = logging.getLogger(__name__)


class TickerRegistry:
    """Deduplicated set of watched ticker symbols.

    Writers: HTTP routes registering interest (any thread, any number).
    Readers: QuoteFeedUpdater enumerating tickers to refresh.

    Symbols are compared by exact string equality. No normalization happens
    here, and there is no removal: the set only grows for the life of the
    process.
    """

    def __init__(self) -> None:
        # dict preserves insertion order and gives O(1) membership checks
        self._tickers: dict[str, None] = {}
        self._lock = Lock()

    def add(self, ticker: str) -> None:
        """Register a ticker. No-op if already present."""
        with self._lock:
            if ticker in self._tickers:
                return
            self._tickers[ticker] = None
        logger.info("Registered ticker %r", ticker)

    def snapshot(self) -> list[str]:
        """Point-in-time copy of all registered tickers. Order is not guaranteed."""
        with self._lock:
            return list(self._tickers)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tickers)

    def __contains__(self, ticker: str) -> bool:
        with self._lock:
            return ticker in self._tickers
