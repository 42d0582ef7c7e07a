"""Abstract interface for quote sources."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import Quote


class QuoteSource(ABC):
    """Contract for anything that can resolve a ticker to its latest quote.

    The feed updater and HTTP routes depend on this, not on a concrete client.

    Usage:
        quote = await source.get_quote("AAPL")
        if quote is None:
            ...  # nothing available right now; try again later
    """

    @abstractmethod
    async def get_quote(self, ticker: str) -> Quote | None:
        """Return the latest quote for `ticker`, or None if none is available.

        Must not raise for upstream, network or data problems: those are
        logged and reported as None. Cancellation still propagates.
        """
