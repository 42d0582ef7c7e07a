"""Fixtures for stocks tests.

The upstream API is faked with ``httpx.MockTransport`` so QuoteService runs its
real HTTP code path without touching the network.
"""

from collections.abc import Callable

import httpx
import pytest

from app.stocks.cache import QuoteCache
from app.stocks.interface import QuoteSource
from app.stocks.models import Quote
from app.stocks.service import QuoteService
from app.stocks.settings import StocksSettings

UPSTREAM_URL = "https://upstream.test/query"


def intraday_payload(high: str | None = "123.45", symbol: str = "AAPL") -> dict:
    """A TIME_SERIES_INTRADAY document whose first entry has the given high."""
    return {
        "Meta Data": {
            "1. Information": "Intraday (15min) open, high, low, close prices and volume",
            "2. Symbol": symbol,
            "3. Last Refreshed": "2024-01-01 16:00:00",
            "4. Interval": "15min",
            "5. Output Size": "Compact",
            "6. Time Zone": "US/Eastern",
        },
        "Time Series (15min)": {
            "2024-01-01 16:00:00": {
                "1. open": "122.00",
                "2. high": high,
                "3. low": "121.50",
                "4. close": "123.00",
                "5. volume": "104233",
            },
            "2024-01-01 15:45:00": {
                "1. open": "120.00",
                "2. high": "130.00",
                "3. low": "119.75",
                "4. close": "121.90",
                "5. volume": "98012",
            },
        },
    }


class FakeUpstream:
    """Request handler for MockTransport that records every request.

    Replace `handler` to change how the upstream answers.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Callable = lambda request: httpx.Response(200, json=intraday_payload())

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        return self.handler(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def respond_json(self, payload, status_code: int = 200) -> None:
        self.handler = lambda request: httpx.Response(status_code, json=payload)

    def respond_text(self, text: str, status_code: int = 200) -> None:
        self.handler = lambda request: httpx.Response(status_code, text=text)


class FakeQuoteSource(QuoteSource):
    """QuoteSource answering from a dict; values may be exceptions to raise."""

    def __init__(self, quotes: dict | None = None) -> None:
        self.quotes = dict(quotes or {})
        self.requested: list[str] = []

    async def get_quote(self, ticker: str) -> Quote | None:
        self.requested.append(ticker)
        result = self.quotes.get(ticker)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def http_client(upstream):
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream))


@pytest.fixture
def settings():
    return StocksSettings(api_key="test-key", base_url=UPSTREAM_URL)


@pytest.fixture
def cache(clock):
    return QuoteCache(clock=clock)


@pytest.fixture
def service(http_client, settings, cache):
    return QuoteService(http_client=http_client, settings=settings, cache=cache)


@pytest.fixture
def make_payload():
    """Builder for intraday documents, see intraday_payload()."""
    return intraday_payload


@pytest.fixture
def make_source():
    """Builder for FakeQuoteSource instances."""
    return FakeQuoteSource
