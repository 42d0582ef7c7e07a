"""Alpha Vantage backed quote service with a cache-aside lookup."""

from __future__ import annotations

import logging
from collections import Counter

import httpx

from .alpha_vantage import (
    INTERVAL,
    PayloadDecodeError,
    parse_decimal,
    parse_document,
    find_error_message,
)
from .cache import QuoteCache
from .interface import QuoteSource
from .models import FailureKind, FetchOutcome, Quote
from .settings import StocksSettings

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 300.0


def cache_key(ticker: str) -> str:
    return f"stocks-{ticker}"


class QuoteService(QuoteSource):
    """QuoteSource backed by the Alpha Vantage TIME_SERIES_INTRADAY endpoint.

    Every lookup goes through the QuoteCache first. On a miss one fetch runs
    and its result is cached for 5 minutes, including a None result, so a
    failing ticker is not retried until the entry expires.

    The fetch is a chain of validation gates. Each gate that fails logs its own
    reason and bumps `failure_counts[kind]`, but the caller only ever sees None.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: StocksSettings,
        cache: QuoteCache,
    ) -> None:
        self._http = http_client
        self._settings = settings
        self._cache = cache
        self.failure_counts: Counter[FailureKind] = Counter()

    async def get_quote(self, ticker: str) -> Quote | None:
        logger.info("Getting stock price information for %s", ticker)

        quote = await self._cache.get_or_create(
            cache_key(ticker),
            lambda: self._get_stock_price(ticker),
            ttl=CACHE_TTL_SECONDS,
        )

        if quote is None:
            logger.warning("Failed to get stock price information for %s", ticker)
        else:
            logger.info("Completed getting stock price information for %s: %s", ticker, quote)
        return quote

    # --- Internal ---

    async def _get_stock_price(self, ticker: str) -> Quote | None:
        outcome = await self._fetch(ticker)
        if not outcome.ok:
            self.failure_counts[outcome.failure] += 1
        return outcome.quote

    async def _fetch(self, ticker: str) -> FetchOutcome:
        """Run the fetch pipeline once. Never raises except on cancellation."""
        if not self._settings.has_api_key:
            logger.error("API key is missing or invalid.")
            return FetchOutcome.failed(ticker, FailureKind.CONFIG, "missing API key")

        try:
            return await self._request(ticker)
        except httpx.TimeoutException as e:
            logger.error("HTTP request timed out for %s: %s", ticker, e)
            return FetchOutcome.failed(ticker, FailureKind.TIMEOUT, str(e))
        except httpx.HTTPError as e:
            logger.error("HTTP request error for %s: %s", ticker, e)
            return FetchOutcome.failed(ticker, FailureKind.TRANSPORT, str(e))
        except Exception as e:
            logger.exception("Unexpected error for %s", ticker)
            return FetchOutcome.failed(ticker, FailureKind.UNEXPECTED, str(e))

    async def _request(self, ticker: str) -> FetchOutcome:
        response = await self._http.get(
            self._settings.base_url,
            params={
                "function": "TIME_SERIES_INTRADAY",
                "symbol": ticker,
                "interval": INTERVAL,
                "apikey": self._settings.api_key,
            },
        )

        if not response.is_success:
            logger.warning("HTTP error for %s: %d", ticker, response.status_code)
            return FetchOutcome.failed(ticker, FailureKind.PROTOCOL, str(response.status_code))

        body = response.text
        logger.debug("API response for %s: %s", ticker, body)

        error_message = find_error_message(body)
        if error_message is not None:
            logger.warning("API error for %s: %s", ticker, error_message)
            return FetchOutcome.failed(ticker, FailureKind.UPSTREAM, error_message)

        try:
            data = parse_document(body)
        except PayloadDecodeError as e:
            logger.error("Deserialization error for %s: %s", ticker, e)
            return FetchOutcome.failed(ticker, FailureKind.DECODE, str(e))

        if data is None or data.meta_data is None or not data.time_series:
            logger.warning("No valid time series data for %s", ticker)
            return FetchOutcome.failed(ticker, FailureKind.DATA_SHAPE)

        entry = data.latest_entry()
        if entry is None:
            logger.warning("No valid time series entry for %s", ticker)
            return FetchOutcome.failed(ticker, FailureKind.ENTRY)

        high = parse_decimal(entry.high)
        if high is None:
            logger.warning("Failed to parse high price for %s: %r", ticker, entry.high)
            return FetchOutcome.failed(ticker, FailureKind.NUMERIC_FORMAT, str(entry.high))

        return FetchOutcome.success(Quote(ticker=ticker, price=high))
