"""Factory for creating the quote service."""

from __future__ import annotations

import logging

import httpx

from .cache import QuoteCache
from .service import QuoteService
from .settings import StocksSettings

logger = logging.getLogger(__name__)


def create_http_client(settings: StocksSettings) -> httpx.AsyncClient:
    """HTTP client for the upstream API with an explicit request timeout."""
    return httpx.AsyncClient(timeout=settings.request_timeout)


def create_quote_service(
    settings: StocksSettings,
    cache: QuoteCache,
    http_client: httpx.AsyncClient | None = None,
) -> QuoteService:
    """Create the quote service from settings.

    A blank API key is not fatal: the service is still created, and every
    fetch fails fast (without a network call) until a key is configured.

    The caller owns the HTTP client and must `await client.aclose()` on shutdown.
    """
    if settings.has_api_key:
        logger.info("Quote source: Alpha Vantage at %s", settings.base_url)
    else:
        logger.warning("Quote source: STOCKS_API_KEY is not set, quotes will be unavailable")

    return QuoteService(
        http_client=http_client or create_http_client(settings),
        settings=settings,
        cache=cache,
    )
