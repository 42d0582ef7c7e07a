"""Application entry point.

Composes the stocks subsystem once at startup and hands each object to the
code that needs it.

Run locally:
    uvicorn app.main:create_app --factory --app-dir backend
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from .stocks import (
    QuoteCache,
    QuoteFeed,
    QuoteFeedUpdater,
    StocksSettings,
    TickerRegistry,
    create_quote_service,
    create_stocks_router,
)
from .stocks.factory import create_http_client

logger = logging.getLogger(__name__)


def create_app(
    settings: StocksSettings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the FastAPI app. Settings default to the process environment.

    An `http_client` passed in stays open on shutdown; the caller closes it.
    """
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = settings or StocksSettings.from_env()
    owns_client = http_client is None
    if owns_client:
        http_client = create_http_client(settings)

    registry = TickerRegistry()
    service = create_quote_service(settings, QuoteCache(), http_client=http_client)
    feed = QuoteFeed()
    updater = QuoteFeedUpdater(
        registry=registry,
        source=service,
        feed=feed,
        update_interval=settings.update_interval,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await updater.start()
        try:
            yield
        finally:
            await updater.stop()
            if owns_client:
                await http_client.aclose()
            logger.info("Shutdown complete")

    app = FastAPI(title="Stock Quotes API", lifespan=lifespan)
    app.state.registry = registry
    app.state.quote_service = service
    app.state.quote_feed = feed
    app.include_router(create_stocks_router(registry, service, feed))

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    return app
