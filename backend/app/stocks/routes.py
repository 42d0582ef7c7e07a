"""HTTP routes for watching tickers and reading quotes."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from .feed import QuoteFeed
from .interface import QuoteSource
from .registry import TickerRegistry


def normalize_ticker(ticker: str) -> str:
    return ticker.strip().upper()


def create_stocks_router(
    registry: TickerRegistry,
    source: QuoteSource,
    feed: QuoteFeed,
) -> APIRouter:
    """Create the stocks router with references to its collaborators.

    This factory pattern lets us inject the registry and quote source without globals.
    Tickers are normalized (stripped, upper-cased) here, before they reach them.
    """
    router = APIRouter(prefix="/api", tags=["stocks"])

    @router.post("/tickers/{ticker}", status_code=status.HTTP_201_CREATED)
    async def watch_ticker(ticker: str) -> dict:
        """Register interest in a ticker so the feed keeps its quote fresh."""
        ticker = normalize_ticker(ticker)
        if not ticker:
            raise HTTPException(status_code=422, detail="Ticker must not be blank")
        registry.add(ticker)
        return {"ticker": ticker}

    @router.get("/tickers")
    async def list_tickers() -> dict:
        """Every watched ticker."""
        return {"tickers": registry.snapshot()}

    @router.get("/stocks")
    async def latest_quotes() -> dict:
        """Latest quotes collected by the feed for every watched ticker."""
        entries = feed.get_all()
        return {"quotes": {ticker: entry.to_dict() for ticker, entry in entries.items()}}

    @router.get("/stocks/{ticker}")
    async def get_quote(ticker: str) -> dict:
        """Current quote for one ticker, served from the cache when fresh. 404 if unavailable."""
        ticker = normalize_ticker(ticker)
        quote = await source.get_quote(ticker)
        if quote is None:
            raise HTTPException(
                status_code=404,
                detail=f"No stock data available for ticker: {ticker}",
            )
        return quote.to_dict()

    return router
