"""Stock quotes subsystem.

Public API:
    Quote               - Immutable ticker/price value
    TickerRegistry      - Thread-safe set of watched tickers
    QuoteCache          - TTL cache with get-or-populate
    QuoteSource         - Abstract interface for quote providers
    QuoteService        - Cached Alpha Vantage quote lookups
    QuoteFeed           - Latest quote per watched ticker
    FeedEntry           - A feed quote with its update time
    QuoteFeedUpdater    - Background refresh of every watched ticker
    StocksSettings      - Environment-driven settings
    create_quote_service - Factory wiring settings, cache and HTTP client
    create_stocks_router - FastAPI router factory for the HTTP endpoints
"""

from .cache import QuoteCache
from .factory import create_quote_service
from .feed import FeedEntry, QuoteFeed, QuoteFeedUpdater
from .interface import QuoteSource
from .models import Quote
from .registry import TickerRegistry
from .routes import create_stocks_router
from .service import QuoteService
from .settings import StocksSettings

__all__ = [
    "Quote",
    "TickerRegistry",
    "QuoteCache",
    "QuoteSource",
    "QuoteService",
    "QuoteFeed",
    "FeedEntry",
    "QuoteFeedUpdater",
    "StocksSettings",
    "create_quote_service",
    "create_stocks_router",
]
