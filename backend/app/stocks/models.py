"""Data models for stock quotes."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


@dataclass(frozen=True, slots=True)
class Quote:
    """Immutable latest known high price of a ticker at fetch time."""

    ticker: str
    price: Decimal

    def to_dict(self) -> dict:
        """Serialize for JSON responses. The price is a decimal string so no digits are lost."""
        return {
            "ticker": self.ticker,
            "price": str(self.price),
        }


class FailureKind(str, Enum):
    """Why a fetch produced no quote. Internal only; callers just see None."""

    CONFIG = "config"  # Missing or blank API key
    TRANSPORT = "transport"  # Connection / DNS / protocol-level network error
    TIMEOUT = "timeout"
    PROTOCOL = "protocol"  # Non-success HTTP status
    UPSTREAM = "upstream"  # Provider returned "Error Message" / "Information"
    DECODE = "decode"  # Body is not the expected JSON document
    DATA_SHAPE = "data_shape"  # Metadata or time series missing/empty
    ENTRY = "entry"  # First time series entry is null
    NUMERIC_FORMAT = "numeric_format"  # "high" is not a decimal number
    UNEXPECTED = "unexpected"


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    """Result of one run of the fetch pipeline: a quote or a classified failure."""

    ticker: str
    quote: Quote | None = None
    failure: FailureKind | None = None
    detail: str = ""

    @classmethod
    def success(cls, quote: Quote) -> FetchOutcome:
        return cls(ticker=quote.ticker, quote=quote)

    @classmethod
    def failed(cls, ticker: str, failure: FailureKind, detail: str = "") -> FetchOutcome:
        return cls(ticker=ticker, failure=failure, detail=detail)

    @property
    def ok(self) -> bool:
        return self.quote is not None
