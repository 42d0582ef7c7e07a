"""Alpha Vantage TIME_SERIES_INTRADAY payload models and parsing helpers.

Only the fields the quote pipeline needs are mapped; everything else in the
document is ignored.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

INTERVAL = "15min"
TIME_SERIES_KEY = f"Time Series ({INTERVAL})"
META_DATA_KEY = "Meta Data"

# Keys the provider uses to report a problem instead of data
ERROR_KEYS = ("Error Message", "Information")


class PayloadDecodeError(ValueError):
    """Body is not JSON, or its structure can't be mapped onto the document."""


@dataclass(frozen=True, slots=True)
class MetaData:
    information: str | None = None
    symbol: str | None = None
    last_refreshed: str | None = None
    interval: str | None = None
    time_zone: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MetaData:
        return cls(
            information=_opt_str(data.get("1. Information")),
            symbol=_opt_str(data.get("2. Symbol")),
            last_refreshed=_opt_str(data.get("3. Last Refreshed")),
            interval=_opt_str(data.get("4. Interval")),
            time_zone=_opt_str(data.get("6. Time Zone")),
        )


@dataclass(frozen=True, slots=True)
class TimeSeriesEntry:
    """One OHLCV bar. Values stay as the provider's strings until parsed."""

    open: str | None = None
    high: str | None = None
    low: str | None = None
    close: str | None = None
    volume: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimeSeriesEntry:
        return cls(
            open=_opt_str(data.get("1. open")),
            high=_opt_str(data.get("2. high")),
            low=_opt_str(data.get("3. low")),
            close=_opt_str(data.get("4. close")),
            volume=_opt_str(data.get("5. volume")),
        )


@dataclass(frozen=True, slots=True)
class AlphaVantageData:
    """Intraday document: metadata plus timestamp → entry, in provider order.

    A None entry means the provider sent null for that timestamp.
    """

    meta_data: MetaData | None
    time_series: dict[str, TimeSeriesEntry | None] | None

    def latest_entry(self) -> TimeSeriesEntry | None:
        """First entry as given by the provider. Not re-sorted by timestamp."""
        if not self.time_series:
            return None
        return next(iter(self.time_series.values()))


def find_error_message(body: str) -> str | None:
    """Return the provider's error/information message, if the body is one.

    Best effort: a body that isn't a JSON object of strings simply isn't an
    error document.
    """
    try:
        data = json.loads(body)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    for key in ERROR_KEYS:
        message = data.get(key)
        if isinstance(message, str):
            return message
    return None


def parse_document(body: str) -> AlphaVantageData | None:
    """Parse the full intraday document. Returns None for a JSON `null` body.

    Raises PayloadDecodeError if the body isn't JSON or doesn't have the
    document's structure.
    """
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise PayloadDecodeError(f"invalid JSON: {exc}") from exc

    if data is None:
        return None
    if not isinstance(data, dict):
        raise PayloadDecodeError(f"expected a JSON object, got {type(data).__name__}")

    raw_meta = data.get(META_DATA_KEY)
    if raw_meta is not None and not isinstance(raw_meta, dict):
        raise PayloadDecodeError(f"{META_DATA_KEY!r} is not an object")

    raw_series = data.get(TIME_SERIES_KEY)
    if raw_series is not None and not isinstance(raw_series, dict):
        raise PayloadDecodeError(f"{TIME_SERIES_KEY!r} is not an object")

    time_series: dict[str, TimeSeriesEntry | None] | None = None
    if raw_series is not None:
        time_series = {}
        for timestamp, raw_entry in raw_series.items():
            if raw_entry is None:
                time_series[timestamp] = None
            elif isinstance(raw_entry, dict):
                time_series[timestamp] = TimeSeriesEntry.from_dict(raw_entry)
            else:
                raise PayloadDecodeError(f"entry {timestamp!r} is not an object")

    return AlphaVantageData(
        meta_data=MetaData.from_dict(raw_meta) if raw_meta is not None else None,
        time_series=time_series,
    )


def parse_decimal(text: str | None) -> Decimal | None:
    """Parse a price the way the provider formats it, independent of locale.

    Accepts surrounding whitespace and ',' group separators with '.' as the
    decimal point. Returns None for anything else, including NaN/Infinity.
    """
    if text is None:
        return None
    cleaned = text.strip().replace(",", "")
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise PayloadDecodeError(f"expected a string, got {type(value).__name__}")
