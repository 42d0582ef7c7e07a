"""Environment-driven settings for the stocks subsystem."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.alphavantage.co/query"
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_UPDATE_INTERVAL = 5.0


@dataclass(frozen=True, slots=True)
class StocksSettings:
    """Settings read once at startup.

    - STOCKS_API_KEY:          upstream API key (blank → every fetch fails fast)
    - STOCKS_BASE_URL:         upstream query endpoint
    - STOCKS_REQUEST_TIMEOUT:  per-request timeout in seconds
    - STOCKS_UPDATE_INTERVAL:  feed refresh period in seconds
    """

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    update_interval: float = DEFAULT_UPDATE_INTERVAL

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> StocksSettings:
        env = os.environ if environ is None else environ
        return cls(
            api_key=env.get("STOCKS_API_KEY", "").strip(),
            base_url=env.get("STOCKS_BASE_URL", "").strip() or DEFAULT_BASE_URL,
            request_timeout=_read_float(env, "STOCKS_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
            update_interval=_read_float(env, "STOCKS_UPDATE_INTERVAL", DEFAULT_UPDATE_INTERVAL),
        )


def _read_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive, using %s", name, raw, default)
        return default
    return value
