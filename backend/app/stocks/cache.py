"""Thread-safe in-memory TTL cache for quote lookups."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from threading import Lock
from typing import Any

DEFAULT_TTL_SECONDS = 300.0  # 5 minutes, absolute from insertion


class QuoteCache:
    """Key/value store with absolute expiry and get-or-populate semantics.

    Values may be None: a cached None is a real entry (a recent failure) and
    is distinct from a miss.

    Entry storage is guarded by a lock and is safe to share between threads.
    Coalescing of concurrent misses in get_or_create() only applies to callers
    on the same event loop; callers on other loops run their own fetch and the
    last one to finish wins.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[str, tuple[float, Any]] = {}  # key -> (expires_at, value)
        self._lock = Lock()
        self._ttl = default_ttl
        self._clock = clock
        # (loop, key) -> future of the fetch running on that loop
        self._inflight: dict[tuple[asyncio.AbstractEventLoop, str], asyncio.Future] = {}

    def get(self, key: str) -> tuple[bool, Any]:
        """Return (hit, value). Expired entries are dropped and reported as a miss."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False, None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return False, None
            return True, value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store a value that expires `ttl` seconds from now."""
        expires_at = self._clock() + (self._ttl if ttl is None else ttl)
        with self._lock:
            self._entries[key] = (expires_at, value)

    def remove(self, key: str) -> None:
        """Drop an entry, e.g. to force the next lookup to refetch."""
        with self._lock:
            self._entries.pop(key, None)

    async def get_or_create(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl: float | None = None,
    ) -> Any:
        """Return the cached value for `key`, or await `factory()` and cache its result.

        Concurrent misses for the same key share one factory call. If that call
        is cancelled nothing is cached and the waiters try again; if it raises,
        the waiters get the same exception.
        """
        loop = asyncio.get_running_loop()
        inflight_key = (loop, key)
        while True:
            hit, value = self.get(key)
            if hit:
                return value
            with self._lock:
                pending = self._inflight.get(inflight_key)
                if pending is None:
                    future = loop.create_future()
                    self._inflight[inflight_key] = future
                    break
            try:
                return await asyncio.shield(pending)
            except asyncio.CancelledError:
                if pending.cancelled():
                    continue  # The leading call was cancelled, not us
                raise

        try:
            value = await factory()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            future.exception()  # Mark retrieved so an unawaited future doesn't log
            raise
        else:
            self.set(key, value, ttl)
            future.set_result(value)
            return value
        finally:
            with self._lock:
                self._inflight.pop(inflight_key, None)

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(1 for expires_at, _ in self._entries.values() if now < expires_at)

    def __contains__(self, key: str) -> bool:
        return self.get(key)[0]
