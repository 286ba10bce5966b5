import asyncio
import time
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

import logging
import structlog

_logger = logging.getLogger(__name__)
log = structlog.wrap_logger(_logger)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 5 * 60


class TTLCache(Generic[T]):
    """
    Single-value cache with an expiry.

    Owned by whichever component needs it and handed to it explicitly, so
    nothing is shared between callers unless they share the instance.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._value: Optional[T] = None
        self._stored_at: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def is_fresh(self) -> bool:
        return self._stored_at is not None and (self._clock() - self._stored_at) < self.ttl_seconds

    def get(self) -> Optional[T]:
        if not self.is_fresh:
            return None
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        self._stored_at = self._clock()

    def invalidate(self) -> None:
        self._value = None
        self._stored_at = None

    async def get_or_load(self, loader: Callable[[], Awaitable[T]]) -> T:
        """Return the cached value, calling loader once if it is missing or stale"""
        if self.is_fresh:
            return self._value
        async with self._lock:
            # Another task may have loaded while we waited
            if self.is_fresh:
                return self._value
            log.debug("Cache miss; loading", ttl_seconds=self.ttl_seconds)
            value = await loader()
            self.set(value)
            return value
