import functools

from tenacity import AsyncRetrying, wait_incrementing, stop_after_attempt

import logging
import structlog

_logger = logging.getLogger(__name__)
log = structlog.wrap_logger(_logger)


def with_retries(max_retries: int = 3, delay: float = 1.0):
    """
    Decorator for coroutine functions: retry on any exception with linear backoff.

    Unlike the client's own retry loop this does not distinguish failure kinds;
    it is meant for wrapping whole call sites. The last exception is re-raised.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            retrying = AsyncRetrying(
                stop=stop_after_attempt(max_retries + 1),
                wait=wait_incrementing(start=delay, increment=delay),
                reraise=True,
            )
            return await retrying(func, *args, **kwargs)
        return wrapper
    return decorator


def with_error_handling(fallback=None):
    """Decorator for coroutine functions: log any failure and return the fallback instead"""
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                log.error("API call failed", call=func.__name__, error=str(e), error_type=type(e).__name__)
                return fallback
        return wrapper
    return decorator
