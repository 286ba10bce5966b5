import asyncio
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx
from tenacity import AsyncRetrying, RetryCallState, RetryError, retry_if_exception_type, stop_after_attempt, wait_incrementing

from .exceptions import NetworkError

import logging
import structlog

_logger = logging.getLogger(__name__)
log = structlog.wrap_logger(_logger)

T = TypeVar("T")

# Connection failures, resets and per-attempt timeouts. An HTTP response of any
# status is a definite answer and is never retried.
TRANSIENT_ERRORS = (httpx.TransportError,)


class RetryExecutor:
    """
    Runs an attempt coroutine until it succeeds, fails permanently, or runs out of attempts.

    Attempt N that fails with a transport error is followed by a sleep of
    retry_delay * N seconds (linear backoff). Any other exception, ApiError
    included, propagates from the attempt that raised it.
    """

    def __init__(self, max_retries: int, retry_delay: float, sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep, logger=None):
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if retry_delay < 0:
            raise ValueError("retry_delay must not be negative")
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._sleep = sleep
        self._log = logger or log
        self.total_attempts = 0
        self.total_retries = 0

    def _retrying(self, logger) -> AsyncRetrying:
        def before_sleep(retry_state: RetryCallState):
            self.total_retries += 1
            error = retry_state.outcome.exception()
            logger.warning(
                f"Connection error occurred: {error}. Retry {retry_state.attempt_number}/{self.max_retries - 1}.",
                attempt=retry_state.attempt_number,
                max_retries=self.max_retries,
                delay=retry_state.next_action.sleep,
            )

        return AsyncRetrying(
            sleep=self._sleep,
            stop=stop_after_attempt(self.max_retries),
            wait=wait_incrementing(start=self.retry_delay, increment=self.retry_delay),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            before_sleep=before_sleep,
        )

    async def execute(self, attempt: Callable[[], Awaitable[T]], logger=None) -> T:
        logger = logger or self._log
        try:
            async for attempt_state in self._retrying(logger):
                with attempt_state:
                    self.total_attempts += 1
                    result = await attempt()
        except RetryError as e:
            last_error: Optional[BaseException] = e.last_attempt.exception()
            logger.error(f"Exceeded maximum retries ({self.max_retries})", error=str(last_error))
            raise NetworkError(str(last_error) or "Network request failed") from last_error
        return result
