import inspect
from abc import ABC, abstractmethod
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Awaitable, Callable, Iterator, Optional, Union

import logging
import structlog

_logger = logging.getLogger(__name__)
log = structlog.wrap_logger(_logger)

TokenGetter = Callable[[], Union[Optional[str], Awaitable[Optional[str]]]]

# Token of the request currently being served, if the host framework bound one
_current_token: ContextVar[Optional[str]] = ContextVar("broker_integrator_auth_token")


class AuthStrategy(ABC):
    """Abstract base class for token providers

    Authentication at this layer is best-effort: a provider that cannot produce
    a token returns None and the request goes out unauthenticated.
    """

    async def get_auth_token(self) -> Optional[str]:
        try:
            token = await self._fetch_token()
        except Exception as e:
            log.warning("Failed to get auth token", strategy=type(self).__name__, error=str(e))
            return None
        return token or None

    @abstractmethod
    async def _fetch_token(self) -> Optional[str]:
        """Return the bearer token for the current context"""
        pass


class NoAuth(AuthStrategy):
    """No authentication strategy."""

    async def _fetch_token(self) -> Optional[str]:
        return None


class TokenAuth(AuthStrategy):
    """Fixed token, e.g. a service credential"""

    def __init__(self, token: Optional[str]):
        self.__token = token

    async def _fetch_token(self) -> Optional[str]:
        return self.__token


class CallableTokenAuth(AuthStrategy):
    """Asks an identity service hook for a token on every request"""

    def __init__(self, get_token: TokenGetter):
        self._get_token = get_token

    async def _fetch_token(self) -> Optional[str]:
        token = self._get_token()
        if inspect.isawaitable(token):
            token = await token
        return token


class ContextTokenAuth(AuthStrategy):
    """Reads the token bound to the current execution context by request_token()"""

    async def _fetch_token(self) -> Optional[str]:
        try:
            return _current_token.get()
        except LookupError:
            raise LookupError("no auth token bound to the current context") from None


@contextmanager
def request_token(token: Optional[str]) -> Iterator[None]:
    """Bind a token to the current context for the duration of the block"""
    reset_token = _current_token.set(token)
    try:
        yield
    finally:
        _current_token.reset(reset_token)
