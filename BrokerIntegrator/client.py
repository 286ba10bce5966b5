import asyncio
import os
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Type

import httpx
from pydantic import BaseModel

from .auth import AuthStrategy, NoAuth
from .config import ClientConfig
from .exceptions import NetworkError
from .logging_config import configure_structlog
from .request import RequestDescriptor, build_headers, build_url
from .response import APIResponse, decode
from .retry import RetryExecutor

import logging
import structlog

# Configure logging
_logger = logging.getLogger(__name__)
log = structlog.wrap_logger(_logger)


class ServerApiClient:
    """Server-side client for the REST backend"""
    auth_strategy: AuthStrategy
    response_model: Optional[Type[BaseModel]] = None
    __total_requests: int = 0

    def __init__(self,
                 *,  # Force key-value pairs for input
                 config: Optional[ClientConfig] = None,
                 auth_strategy: Optional[AuthStrategy] = None,
                 response_model: Optional[Type[BaseModel]] = None,
                 http_client: Optional[httpx.AsyncClient] = None,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
                 verbose: bool = False,
                 ):
        self.config = config or ClientConfig()
        self.auth_strategy = auth_strategy or NoAuth()
        self.response_model = response_model
        self.verbose = verbose
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(
            timeout=self.config.timeout_seconds, verify=self.config.verify_ssl, follow_redirects=True)
        self.retry_executor = RetryExecutor(
            max_retries=self.config.max_retries, retry_delay=self.config.retry_delay_seconds, sleep=sleep)

    @classmethod
    def from_env(cls, **kwargs) -> 'ServerApiClient':
        """Client configured from API_* environment variables"""
        configure_structlog(os.getenv("API_LOG_LEVEL", "WARNING"))
        return cls(config=ClientConfig.from_env(), **kwargs)

    async def __aenter__(self) -> 'ServerApiClient':
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        await self.aclose()

    async def aclose(self):
        if self._owns_client and not self.client.is_closed:
            await self.client.aclose()

    @property
    def total_requests(self) -> int:
        return self.__total_requests

    @property
    def total_retried_requests(self) -> int:
        return self.retry_executor.total_retries

    def log_verbose(self, msg, logger=None, **kwargs):
        if not logger:
            logger = log
        if self.verbose:
            logger.debug(msg, **kwargs)

    async def build_headers(self, extra_headers: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Default headers plus a freshly fetched bearer token, when there is one"""
        token = await self.auth_strategy.get_auth_token()
        return build_headers(token, default_headers=self.config.default_headers, extra_headers=extra_headers)

    async def _perform_request(self, request: httpx.Request) -> httpx.Response:
        """
        Helper function to send the HTTP request.

        Redirects are followed, so the status seen here is the final one. httpx
        only bounds each connect/read/write phase, so the whole attempt is also
        capped at timeout_ms; overrunning it raises httpx.TimeoutException.
        """
        try:
            return await asyncio.wait_for(
                self.client.send(request, follow_redirects=True), timeout=self.config.timeout_seconds)
        except asyncio.TimeoutError:
            raise httpx.TimeoutException(
                f"Request exceeded {self.config.timeout_ms}ms", request=request) from None

    async def execute(self, descriptor: RequestDescriptor, response_model: Optional[Type[BaseModel]] = None) -> Any:
        """
        Send a request, retrying transient failures, and return the decoded JSON body.

        Args:
            descriptor (RequestDescriptor): Method, path, optional body, extra headers and query params.
            response_model (Optional[Type[BaseModel]], optional): Model to shape the result into. Defaults to the client's.

        Returns:
            Any: The parsed JSON body, shaped by response_model when one is given.

        Raises:
            ApiError: The server answered with a non-2xx status. Raised on the first such answer.
            NetworkError: Every attempt failed at the transport level (connection, reset, timeout).
            ValueError: A 2xx response carried a body that is not valid JSON.
        """
        url = build_url(self.config.base_url, descriptor.path)
        __logger = log.new(method=descriptor.method, url=url)
        __logger.debug("Sending request")
        self.__total_requests += 1

        headers = await self.build_headers(descriptor.extra_headers)
        request = self.client.build_request(
            method=descriptor.method,
            url=url,
            content=descriptor.content,
            params=descriptor.params,
            headers=headers,
            timeout=self.config.timeout_seconds,
        )

        async def attempt() -> APIResponse:
            response = await self._perform_request(request)
            self.log_verbose("Received response", status_code=response.status_code, logger=__logger)
            response_obj = APIResponse(response)
            if not response_obj.is_success:
                api_error = response_obj.to_api_error()
                __logger.warning("API error", status_code=api_error.status_code, message=api_error.message)
                raise api_error
            return response_obj

        response_obj = await self.retry_executor.execute(attempt, logger=__logger)
        data = await response_obj.parse_content()
        return decode(data, response_model or self.response_model)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs):
        """Send a GET request"""
        return await self._send("GET", path, params=params, **kwargs)

    async def post(self, path: str, data: Any = None, **kwargs):
        """Send a POST request"""
        return await self._send("POST", path, body=data, **kwargs)

    async def put(self, path: str, data: Any = None, **kwargs):
        """Send a PUT request"""
        return await self._send("PUT", path, body=data, **kwargs)

    async def patch(self, path: str, data: Any = None, **kwargs):
        """Send a PATCH request"""
        return await self._send("PATCH", path, body=data, **kwargs)

    async def delete(self, path: str, **kwargs):
        """Send a DELETE request"""
        return await self._send("DELETE", path, **kwargs)

    async def _send(self, method: str, path: str, body: Any = None, params: Optional[Dict[str, Any]] = None,
                    headers: Optional[Dict[str, str]] = None, response_model: Optional[Type[BaseModel]] = None):
        descriptor = RequestDescriptor(method=method, path=path, body=body, extra_headers=dict(headers or {}), params=params)
        return await self.execute(descriptor, response_model=response_model)

    async def post_form_data(self, path: str, data: Optional[Dict[str, Any]] = None, files: Any = None,
                             response_model: Optional[Type[BaseModel]] = None) -> Any:
        """
        Upload multipart form data. Single attempt: uploads are not retried.

        httpx sets the multipart Content-Type with its boundary, so only the
        bearer token and configured default headers are added here.
        """
        url = build_url(self.config.base_url, path)
        __logger = log.new(method="POST", url=url, multipart=True)
        __logger.debug("Sending form data")
        self.__total_requests += 1

        token = await self.auth_strategy.get_auth_token()
        headers = dict(self.config.default_headers)
        headers.pop("Content-Type", None)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        request = self.client.build_request(
            method="POST", url=url, data=data, files=files, headers=headers, timeout=self.config.timeout_seconds)

        try:
            response = await self._perform_request(request)
        except httpx.TransportError as e:
            __logger.error("Upload failed", error=str(e))
            raise NetworkError(str(e) or "Network request failed") from e

        response_obj = APIResponse(response)
        if not response_obj.is_success:
            raise response_obj.to_api_error()
        return decode(await response_obj.parse_content(), response_model or self.response_model)
