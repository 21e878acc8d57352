"""Async HTTP client with optional retry logic using httpx and tenacity."""

from typing import Any, Optional

import httpx
import structlog
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import HTTPConfig

logger = structlog.get_logger(__name__)


class AsyncHTTPClient:
    """
    Async HTTP client with connection pooling and configurable retries.

    This client provides a context manager interface for making HTTP requests.
    When ``config.retry.max_attempts`` is greater than one, network errors and
    the configured status codes are retried with exponential backoff;
    with the default of one attempt every request is made exactly once.

    Example:
        >>> import asyncio
        >>> from kidtube.common.config import HTTPConfig
        >>>
        >>> async def main():
        ...     async with AsyncHTTPClient(HTTPConfig(timeout=5)) as client:
        ...         response = await client.get("https://www.youtube.com/oembed")
        ...         print(response.status_code)
        >>>
        >>> asyncio.run(main())
    """

    def __init__(self, config: HTTPConfig):
        """
        Initialize the async HTTP client.

        Args:
            config: HTTPConfig object with client settings
        """
        self.config = config
        self._client: Optional[httpx.AsyncClient] = None
        self.logger = logger.bind(component="http_client")

    async def __aenter__(self) -> "AsyncHTTPClient":
        """Enter async context manager."""
        limits = httpx.Limits(
            max_connections=self.config.max_connections,
            max_keepalive_connections=self.config.max_keepalive_connections,
        )

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(float(self.config.timeout)),
            limits=limits,
            follow_redirects=True,
            max_redirects=self.config.max_redirects,
            verify=self.config.verify_ssl,
        )

        self.logger.debug(
            "http_client_initialized",
            timeout=self.config.timeout,
            max_attempts=self.config.retry.max_attempts,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        if self._client:
            await self._client.aclose()
            self._client = None
            self.logger.debug("http_client_closed")

    def _should_retry_status(self, response: httpx.Response) -> bool:
        """Determine if an HTTP status code should trigger a retry."""
        return (
            self.config.retry.max_attempts > 1
            and response.status_code in self.config.retry.status_codes
        )

    def _log_retry_attempt(self, retry_state: RetryCallState) -> None:
        """Log retry attempts with structured logging."""
        self.logger.warning(
            "http_retry_attempt",
            attempt=retry_state.attempt_number,
            seconds_since_start=round(retry_state.seconds_since_start, 2),
        )

    async def _make_request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an HTTP request, applying the configured retry policy.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            **kwargs: Additional arguments to pass to httpx

        Returns:
            httpx.Response object

        Raises:
            httpx.HTTPStatusError: When a retryable status persists after the last attempt
            httpx.RequestError: On network errors once attempts are exhausted
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async with context manager.")

        retryable_network_exceptions = (
            httpx.TimeoutException,
            httpx.ConnectError,
            httpx.ReadError,
            httpx.WriteError,
            httpx.PoolTimeout,
            httpx.NetworkError,
        )

        def should_retry_http_error(exception: BaseException) -> bool:
            if isinstance(exception, httpx.HTTPStatusError):
                return exception.response.status_code in self.config.retry.status_codes
            return False

        @retry(
            stop=stop_after_attempt(self.config.retry.max_attempts),
            wait=wait_exponential(
                multiplier=self.config.retry.backoff_multiplier,
                min=self.config.retry.min_wait,
                max=self.config.retry.max_wait,
            ),
            retry=(
                retry_if_exception_type(retryable_network_exceptions)
                | retry_if_exception(should_retry_http_error)
            ),
            before_sleep=self._log_retry_attempt,
            reraise=True,
        )
        async def _request() -> httpx.Response:
            response = await self._client.request(method, url, **kwargs)

            if self._should_retry_status(response):
                self.logger.warning(
                    "http_retryable_status",
                    method=method,
                    url=str(url),
                    status_code=response.status_code,
                )
                response.raise_for_status()

            return response

        return await _request()

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """
        Make a GET request.

        Args:
            url: Request URL
            **kwargs: Additional arguments (params, headers, etc.)

        Returns:
            httpx.Response object
        """
        self.logger.debug("http_request", method="GET", url=str(url))
        return await self._make_request_with_retry("GET", url, **kwargs)
