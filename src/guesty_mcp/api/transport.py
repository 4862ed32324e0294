"""Shared HTTP transport with connection pooling and retry.

All outbound traffic, token requests included, goes through one
``httpx.AsyncClient`` so connections to the Guesty host are kept alive
between calls. Requests that fail without a response, or with status 429
or 5xx, are retried with exponential backoff.
"""

import asyncio
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_BASE = 0.1  # seconds
RETRY_STATUS_CODES = frozenset({429})


def is_retryable_status(status_code: int) -> bool:
    """Check whether an HTTP status should be retried."""
    return status_code in RETRY_STATUS_CODES or status_code >= 500


def backoff_delay(attempt: int, base: float = DEFAULT_BACKOFF_BASE) -> float:
    """Exponential delay before retry number ``attempt`` (1-based)."""
    return base * (2**attempt)


class ResilientTransport:
    """Keep-alive HTTP client with retry on transient failures.

    Attributes:
        base_url: Base URL prepended to relative request paths.
        max_retries: Additional attempts after the first one.
        backoff_base: Base delay in seconds for exponential backoff.

    Example:
        ```python
        async with ResilientTransport("https://open-api.guesty.com/v1") as transport:
            response = await transport.request("GET", "/listings")
        ```
    """

    def __init__(
        self,
        base_url: str,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_base: float = DEFAULT_BACKOFF_BASE,
        timeout: httpx.Timeout | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            base_url: Base URL for relative paths.
            max_retries: Retry attempts after the initial request.
            backoff_base: Base delay for exponential backoff, in seconds.
            timeout: Socket timeouts. Defaults to 30s (10s connect).
            transport: Optional httpx transport, used by tests to mock traffic.
        """
        self.base_url = base_url
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self._client = httpx.AsyncClient(
            base_url=base_url,
            http2=True,
            limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            timeout=timeout or httpx.Timeout(30.0, connect=10.0),
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    async def __aenter__(self) -> "ResilientTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close pooled connections."""
        await self._client.aclose()

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, retrying transient failures.

        Args:
            method: HTTP method.
            url: Absolute URL or path relative to ``base_url``.
            **kwargs: Passed through to ``httpx.AsyncClient.request``.

        Returns:
            Successful (2xx) response.

        Raises:
            httpx.HTTPStatusError: Non-retryable status, or retries exhausted.
            httpx.TransportError: No response after all retries.
        """
        attempt = 0
        while True:
            try:
                response = await self._client.request(method, url, **kwargs)
            except httpx.TransportError as e:
                if attempt >= self.max_retries:
                    raise
                reason = repr(e)
            else:
                if not is_retryable_status(response.status_code) or attempt >= self.max_retries:
                    response.raise_for_status()
                    return response
                reason = f"status {response.status_code}"

            attempt += 1
            delay = backoff_delay(attempt, self.backoff_base)
            logger.warning(
                "%s %s failed (%s), retry %d/%d in %.2fs",
                method.upper(),
                url,
                reason,
                attempt,
                self.max_retries,
                delay,
            )
            await asyncio.sleep(delay)
