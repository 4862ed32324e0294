"""Access token lifecycle for the Guesty Open API.

Tokens are obtained with the OAuth2 client-credentials grant, cached in
memory until shortly before they expire, and refreshed on demand. Only one
refresh request is ever outstanding: callers that arrive while a refresh is
running await the same task and receive the same token, or the same error.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

import httpx

from guesty_mcp.api.transport import ResilientTransport
from guesty_mcp.auth.models import AccessToken
from guesty_mcp.config import GuestyConfig
from guesty_mcp.errors import UpstreamError, response_details

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenManager:
    """Single-flight OAuth token cache.

    Attributes:
        config: Credentials and token endpoint.
        transport: Transport used for token requests.

    Example:
        ```python
        manager = TokenManager(config, transport)
        token = await manager.get_access_token()
        ```
    """

    def __init__(
        self,
        config: GuestyConfig,
        transport: ResilientTransport,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the token manager.

        Args:
            config: Gateway configuration holding client credentials.
            transport: Shared transport used to reach the token endpoint.
            clock: Returns the current UTC time. Injectable for tests.
        """
        self.config = config
        self.transport = transport
        self._clock = clock
        self._token: AccessToken | None = None
        self._refresh_task: asyncio.Task[str] | None = None

    @property
    def token(self) -> AccessToken | None:
        """Currently cached token, if any."""
        return self._token

    @property
    def refreshing(self) -> bool:
        """True while a refresh request is in flight."""
        return self._refresh_task is not None

    def invalidate(self) -> None:
        """Drop the cached token so the next call fetches a new one."""
        self._token = None

    async def get_access_token(self) -> str:
        """Return a valid access token, refreshing it if needed.

        Returns:
            Bearer token string.

        Raises:
            httpx.HTTPError: If the token request fails.
            UpstreamError: If the token endpoint returns an unusable body.
        """
        # No await between the checks and the task creation below.
        if self._token is not None and not self._token.is_expired(self._clock()):
            return self._token.value

        if self._refresh_task is None:
            task = asyncio.ensure_future(self._refresh())
            task.add_done_callback(self._clear_refresh)
            self._refresh_task = task

        return await asyncio.shield(self._refresh_task)

    def _clear_refresh(self, task: "asyncio.Task[str]") -> None:
        if self._refresh_task is task:
            self._refresh_task = None

    async def _refresh(self) -> str:
        try:
            return await self._request_token()
        except Exception as e:
            details = (
                response_details(e.response) if isinstance(e, httpx.HTTPStatusError) else repr(e)
            )
            logger.error("OAuth refresh failed: %s", details)
            raise

    async def _request_token(self) -> str:
        form = {
            "grant_type": "client_credentials",
            "scope": self.config.scope,
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
        }
        response = await self.transport.request(
            "POST",
            self.config.token_url,
            data=form,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/x-www-form-urlencoded",
            },
        )

        try:
            payload = response.json()
            value = payload["access_token"]
            expires_in = float(payload["expires_in"])
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError(
                "Token endpoint returned an invalid response",
                status_code=502,
                details=response_details(response),
            ) from e

        self._token = AccessToken.issued(value, expires_in, self._clock())
        logger.info("Obtained access token, valid until %s", self._token.expires_at.isoformat())
        return value
