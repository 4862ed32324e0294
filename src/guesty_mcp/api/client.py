"""Authenticated Guesty Open API client.

Thin verb-oriented accessors over ``ResilientTransport``. Each call fetches
the current access token from the ``TokenManager`` and sends it as a bearer
credential. Errors are logged with request context and re-raised unchanged;
classifying them is left to the tool layer.
"""

import logging
from typing import TYPE_CHECKING, Any

import httpx

from guesty_mcp.api.transport import ResilientTransport
from guesty_mcp.errors import response_details

if TYPE_CHECKING:
    from guesty_mcp.auth.token_manager import TokenManager
    from guesty_mcp.config import GuestyConfig

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
# Upper bound on pages fetched by list_all
DEFAULT_MAX_PAGES = 1000


class GuestyClient:
    """Guesty resource API client.

    Attributes:
        transport: Shared retrying HTTP transport.
        tokens: Token manager supplying bearer tokens.

    Example:
        ```python
        client = GuestyClient.from_config(config)
        listing = await client.get("/listings/abc123", {"fields": "title"})
        everything = await client.list_all("/reservations")
        await client.aclose()
        ```
    """

    def __init__(self, transport: ResilientTransport, tokens: "TokenManager") -> None:
        self.transport = transport
        self.tokens = tokens

    @classmethod
    def from_config(
        cls,
        config: "GuestyConfig",
        http_transport: httpx.AsyncBaseTransport | None = None,
        **transport_options: Any,
    ) -> "GuestyClient":
        """Create a client, transport and token manager from configuration.

        Args:
            config: Gateway configuration.
            http_transport: Optional httpx transport, used by tests to mock traffic.
            **transport_options: Extra ``ResilientTransport`` options
                (``max_retries``, ``backoff_base``, ``timeout``).

        Returns:
            Ready-to-use client sharing one transport for tokens and resources.
        """
        from guesty_mcp.auth.token_manager import TokenManager

        transport = ResilientTransport(
            config.api_base, transport=http_transport, **transport_options
        )
        return cls(transport, TokenManager(config, transport))

    async def aclose(self) -> None:
        """Release pooled connections."""
        await self.transport.aclose()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        data: Any = None,
    ) -> Any:
        """Make an authenticated request to the Guesty API.

        Args:
            method: HTTP method.
            path: Resource path relative to the API base.
            params: Query parameters. ``None`` values are dropped.
            data: JSON body.

        Returns:
            Parsed JSON body, or None for an empty response.

        Raises:
            httpx.HTTPError: If the request fails.
        """
        token = await self.tokens.get_access_token()

        query = None
        if params:
            query = {key: value for key, value in params.items() if value is not None}

        try:
            response = await self.transport.request(
                method,
                path,
                params=query,
                json=data,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPStatusError as e:
            logger.error(
                "API %s %s failed: %s", method.upper(), path, response_details(e.response)
            )
            raise
        except httpx.HTTPError as e:
            logger.error("API %s %s failed: %r", method.upper(), path, e)
            raise

        if not response.content:
            return None
        return response.json()

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, data: Any = None) -> Any:
        return await self.request("POST", path, data=data)

    async def put(self, path: str, data: Any = None) -> Any:
        return await self.request("PUT", path, data=data)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def list_all(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        max_pages: int = DEFAULT_MAX_PAGES,
    ) -> list[Any]:
        """Fetch every page of a paginated collection.

        Pages are requested with increasing ``skip`` until one holds fewer
        items than the page size. A final page that is exactly full costs one
        more (empty) request. At most ``max_pages`` pages are fetched.

        Args:
            path: Collection path.
            params: Query parameters; ``limit`` sets the page size (default
                100) and ``skip`` the starting offset (default 0).
            max_pages: Page budget before giving up with what was collected.

        Returns:
            Items of all pages in order.
        """
        params = dict(params or {})
        page_size = params.get("limit") or DEFAULT_PAGE_SIZE
        skip = params.get("skip") or 0
        items: list[Any] = []

        for _ in range(max_pages):
            batch = await self.get(path, {**params, "limit": page_size, "skip": skip})
            results = batch.get("results", batch) if isinstance(batch, dict) else batch
            if results is None:
                results = []
            elif not isinstance(results, list):
                results = [results]
            items.extend(results)
            if len(results) < page_size:
                return items
            skip += page_size

        logger.warning(
            "Stopped paginating %s after %d pages (%d items)", path, max_pages, len(items)
        )
        return items
