"""Shared pytest fixtures for guesty-mcp tests.

This module provides reusable fixtures for configuration, a scripted fake
Guesty upstream served through ``httpx.MockTransport``, and mocked API
clients for adapter-level tests.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from guesty_mcp.api.client import GuestyClient
from guesty_mcp.config import GuestyConfig

API_BASE = "https://open-api.guesty.com/v1"
TOKEN_PATH = "/oauth2/token"

# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def config() -> GuestyConfig:
    """Create a configuration with test credentials."""
    return GuestyConfig(
        client_id="test_client_id",
        client_secret="test_client_secret",  # pragma: allowlist secret
    )


# =============================================================================
# Fake Upstream
# =============================================================================


def token_response(access_token: str = "test_access_token", expires_in: int = 86400):
    """Create a token endpoint response."""
    return httpx.Response(200, json={"access_token": access_token, "expires_in": expires_in})


class FakeGuestyAPI:
    """Scripted Guesty upstream for ``httpx.MockTransport``.

    Responses are queued per (method, path). Each request consumes the next
    queued response; the last one is repeated once the queue is down to it.
    Queued exceptions are raised instead of returning a response.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[Any]] = {}

    def queue(self, method: str, path: str, *responses: Any) -> None:
        self._routes.setdefault((method, path), []).extend(responses)

    def replace(self, method: str, path: str, *responses: Any) -> None:
        self._routes[(method, path)] = list(responses)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queued = self._routes.get((request.method, request.url.path))
        if not queued:
            return httpx.Response(404, json={"message": f"No route for {request.url.path}"})

        response = queued.pop(0) if len(queued) > 1 else queued[0]
        if isinstance(response, Exception):
            raise response
        # Fresh copy so repeated responses are never shared between requests
        return httpx.Response(
            response.status_code, headers=response.headers, content=response.content
        )


@pytest.fixture
def fake_api() -> FakeGuestyAPI:
    """Create a fake upstream that already serves tokens."""
    api = FakeGuestyAPI()
    api.queue("POST", TOKEN_PATH, token_response())
    return api


@pytest.fixture
def make_token_response() -> Callable[..., httpx.Response]:
    return token_response


@pytest.fixture
def mock_transport(fake_api: FakeGuestyAPI) -> httpx.MockTransport:
    return httpx.MockTransport(fake_api)


@pytest.fixture
def guesty_client(config: GuestyConfig, mock_transport: httpx.MockTransport) -> GuestyClient:
    """Create a real GuestyClient talking to the fake upstream without backoff delays."""
    return GuestyClient.from_config(config, http_transport=mock_transport, backoff_base=0)


# =============================================================================
# Mock API Client
# =============================================================================


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock GuestyClient with async verb methods."""
    client = MagicMock(spec=GuestyClient)
    client.get = AsyncMock(return_value={"results": []})
    client.post = AsyncMock(return_value={"_id": "created_id"})
    client.put = AsyncMock(return_value={})
    client.delete = AsyncMock(return_value=None)
    client.aclose = AsyncMock()
    return client


def http_status_error(
    status_code: int, json_data: Any = None, method: str = "GET", path: str = "/listings"
) -> httpx.HTTPStatusError:
    """Create an httpx.HTTPStatusError carrying an upstream response."""
    request = httpx.Request(method, f"{API_BASE}{path}")
    response = httpx.Response(status_code, json=json_data, request=request)
    return httpx.HTTPStatusError(
        f"Upstream returned {status_code}", request=request, response=response
    )


@pytest.fixture
def make_status_error() -> Callable[..., httpx.HTTPStatusError]:
    return http_status_error


# =============================================================================
# Clock Fixtures
# =============================================================================


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc))
