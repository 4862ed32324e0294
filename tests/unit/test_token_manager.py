"""Unit tests for TokenManager.

Covers token caching, the expiry buffer, single-flight refresh under
concurrency, and failure propagation.
"""

import asyncio
from datetime import timedelta
from urllib.parse import parse_qs

import httpx
import pytest

from guesty_mcp.api.transport import ResilientTransport
from guesty_mcp.auth.token_manager import TokenManager
from guesty_mcp.errors import UpstreamError

API_BASE = "https://open-api.guesty.com/v1"
TOKEN_PATH = "/oauth2/token"


@pytest.fixture
def transport(mock_transport: httpx.MockTransport) -> ResilientTransport:
    return ResilientTransport(API_BASE, backoff_base=0, transport=mock_transport)


@pytest.fixture
def manager(config, transport: ResilientTransport, clock) -> TokenManager:
    return TokenManager(config, transport, clock=clock)


@pytest.mark.unit
class TestTokenRequest:
    """Tests for the client-credentials token request."""

    @pytest.mark.asyncio
    async def test_should_send_form_encoded_client_credentials(
        self, manager: TokenManager, fake_api
    ) -> None:
        """Verify the grant fields and content type of the token request."""
        token = await manager.get_access_token()

        assert token == "test_access_token"
        (request,) = fake_api.calls("POST", TOKEN_PATH)
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        form = parse_qs(request.content.decode())
        assert form == {
            "grant_type": ["client_credentials"],
            "scope": ["open-api"],
            "client_id": ["test_client_id"],
            "client_secret": ["test_client_secret"],  # pragma: allowlist secret
        }

    @pytest.mark.asyncio
    async def test_should_apply_expiry_buffer(
        self, manager: TokenManager, fake_api, make_token_response, clock
    ) -> None:
        """Verify expires_in=3000 gives a 2700000ms validity window."""
        fake_api.replace("POST", TOKEN_PATH, make_token_response(expires_in=3000))

        await manager.get_access_token()

        assert manager.token.expires_at - clock.now == timedelta(milliseconds=2_700_000)

    @pytest.mark.asyncio
    async def test_should_reject_malformed_token_response(
        self, manager: TokenManager, fake_api
    ) -> None:
        """Verify a body without access_token raises UpstreamError."""
        fake_api.replace("POST", TOKEN_PATH, httpx.Response(200, json={"error": "nope"}))

        with pytest.raises(UpstreamError, match="invalid response"):
            await manager.get_access_token()


@pytest.mark.unit
class TestTokenCaching:
    """Tests for token reuse and expiry."""

    @pytest.mark.asyncio
    async def test_should_reuse_cached_token(self, manager: TokenManager, fake_api) -> None:
        """Verify a second call before expiry makes no network request."""
        first = await manager.get_access_token()
        second = await manager.get_access_token()

        assert first == second
        assert len(fake_api.calls("POST", TOKEN_PATH)) == 1

    @pytest.mark.asyncio
    async def test_should_refresh_after_expiry(
        self, manager: TokenManager, fake_api, make_token_response, clock
    ) -> None:
        """Verify a call at expires_at fetches a new token."""
        fake_api.replace(
            "POST",
            TOKEN_PATH,
            make_token_response("first", expires_in=3000),
            make_token_response("second", expires_in=3000),
        )

        assert await manager.get_access_token() == "first"
        clock.now = manager.token.expires_at
        assert await manager.get_access_token() == "second"
        assert len(fake_api.calls("POST", TOKEN_PATH)) == 2

    @pytest.mark.asyncio
    async def test_should_refetch_after_invalidate(self, manager: TokenManager, fake_api) -> None:
        await manager.get_access_token()
        manager.invalidate()
        await manager.get_access_token()

        assert len(fake_api.calls("POST", TOKEN_PATH)) == 2


@pytest.mark.unit
class TestSingleFlightRefresh:
    """Tests for concurrent refresh coordination."""

    @pytest.mark.asyncio
    async def test_should_issue_one_request_for_concurrent_callers(
        self, manager: TokenManager, fake_api
    ) -> None:
        """Verify N concurrent callers share one token request."""
        tokens = await asyncio.gather(*(manager.get_access_token() for _ in range(10)))

        assert tokens == ["test_access_token"] * 10
        assert len(fake_api.calls("POST", TOKEN_PATH)) == 1
        assert manager.refreshing is False

    @pytest.mark.asyncio
    async def test_should_share_refresh_while_request_is_pending(self, config, clock) -> None:
        """Verify callers arriving mid-request join the in-flight refresh."""
        release = asyncio.Event()
        token_requests = []

        async def slow_token_endpoint(request: httpx.Request) -> httpx.Response:
            token_requests.append(request)
            await release.wait()
            return httpx.Response(200, json={"access_token": "slow", "expires_in": 3600})

        transport = ResilientTransport(
            API_BASE, backoff_base=0, transport=httpx.MockTransport(slow_token_endpoint)
        )
        manager = TokenManager(config, transport, clock=clock)

        first = asyncio.ensure_future(manager.get_access_token())
        await asyncio.sleep(0.01)
        assert manager.refreshing is True

        late = [asyncio.ensure_future(manager.get_access_token()) for _ in range(5)]
        await asyncio.sleep(0.01)
        release.set()

        results = await asyncio.gather(first, *late)

        assert results == ["slow"] * 6
        assert len(token_requests) == 1
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_should_propagate_failure_to_all_waiters(
        self, manager: TokenManager, fake_api, make_token_response
    ) -> None:
        """Verify every concurrent caller sees the same error and the next call retries."""
        fake_api.replace(
            "POST",
            TOKEN_PATH,
            httpx.Response(401, json={"error": "invalid_client"}),
            make_token_response("recovered"),
        )

        results = await asyncio.gather(
            *(manager.get_access_token() for _ in range(5)), return_exceptions=True
        )

        assert all(isinstance(r, httpx.HTTPStatusError) for r in results)
        assert len({id(r) for r in results}) == 1
        assert len(fake_api.calls("POST", TOKEN_PATH)) == 1
        assert manager.refreshing is False

        assert await manager.get_access_token() == "recovered"
        assert len(fake_api.calls("POST", TOKEN_PATH)) == 2

    @pytest.mark.asyncio
    async def test_should_retry_token_request_on_server_error(
        self, manager: TokenManager, fake_api, make_token_response
    ) -> None:
        """Verify the token request goes through the transport retry policy."""
        fake_api.replace(
            "POST",
            TOKEN_PATH,
            httpx.Response(503),
            make_token_response("after_retry"),
        )

        assert await manager.get_access_token() == "after_retry"
        assert len(fake_api.calls("POST", TOKEN_PATH)) == 2
