"""Integration tests for the FastAPI HTTP surface."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from guesty_mcp.config import GuestyConfig
from guesty_mcp.server.dispatcher import Dispatcher
from guesty_mcp.server.http_app import create_app


@pytest.fixture
def dispatcher() -> MagicMock:
    dispatcher = MagicMock(spec=Dispatcher)
    dispatcher.handle = AsyncMock(return_value=(200, {"type": "pong"}))
    return dispatcher


@pytest.fixture
def client(config: GuestyConfig, dispatcher: MagicMock) -> TestClient:
    return TestClient(create_app(config, dispatcher=dispatcher))


@pytest.mark.integration
class TestMcpEndpoint:
    """Tests for POST /mcp."""

    def test_should_forward_envelope_to_dispatcher(
        self, client: TestClient, dispatcher: MagicMock
    ) -> None:
        response = client.post("/mcp", json={"type": "ping"})

        assert response.status_code == 200
        assert response.json() == {"type": "pong"}
        dispatcher.handle.assert_awaited_once_with({"type": "ping"})

    def test_should_use_dispatcher_status(
        self, client: TestClient, dispatcher: MagicMock
    ) -> None:
        error = {"type": "error", "error": {"type": "NotFoundError", "message": "x"}}
        dispatcher.handle.return_value = (404, error)

        response = client.post("/mcp", json={"type": "tool_call", "tool_name": "get_property"})

        assert response.status_code == 404
        assert response.json() == error

    def test_should_reject_invalid_json(self, client: TestClient, dispatcher: MagicMock) -> None:
        response = client.post(
            "/mcp", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == {
            "type": "ValidationError",
            "message": "Request body must be valid JSON",
            "details": None,
        }
        dispatcher.handle.assert_not_awaited()


@pytest.mark.integration
class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_should_report_status_uptime_and_memory(self, client: TestClient) -> None:
        response = client.get("/health")

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "ok"
        assert body["uptime"] >= 0
        assert body["memory"] > 0


@pytest.mark.integration
class TestCors:
    """Tests for the CORS allow-list."""

    def test_should_allow_any_origin_by_default(self, client: TestClient) -> None:
        response = client.get("/health", headers={"Origin": "https://anywhere.example"})

        assert response.headers["access-control-allow-origin"] == "*"

    def test_should_honor_allow_list(self, config: GuestyConfig, dispatcher: MagicMock) -> None:
        config = config.model_copy(update={"allowed_origins": ["https://app.example"]})
        client = TestClient(create_app(config, dispatcher=dispatcher))

        allowed = client.get("/health", headers={"Origin": "https://app.example"})
        denied = client.get("/health", headers={"Origin": "https://evil.example"})

        assert allowed.headers["access-control-allow-origin"] == "https://app.example"
        assert "access-control-allow-origin" not in denied.headers

    def test_should_answer_preflight(self, config: GuestyConfig, dispatcher: MagicMock) -> None:
        config = config.model_copy(update={"allowed_origins": ["https://app.example"]})
        client = TestClient(create_app(config, dispatcher=dispatcher))

        response = client.options(
            "/mcp",
            headers={
                "Origin": "https://app.example",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "https://app.example"
