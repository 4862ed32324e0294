"""FastAPI application exposing the MCP envelope endpoint over HTTP.

Endpoints:
    POST /mcp     ping / manifest / tool_call envelopes
    GET  /health  liveness probe
"""

import logging
import resource
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from guesty_mcp.__version__ import __version__
from guesty_mcp.api.client import GuestyClient
from guesty_mcp.config import GuestyConfig
from guesty_mcp.errors import ValidationError
from guesty_mcp.server.dispatcher import Dispatcher, error_envelope

logger = logging.getLogger(__name__)


def create_app(config: GuestyConfig, dispatcher: Dispatcher | None = None) -> FastAPI:
    """Create the HTTP application.

    Args:
        config: Gateway configuration (CORS allow-list, credentials).
        dispatcher: Pre-built dispatcher. One backed by a new GuestyClient is
            created, and closed on shutdown, if omitted.

    Returns:
        Configured FastAPI application.
    """
    owned_client: GuestyClient | None = None
    if dispatcher is None:
        owned_client = GuestyClient.from_config(config)
        dispatcher = Dispatcher(owned_client)

    started_at = time.monotonic()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        if owned_client is not None:
            await owned_client.aclose()

    app = FastAPI(title="Guesty MCP", version=__version__, lifespan=lifespan)
    app.state.dispatcher = dispatcher
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict:
        return {
            "status": "ok",
            "uptime": time.monotonic() - started_at,
            # Peak resident set size, kilobytes on Linux
            "memory": resource.getrusage(resource.RUSAGE_SELF).ru_maxrss,
        }

    @app.post("/mcp")
    async def mcp_endpoint(request: Request) -> JSONResponse:
        try:
            envelope = await request.json()
        except ValueError:
            error = ValidationError("Request body must be valid JSON")
            return JSONResponse(error_envelope(error), status_code=error.status_code)

        status, payload = await app.state.dispatcher.handle(envelope)
        return JSONResponse(payload, status_code=status)

    return app
