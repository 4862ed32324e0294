"""Routing of MCP envelopes to tool adapters.

The dispatcher is transport-agnostic: the HTTP app and the stdio MCP server
both hand it decoded envelopes (or tool names and arguments) and get back an
HTTP-equivalent status code with the outbound envelope.
"""

import logging
from collections.abc import Mapping
from typing import Any

from guesty_mcp.api.client import GuestyClient
from guesty_mcp.errors import (
    ErrorKind,
    GuestyMCPError,
    ServerError,
    ValidationError,
    classify,
)
from guesty_mcp.server.envelopes import ErrorBody, ErrorEnvelope, ToolCall, ToolResult
from guesty_mcp.tools import MANIFEST, TOOL_HANDLERS, ToolHandler

logger = logging.getLogger(__name__)


def error_envelope(error: GuestyMCPError) -> dict[str, Any]:
    """Build the outbound error envelope for a classified error."""
    body = ErrorBody(**error.to_dict())
    return ErrorEnvelope(error=body).model_dump()


class Dispatcher:
    """Dispatch MCP envelopes to the Guesty tool adapters.

    Attributes:
        client: Guesty API client handed to every adapter.
        manifest: Static manifest returned for ``manifest`` requests.
        handlers: Mapping of tool name to adapter coroutine.
    """

    def __init__(
        self,
        client: GuestyClient,
        manifest: Mapping[str, Any] | None = None,
        handlers: Mapping[str, ToolHandler] | None = None,
    ) -> None:
        self.client = client
        self.manifest = MANIFEST if manifest is None else manifest
        self.handlers = TOOL_HANDLERS if handlers is None else handlers

    async def handle(self, envelope: Any) -> tuple[int, dict[str, Any]]:
        """Handle one inbound envelope.

        Args:
            envelope: Decoded JSON request body.

        Returns:
            Tuple of (status code, outbound envelope).
        """
        if not isinstance(envelope, dict):
            return 400, error_envelope(ValidationError("Request body must be a JSON object"))

        envelope_type = envelope.get("type")
        if envelope_type == "ping":
            return 200, {"type": "pong"}
        if envelope_type == "manifest":
            return 200, {"type": "manifest", "manifest": self.manifest}
        if envelope_type == "tool_call":
            return await self.handle_tool_call(envelope)

        return 400, error_envelope(ValidationError(f"Unknown type: {envelope_type}"))

    async def handle_tool_call(self, envelope: dict[str, Any]) -> tuple[int, dict[str, Any]]:
        """Run a ``tool_call`` envelope and package the outcome."""
        call = ToolCall.model_validate(envelope)
        return await self.run_tool(call.tool_name, call.tool_params, call.call_id)

    async def run_tool(
        self, name: Any, params: Any, call_id: Any = None
    ) -> tuple[int, dict[str, Any]]:
        """Invoke a tool and wrap the result or the failure in an envelope.

        Args:
            name: Tool name.
            params: Tool parameters.
            call_id: Caller correlation id echoed in the result.

        Returns:
            Tuple of (status code, tool_result or error envelope).
        """
        try:
            result = await self.call_tool(name, params)
        except Exception as e:
            error = classify(e)
            if error.kind in (ErrorKind.UPSTREAM, ErrorKind.SERVER):
                logger.exception(f"Error calling tool {name}")
            else:
                logger.warning("Tool %s failed: %s: %s", name, error.kind.value, error.message)
            return error.status_code, error_envelope(error)

        return 200, ToolResult(call_id=call_id, result=result).model_dump()

    async def call_tool(self, name: Any, params: Any) -> Any:
        """Invoke a tool adapter.

        Raises:
            ServerError: If the tool name is not recognized.
            GuestyMCPError: Classified adapter failures.
            httpx.HTTPError: Unclassified upstream failures.
        """
        handler = self.handlers.get(name) if isinstance(name, str) else None
        if handler is None:
            raise ServerError(f"Unknown tool: {name}")

        return await handler(self.client, params)
