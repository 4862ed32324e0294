"""Guesty MCP server for stdio MCP clients.

Serves the same eight tools as the HTTP endpoint through the official MCP
SDK, so the gateway can be mounted directly in MCP clients such as Claude
Desktop. Tool calls go through the shared ``Dispatcher``; results and error
envelopes are returned as JSON text content.
"""

import asyncio
import json
import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from guesty_mcp.api.client import GuestyClient
from guesty_mcp.config import GuestyConfig
from guesty_mcp.server.dispatcher import Dispatcher
from guesty_mcp.tools import TOOLS

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SERVER_NAME = "guesty-mcp"


class GuestyServer:
    """MCP server for the Guesty Open API.

    Attributes:
        config: Gateway configuration.
        server: MCP Server instance.
        client: Guesty API client shared by all tool calls.
        dispatcher: Tool dispatcher.
    """

    def __init__(
        self, config: GuestyConfig | None = None, client: GuestyClient | None = None
    ) -> None:
        """Initialize the Guesty MCP server.

        Args:
            config: Gateway configuration. Loaded from the environment if omitted.
            client: Pre-built API client. Created from ``config`` if omitted.
        """
        self.config = config or GuestyConfig.from_env()
        self.server = Server(SERVER_NAME)
        self.client = client or GuestyClient.from_config(self.config)
        self.dispatcher = Dispatcher(self.client)
        self._setup_handlers()

    async def close(self) -> None:
        """Close the shared HTTP client and release resources."""
        await self.client.aclose()

    def _setup_handlers(self) -> None:
        """Register MCP tool handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """Return list of available tools."""
            return self.tool_definitions()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Handle tool calls."""
            return await self.handle_tool_call(name, arguments)

    def tool_definitions(self) -> list[Tool]:
        """Convert the static manifest into MCP tool definitions."""
        return [
            Tool(
                name=tool["name"],
                description=tool["description"],
                inputSchema=tool["parameters"],
            )
            for tool in TOOLS
        ]

    async def handle_tool_call(
        self, name: str, arguments: dict[str, Any] | None
    ) -> list[TextContent]:
        """Run a tool and render the outcome as text content.

        Args:
            name: Tool name.
            arguments: Tool arguments.

        Returns:
            Single text item holding the JSON result, or the JSON error envelope.
        """
        status, envelope = await self.dispatcher.run_tool(name, arguments or {})
        payload = envelope["result"] if status == 200 else envelope
        return [TextContent(type="text", text=json.dumps(payload, indent=2, default=str))]

    async def run(self) -> None:
        """Run the MCP server using stdio transport."""
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.close()


def main() -> None:
    """Entry point for the Guesty MCP stdio server."""
    server = GuestyServer()
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
