"""MCP server implementation for the Guesty Open API.

Provides 8 tools across properties, reservations and guest messaging:

Property Tools (3):
- List properties with filters and pagination
- Get a property by ID
- Check availability for a date range

Reservation Tools (3):
- List reservations with filters and pagination
- Get a reservation by ID
- Create a reservation, creating the guest when needed

Messaging Tools (2):
- Send a message to the guest of a reservation
- Get the message history of a reservation

Transports: HTTP envelope endpoint (POST /mcp) and stdio
Authentication: OAuth 2.0 client credentials with single-flight refresh
"""

from guesty_mcp.server.dispatcher import Dispatcher
from guesty_mcp.server.guesty_server import GuestyServer, main
from guesty_mcp.server.http_app import create_app


def create_server() -> GuestyServer:
    """Create and configure a Guesty MCP stdio server.

    Returns:
        GuestyServer: Configured server instance ready to run.

    Example:
        >>> server = create_server()
        >>> asyncio.run(server.run())
    """
    return GuestyServer()


__all__ = ["create_app", "create_server", "Dispatcher", "GuestyServer", "main"]
