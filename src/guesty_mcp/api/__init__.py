"""HTTP access to the Guesty Open API.

``ResilientTransport`` owns the pooled connection and retry policy;
``GuestyClient`` adds bearer authentication and pagination on top of it.
"""

from guesty_mcp.api import endpoints
from guesty_mcp.api.client import DEFAULT_MAX_PAGES, DEFAULT_PAGE_SIZE, GuestyClient
from guesty_mcp.api.transport import ResilientTransport

__all__ = [
    "DEFAULT_MAX_PAGES",
    "DEFAULT_PAGE_SIZE",
    "GuestyClient",
    "ResilientTransport",
    "endpoints",
]
