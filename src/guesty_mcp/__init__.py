"""Guesty MCP Server.

Exposes Guesty properties, reservations, guests and messages as MCP tools.
"""

from guesty_mcp.__version__ import __version__

__all__ = ["__version__"]
