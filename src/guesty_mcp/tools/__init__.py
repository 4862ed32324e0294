"""Guesty MCP tools: adapters, validation and the static manifest."""

from guesty_mcp.tools.adapters import TOOL_HANDLERS, ToolHandler
from guesty_mcp.tools.manifest import MANIFEST, TOOLS

__all__ = ["MANIFEST", "TOOLS", "TOOL_HANDLERS", "ToolHandler"]
