"""MCP envelope models exchanged over the inbound protocol."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class ToolCall(BaseModel):
    """Inbound tool invocation. ``call_id`` is echoed back untouched."""

    type: Literal["tool_call"] = "tool_call"
    tool_name: Any = Field(default=None, description="Tool to invoke")
    tool_params: Any = Field(default=None, description="Tool parameters")
    call_id: Any = Field(default=None, description="Opaque caller correlation id")


class ToolResult(BaseModel):
    """Successful tool call result."""

    type: Literal["tool_result"] = "tool_result"
    call_id: Any = None
    result: Any = None


class ErrorBody(BaseModel):
    type: str
    message: str
    details: Any = None


class ErrorEnvelope(BaseModel):
    """Failed request."""

    type: Literal["error"] = "error"
    error: ErrorBody
