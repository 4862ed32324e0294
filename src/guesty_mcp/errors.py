"""Error taxonomy for Guesty MCP tool calls.

Every failure that reaches the dispatcher is turned into one of the
exception classes below. Each carries its kind, a human-readable message,
the HTTP-equivalent status code and optional upstream details, so callers
classify errors by type instead of by message text.
"""

from enum import Enum
from typing import Any

import httpx


class ErrorKind(str, Enum):
    """Stable error type names reported in error envelopes."""

    VALIDATION = "ValidationError"
    NOT_FOUND = "NotFoundError"
    CONFLICT = "ConflictError"
    UPSTREAM = "UpstreamError"
    SERVER = "ServerError"


class ConfigError(ValueError):
    """Raised when required startup configuration is missing or invalid."""


class GuestyMCPError(Exception):
    """Base class for classified tool call failures.

    Attributes:
        kind: Error kind reported to the caller.
        message: Human-readable description.
        status_code: HTTP-equivalent status code.
        details: Optional upstream payload.
    """

    kind: ErrorKind = ErrorKind.SERVER
    default_status: int = 500

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code or self.default_status
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Return the ``error`` member of an error envelope."""
        return {
            "type": self.kind.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(GuestyMCPError):
    """Caller input violates a tool contract."""

    kind = ErrorKind.VALIDATION
    default_status = 400


class NotFoundError(GuestyMCPError):
    """Upstream reported that the referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND
    default_status = 404


class ConflictError(GuestyMCPError):
    """Upstream reported a state conflict, e.g. a double booking."""

    kind = ErrorKind.CONFLICT
    default_status = 409


class UpstreamError(GuestyMCPError):
    """Any other upstream HTTP failure."""

    kind = ErrorKind.UPSTREAM


class ServerError(GuestyMCPError):
    """Failure inside the gateway itself."""

    kind = ErrorKind.SERVER


def response_details(response: httpx.Response) -> Any:
    """Extract the upstream body from an error response.

    Args:
        response: Upstream response.

    Returns:
        Parsed JSON body, raw text, or None for an empty body.
    """
    try:
        return response.json()
    except ValueError:
        return response.text or None


def upstream_status(exc: BaseException) -> int | None:
    """Return the upstream status code carried by an httpx error, if any."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    return None


def classify(exc: BaseException) -> GuestyMCPError:
    """Map an arbitrary exception onto the error taxonomy.

    Args:
        exc: Exception raised while handling a tool call.

    Returns:
        The exception itself when already classified, otherwise a new
        UpstreamError or ServerError describing it.
    """
    if isinstance(exc, GuestyMCPError):
        return exc

    status_code = upstream_status(exc)
    if status_code is not None:
        return UpstreamError(
            f"Upstream request failed with status {status_code}",
            status_code=status_code,
            details=response_details(exc.response),
        )

    if isinstance(exc, httpx.TransportError):
        return UpstreamError(f"Upstream request failed: {exc!r}")

    return ServerError(str(exc) or exc.__class__.__name__)
