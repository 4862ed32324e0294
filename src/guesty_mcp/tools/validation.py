"""Input validation helpers shared by the tool adapters.

All helpers raise ``ValidationError`` and never touch the network.
"""

import json
import re
from datetime import date
from typing import Any

from guesty_mcp.errors import ValidationError

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

RESERVATION_STATUSES = ("inquiry", "pending", "confirmed", "canceled")
DEFAULT_RESERVATION_STATUS = "inquiry"


def ensure_params(params: Any) -> dict[str, Any]:
    """Normalize tool parameters to a dict; ``None`` means no parameters."""
    if params is None:
        return {}
    if not isinstance(params, dict):
        raise ValidationError("tool_params must be an object")
    return params


def require(params: dict[str, Any], name: str) -> Any:
    """Return a required parameter or fail if it is missing or empty."""
    value = params.get(name)
    if value is None or value == "":
        raise ValidationError(f"{name} is required")
    return value


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def optional_positive_int(params: dict[str, Any], name: str) -> int | None:
    value = params.get(name)
    if value is None:
        return None
    if not _is_int(value) or value < 1:
        raise ValidationError(f"{name} must be a positive integer")
    return value


def optional_non_negative_int(params: dict[str, Any], name: str) -> int | None:
    value = params.get(name)
    if value is None:
        return None
    if not _is_int(value) or value < 0:
        raise ValidationError(f"{name} must be a non-negative integer")
    return value


def validate_pagination(params: dict[str, Any]) -> None:
    """Check the optional ``limit`` and ``skip`` parameters."""
    optional_positive_int(params, "limit")
    optional_non_negative_int(params, "skip")


def parse_date(value: Any) -> date:
    """Parse a YYYY-MM-DD string into a calendar date.

    Raises:
        ValidationError: If the value is not a string in that format or
            does not name a real day.
    """
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise ValidationError("dates must be in YYYY-MM-DD format")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"{value} is not a valid calendar date") from e


def validate_date_range(
    params: dict[str, Any], start_name: str, end_name: str, suffix: str = ""
) -> tuple[str, str]:
    """Validate a required start/end date pair.

    Args:
        params: Tool parameters.
        start_name: Key of the start date.
        end_name: Key of the end date.
        suffix: Appended to both names in the ordering error (e.g. ``" date"``).

    Returns:
        The two date strings, unchanged.
    """
    start = params.get(start_name)
    end = params.get(end_name)
    if not start or not end:
        raise ValidationError(f"{start_name} and {end_name} are required")

    start_date = parse_date(start)
    end_date = parse_date(end)
    if start_date >= end_date:
        raise ValidationError(f"{end_name}{suffix} must be after {start_name}{suffix}")
    return start, end


def validate_status(value: Any) -> str:
    """Return the reservation status, defaulting to ``inquiry``."""
    if value is None or value == "":
        return DEFAULT_RESERVATION_STATUS
    if value not in RESERVATION_STATUSES:
        raise ValidationError(f"status must be one of {', '.join(RESERVATION_STATUSES)}")
    return value


def serialize_filters(filters: Any) -> str | None:
    """Encode structured filters as JSON; strings pass through unchanged."""
    if filters is None or filters == "":
        return None
    if isinstance(filters, str):
        return filters
    return json.dumps(filters)
