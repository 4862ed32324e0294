"""Tool adapters translating MCP tool calls into Guesty API requests.

Each adapter is a stateless coroutine ``adapter(client, params)`` that
validates its parameters before any network call, issues one or more
requests through ``GuestyClient`` and returns the upstream result. Known
upstream conditions (404, 409) are re-raised as domain errors; everything
else propagates unchanged for the dispatcher to classify.
"""

import json
import logging
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from typing import Any

import httpx

from guesty_mcp.api import endpoints
from guesty_mcp.api.client import GuestyClient
from guesty_mcp.errors import (
    ConflictError,
    NotFoundError,
    UpstreamError,
    ValidationError,
    response_details,
)
from guesty_mcp.tools.validation import (
    ensure_params,
    optional_positive_int,
    require,
    serialize_filters,
    validate_date_range,
    validate_pagination,
    validate_status,
)

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_SUBJECT = "Message from Property Manager"
UNAVAILABLE_MESSAGE = "Property is not available for the specified dates"

ToolHandler = Callable[[GuestyClient, dict[str, Any]], Awaitable[Any]]


@contextmanager
def remap_upstream_errors(
    not_found: str | None = None, conflict: str | None = None
) -> Iterator[None]:
    """Translate upstream 404/409 responses into domain errors.

    Args:
        not_found: Message for a NotFoundError raised on 404.
        conflict: Message for a ConflictError raised on 409.
    """
    try:
        yield
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        if status == 404 and not_found:
            raise NotFoundError(not_found) from e
        if status == 409 and conflict:
            raise ConflictError(conflict) from e
        raise


async def list_properties(client: GuestyClient, params: dict[str, Any]) -> Any:
    """List listings, one page as returned by Guesty."""
    params = ensure_params(params)
    validate_pagination(params)

    query = {**params, "filters": serialize_filters(params.get("filters"))}
    logger.info("[list_properties] Querying properties with params: %s", json.dumps(query))
    return await client.get(endpoints.LISTINGS, query)


async def get_property(client: GuestyClient, params: dict[str, Any]) -> Any:
    """Fetch one listing, optionally projected to ``fields``."""
    params = ensure_params(params)
    property_id = require(params, "property_id")
    fields = params.get("fields")

    query = {"fields": fields} if fields else None
    logger.info("[get_property] Fetching property: %s", property_id)
    with remap_upstream_errors(not_found="Property not found"):
        return await client.get(f"{endpoints.LISTINGS}/{property_id}", query)


async def check_availability(client: GuestyClient, params: dict[str, Any]) -> Any:
    """Search listings available between two dates."""
    params = ensure_params(params)
    check_in, check_out = validate_date_range(params, "check_in", "check_out", suffix=" date")
    min_occupancy = optional_positive_int(params, "min_occupancy")
    property_id = params.get("property_id")

    available: dict[str, Any] = {"checkIn": check_in, "checkOut": check_out}
    if min_occupancy:
        available["minOccupancy"] = min_occupancy

    query: dict[str, Any] = {"available": json.dumps(available)}
    if property_id:
        query["ids"] = property_id

    logger.info(
        "[check_availability] Checking availability for dates: %s to %s", check_in, check_out
    )
    return await client.get(endpoints.LISTINGS, query)


async def list_reservations(client: GuestyClient, params: dict[str, Any]) -> Any:
    """List reservations, one page as returned by Guesty."""
    params = ensure_params(params)
    validate_pagination(params)

    query = {**params, "filters": serialize_filters(params.get("filters"))}
    logger.info("[list_reservations] Querying reservations with params: %s", json.dumps(query))
    return await client.get(endpoints.RESERVATIONS, query)


async def get_reservation(client: GuestyClient, params: dict[str, Any]) -> Any:
    """Fetch one reservation, optionally projected to ``fields``."""
    params = ensure_params(params)
    reservation_id = require(params, "reservation_id")
    fields = params.get("fields")

    query = {"fields": fields} if fields else None
    logger.info("[get_reservation] Fetching reservation: %s", reservation_id)
    with remap_upstream_errors(not_found="Reservation not found"):
        return await client.get(f"{endpoints.RESERVATIONS}/{reservation_id}", query)


async def create_reservation(client: GuestyClient, params: dict[str, Any]) -> Any:
    """Create a reservation, creating the guest first when only guest data is given."""
    params = ensure_params(params)
    listing_id = require(params, "listing_id")
    check_in, check_out = validate_date_range(params, "check_in_date", "check_out_date")
    status = validate_status(params.get("status"))

    guest_id = params.get("guest_id")
    guest_data = params.get("guest_data")
    if not guest_id and not guest_data:
        raise ValidationError("either guest_id or guest_data must be provided")
    if not guest_id and not isinstance(guest_data, dict):
        raise ValidationError("guest_data must be an object")

    reservation: dict[str, Any] = {
        "listingId": listing_id,
        "checkInDate": check_in,
        "checkOutDate": check_out,
        "status": status,
    }

    logger.info("[create_reservation] Creating reservation for listing: %s", listing_id)
    try:
        if guest_id:
            reservation["guestId"] = guest_id
        else:
            logger.info("[create_reservation] Creating new guest")
            guest = await client.post(endpoints.GUESTS, guest_data)
            if not isinstance(guest, dict) or not guest.get("_id"):
                raise UpstreamError(
                    "Guest creation returned no guest id", status_code=502, details=guest
                )
            reservation["guestId"] = guest["_id"]

        return await client.post(endpoints.RESERVATIONS, reservation)
    except httpx.HTTPStatusError as e:
        status_code = e.response.status_code
        if status_code == 404:
            body = json.dumps(response_details(e.response)).lower()
            if "listing" in body:
                raise NotFoundError("Listing not found") from e
            if "guest" in body:
                raise NotFoundError("Guest not found") from e
        if status_code == 409:
            raise ConflictError(UNAVAILABLE_MESSAGE) from e
        raise


async def send_guest_message(client: GuestyClient, params: dict[str, Any]) -> Any:
    """Send a message to the guest attached to a reservation."""
    params = ensure_params(params)
    reservation_id = require(params, "reservation_id")
    message = params.get("message")
    if not isinstance(message, str) or not message.strip():
        raise ValidationError("message is required and cannot be empty")
    subject = params.get("subject") or DEFAULT_MESSAGE_SUBJECT

    logger.info("[send_guest_message] Sending message for reservation: %s", reservation_id)
    with remap_upstream_errors(not_found="Reservation not found"):
        reservation = await client.get(f"{endpoints.RESERVATIONS}/{reservation_id}")
        if not isinstance(reservation, dict) or not reservation.get("guestId"):
            raise NotFoundError("Reservation or guest not found")

        payload = {
            "reservationId": reservation_id,
            "guestId": reservation["guestId"],
            "message": message,
            "subject": subject,
        }
        return await client.post(endpoints.COMMUNICATIONS, payload)


async def get_guest_messages(client: GuestyClient, params: dict[str, Any]) -> Any:
    """Fetch the message history of a reservation."""
    params = ensure_params(params)
    reservation_id = require(params, "reservation_id")
    limit = optional_positive_int(params, "limit")

    query: dict[str, Any] = {"reservationId": reservation_id}
    if limit:
        query["limit"] = limit

    logger.info("[get_guest_messages] Fetching messages for reservation: %s", reservation_id)
    with remap_upstream_errors(not_found="Reservation not found"):
        return await client.get(endpoints.COMMUNICATIONS, query)


TOOL_HANDLERS: dict[str, ToolHandler] = {
    # Properties
    "list_properties": list_properties,
    "get_property": get_property,
    "check_availability": check_availability,
    # Reservations
    "list_reservations": list_reservations,
    "get_reservation": get_reservation,
    "create_reservation": create_reservation,
    # Guest communication
    "send_guest_message": send_guest_message,
    "get_guest_messages": get_guest_messages,
}
