"""Static MCP manifest describing the Guesty tools."""

from typing import Any

from guesty_mcp.tools.validation import RESERVATION_STATUSES

_PAGINATION_PROPERTIES: dict[str, Any] = {
    "limit": {
        "type": "integer",
        "description": "Maximum number of results to return",
    },
    "skip": {
        "type": "integer",
        "description": "Number of results to skip for pagination",
    },
}

TOOLS: list[dict[str, Any]] = [
    {
        "name": "list_properties",
        "description": "List Guesty properties with optional filtering",
        "parameters": {
            "type": "object",
            "properties": {
                "filters": {
                    "type": "object",
                    "description": "JSON filtering criteria for properties",
                },
                **_PAGINATION_PROPERTIES,
            },
        },
    },
    {
        "name": "get_property",
        "description": "Get details for a specific property by ID",
        "parameters": {
            "type": "object",
            "required": ["property_id"],
            "properties": {
                "property_id": {
                    "type": "string",
                    "description": "ID of the property to retrieve",
                },
                "fields": {
                    "type": "string",
                    "description": "Comma-separated list of fields to include in the response",
                },
            },
        },
    },
    {
        "name": "check_availability",
        "description": "Check availability of properties for specific dates",
        "parameters": {
            "type": "object",
            "required": ["check_in", "check_out"],
            "properties": {
                "property_id": {
                    "type": "string",
                    "description": "Optional ID of a specific property to check",
                },
                "check_in": {
                    "type": "string",
                    "description": "Check-in date in YYYY-MM-DD format",
                },
                "check_out": {
                    "type": "string",
                    "description": "Check-out date in YYYY-MM-DD format",
                },
                "min_occupancy": {
                    "type": "integer",
                    "description": "Minimum occupancy requirement",
                },
            },
        },
    },
    {
        "name": "list_reservations",
        "description": "List reservations with optional filtering",
        "parameters": {
            "type": "object",
            "properties": {
                "filters": {
                    "type": "object",
                    "description": "JSON filtering criteria for reservations",
                },
                **_PAGINATION_PROPERTIES,
            },
        },
    },
    {
        "name": "get_reservation",
        "description": "Get details for a specific reservation by ID",
        "parameters": {
            "type": "object",
            "required": ["reservation_id"],
            "properties": {
                "reservation_id": {
                    "type": "string",
                    "description": "ID of the reservation to retrieve",
                },
                "fields": {
                    "type": "string",
                    "description": "Comma-separated list of fields to include in the response",
                },
            },
        },
    },
    {
        "name": "create_reservation",
        "description": "Create a new reservation in Guesty",
        "parameters": {
            "type": "object",
            "required": ["listing_id", "check_in_date", "check_out_date"],
            "properties": {
                "listing_id": {
                    "type": "string",
                    "description": "ID of the property for the reservation",
                },
                "check_in_date": {
                    "type": "string",
                    "description": "Check-in date in YYYY-MM-DD format",
                },
                "check_out_date": {
                    "type": "string",
                    "description": "Check-out date in YYYY-MM-DD format",
                },
                "guest_id": {
                    "type": "string",
                    "description": "ID of an existing guest (if available)",
                },
                "guest_data": {
                    "type": "object",
                    "description": "Data for creating a new guest if guest_id is not provided",
                },
                "status": {
                    "type": "string",
                    "description": "Reservation status (default: inquiry)",
                    "enum": list(RESERVATION_STATUSES),
                },
            },
        },
    },
    {
        "name": "send_guest_message",
        "description": "Send a message to a guest for a specific reservation",
        "parameters": {
            "type": "object",
            "required": ["reservation_id", "message"],
            "properties": {
                "reservation_id": {
                    "type": "string",
                    "description": "ID of the reservation",
                },
                "message": {
                    "type": "string",
                    "description": "Message content to send to the guest",
                },
                "subject": {
                    "type": "string",
                    "description": (
                        'Subject line for the message (default: "Message from Property Manager")'
                    ),
                },
            },
        },
    },
    {
        "name": "get_guest_messages",
        "description": "Get message history for a specific reservation",
        "parameters": {
            "type": "object",
            "required": ["reservation_id"],
            "properties": {
                "reservation_id": {
                    "type": "string",
                    "description": "ID of the reservation",
                },
                "limit": {
                    "type": "integer",
                    "description": "Maximum number of messages to return",
                },
            },
        },
    },
]

MANIFEST: dict[str, Any] = {
    "schema_version": "1",
    "name": "guesty-mcp",
    "description": "MCP server for Guesty Property Management API",
    "system_prompt": (
        "You are a Guesty integration assistant. "
        "Handle property, reservation, guest & message operations."
    ),
    "tools": TOOLS,
}
