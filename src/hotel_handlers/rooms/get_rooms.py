import logging

from hotel_core.utils.auth_context import get_caller, is_admin
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response
from hotel_handlers.wiring import build_room_service

logger = logging.getLogger(__name__)

table = get_table()
room_service = build_room_service(table)


def get_rooms(event, context):
    room_type_id = (event.get("pathParameters") or {}).get("room_type_id")
    if not room_type_id:
        return send_custom_response(400, "room_type_id is required in the path")

    try:
        rooms = room_service.get_rooms_by_room_type(room_type_id)
        return send_custom_response(
            200,
            "Rooms retrieved successfully",
            {"count": len(rooms), "rooms": rooms},
        )

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception("Unhandled error listing rooms")
        return send_custom_response(500, "Internal server error")


def list_rooms(event, context):
    try:
        _, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not is_admin(role):
        return send_custom_response(403, "Forbidden")

    try:
        rooms = room_service.list_rooms()
        return send_custom_response(
            200,
            "Rooms retrieved successfully",
            {"count": len(rooms), "rooms": rooms},
        )

    except Exception:
        logger.exception("Unhandled error listing all rooms")
        return send_custom_response(500, "Internal server error")
