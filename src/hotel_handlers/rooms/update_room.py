import json
import logging

from hotel_core.utils.auth_context import get_caller, is_admin
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response
from hotel_handlers.wiring import build_room_service

logger = logging.getLogger(__name__)

table = get_table()
room_service = build_room_service(table)


def update_room(event, context):
    try:
        _, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not is_admin(role):
        return send_custom_response(403, "Only admins can update rooms")

    room_id = (event.get("pathParameters") or {}).get("room_id")
    if not room_id:
        return send_custom_response(400, "room_id is required in the path")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        body = json.loads(event["body"])
    except json.JSONDecodeError:
        return send_custom_response(400, "Invalid JSON body")

    is_available = body.get("is_available") if isinstance(body, dict) else None
    if not isinstance(is_available, bool):
        return send_custom_response(400, "is_available must be true or false")

    try:
        room = room_service.set_room_availability(room_id, is_available)
        return send_custom_response(200, "Room updated successfully", room)

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception(f"Unhandled error updating room {room_id}")
        return send_custom_response(500, "Internal server error")
