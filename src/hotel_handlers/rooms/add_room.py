import logging
from pydantic import ValidationError

from hotel_core.schemas.rooms import CreateRoomRequest
from hotel_core.utils.auth_context import get_caller, is_admin
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response, validation_response
from hotel_handlers.wiring import build_room_service

logger = logging.getLogger(__name__)

table = get_table()
room_service = build_room_service(table)


def add_room(event, context):
    try:
        _, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not is_admin(role):
        return send_custom_response(403, "Only admins can add rooms")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = CreateRoomRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return validation_response(e)

    try:
        room = room_service.add_room(request_body)
        return send_custom_response(201, "Room added successfully", room)

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception("Unhandled error adding room")
        return send_custom_response(500, "Internal server error")
