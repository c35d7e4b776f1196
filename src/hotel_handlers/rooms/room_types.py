import logging
from pydantic import ValidationError

from hotel_core.schemas.rooms import CreateRoomTypeRequest, UpdateRoomTypeRequest
from hotel_core.utils.auth_context import get_caller, is_admin
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response, validation_response
from hotel_handlers.wiring import build_room_type_service

logger = logging.getLogger(__name__)

table = get_table()
room_type_service = build_room_type_service(table)


def _require_admin(event):
    try:
        _, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")
    if not is_admin(role):
        return send_custom_response(403, "Only admins can manage room types")
    return None


def _room_type_id(event):
    return (event.get("pathParameters") or {}).get("room_type_id")


def get_room_types(event, context):
    params = event.get("queryStringParameters") or {}
    include_inactive = str(params.get("include_inactive", "")).lower() == "true"

    try:
        room_types = room_type_service.list_room_types(active_only=not include_inactive)
        return send_custom_response(
            200,
            "Room types retrieved successfully",
            {"count": len(room_types), "room_types": room_types},
        )
    except Exception:
        logger.exception("Unhandled error listing room types")
        return send_custom_response(500, "Internal server error")


def get_room_type(event, context):
    room_type_id = _room_type_id(event)
    if not room_type_id:
        return send_custom_response(400, "room_type_id is required in the path")

    try:
        room_type = room_type_service.get_room_type(room_type_id)
        return send_custom_response(200, "Room type retrieved successfully", room_type)
    except DOMAIN_ERRORS as err:
        return error_response(err)
    except Exception:
        logger.exception(f"Unhandled error fetching room type {room_type_id}")
        return send_custom_response(500, "Internal server error")


def add_room_type(event, context):
    denied = _require_admin(event)
    if denied:
        return denied

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = CreateRoomTypeRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return validation_response(e)

    try:
        room_type = room_type_service.create_room_type(request_body)
        return send_custom_response(201, "Room type created successfully", room_type)
    except DOMAIN_ERRORS as err:
        return error_response(err)
    except Exception:
        logger.exception("Unhandled error creating room type")
        return send_custom_response(500, "Internal server error")


def update_room_type(event, context):
    denied = _require_admin(event)
    if denied:
        return denied

    room_type_id = _room_type_id(event)
    if not room_type_id:
        return send_custom_response(400, "room_type_id is required in the path")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = UpdateRoomTypeRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return validation_response(e)

    try:
        room_type = room_type_service.update_room_type(room_type_id, request_body)
        return send_custom_response(200, "Room type updated successfully", room_type)
    except DOMAIN_ERRORS as err:
        return error_response(err)
    except Exception:
        logger.exception(f"Unhandled error updating room type {room_type_id}")
        return send_custom_response(500, "Internal server error")


def delete_room_type(event, context):
    denied = _require_admin(event)
    if denied:
        return denied

    room_type_id = _room_type_id(event)
    if not room_type_id:
        return send_custom_response(400, "room_type_id is required in the path")

    try:
        room_type = room_type_service.deactivate_room_type(room_type_id)
        return send_custom_response(200, "Room type deactivated", room_type)
    except DOMAIN_ERRORS as err:
        return error_response(err)
    except Exception:
        logger.exception(f"Unhandled error deactivating room type {room_type_id}")
        return send_custom_response(500, "Internal server error")
