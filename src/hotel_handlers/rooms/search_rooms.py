import logging
from pydantic import ValidationError

from hotel_core.schemas.bookings import SearchRoomsRequest
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response, validation_response
from hotel_handlers.wiring import build_room_service

logger = logging.getLogger(__name__)

table = get_table()
room_service = build_room_service(table)


def search_rooms(event, context):
    params = event.get("queryStringParameters") or {}

    try:
        request = SearchRoomsRequest.model_validate(params)
    except ValidationError as e:
        return validation_response(e)

    try:
        room_types = room_service.search_available_rooms(
            check_in=request.check_in,
            check_out=request.check_out,
            guests=request.guests,
            category=request.room_type,
        )
        return send_custom_response(
            200,
            "Available rooms retrieved successfully",
            {"count": len(room_types), "room_types": room_types},
        )

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception("Unhandled error searching rooms")
        return send_custom_response(500, "Internal server error")
