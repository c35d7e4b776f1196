import logging
from pydantic import ValidationError

from hotel_core.schemas.bookings import RoomTypeStayRequest
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response, validation_response
from hotel_handlers.wiring import build_room_service

logger = logging.getLogger(__name__)

table = get_table()
room_service = build_room_service(table)


def check_availability(event, context):
    params = event.get("queryStringParameters") or {}

    try:
        request = RoomTypeStayRequest.model_validate(params)
    except ValidationError as e:
        return validation_response(e)

    try:
        available = room_service.check_availability(
            request.room_type_id, request.check_in, request.check_out
        )
        return send_custom_response(
            200,
            "Availability checked",
            {
                "room_type_id": request.room_type_id,
                "check_in": request.check_in,
                "check_out": request.check_out,
                "available": available,
            },
        )

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception("Unhandled error checking availability")
        return send_custom_response(500, "Internal server error")
