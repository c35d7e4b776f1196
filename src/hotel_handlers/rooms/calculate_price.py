import logging
from pydantic import ValidationError

from hotel_core.schemas.bookings import RoomTypeStayRequest
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response, validation_response
from hotel_handlers.wiring import build_pricing_service

logger = logging.getLogger(__name__)

table = get_table()
pricing_service = build_pricing_service(table)


def calculate_price(event, context):
    params = event.get("queryStringParameters") or {}

    try:
        request = RoomTypeStayRequest.model_validate(params)
    except ValidationError as e:
        return validation_response(e)

    try:
        quote = pricing_service.quote(
            request.room_type_id, request.check_in, request.check_out
        )
        return send_custom_response(200, "Price calculated", quote)

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception("Unhandled error calculating price")
        return send_custom_response(500, "Internal server error")
