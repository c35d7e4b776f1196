import logging
from pydantic import ValidationError

from hotel_core.schemas.bookings import CreateBookingRequest
from hotel_core.utils.auth_context import get_caller
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response, validation_response
from hotel_handlers.wiring import build_booking_service

logger = logging.getLogger(__name__)

table = get_table()
booking_service = build_booking_service(table)


def create_booking(event, context):
    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        user_id, _ = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        request_body = CreateBookingRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return validation_response(e)

    try:
        booking = booking_service.create_booking(request_body, user_id)
        return send_custom_response(201, "Booking created successfully", booking)

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception("Unhandled error creating booking")
        return send_custom_response(500, "Internal server error")
