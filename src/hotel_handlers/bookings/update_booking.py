import logging
from pydantic import ValidationError

from hotel_core.schemas.bookings import UpdateBookingRequest
from hotel_core.utils.auth_context import get_caller, is_admin
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response, validation_response
from hotel_handlers.wiring import build_booking_service

logger = logging.getLogger(__name__)

table = get_table()
booking_service = build_booking_service(table)


def update_booking(event, context):
    try:
        _, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    # status changes and room moves are front desk operations
    if not is_admin(role):
        return send_custom_response(403, "Only admins can update bookings")

    booking_id = (event.get("pathParameters") or {}).get("booking_id")
    if not booking_id:
        return send_custom_response(400, "booking_id is required in the path")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = UpdateBookingRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return validation_response(e)

    try:
        booking = booking_service.update_booking(booking_id, request_body)
        return send_custom_response(200, "Booking updated successfully", booking)

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception(f"Unhandled error updating booking {booking_id}")
        return send_custom_response(500, "Internal server error")
