import logging

from hotel_core.utils.auth_context import get_caller, is_admin
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response
from hotel_handlers.wiring import build_booking_service

logger = logging.getLogger(__name__)

table = get_table()
booking_service = build_booking_service(table)


def cancel_booking(event, context):
    try:
        user_id, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    booking_id = (event.get("pathParameters") or {}).get("booking_id")
    if not booking_id:
        return send_custom_response(400, "booking_id is required in the path")

    try:
        booking = booking_service.get_booking(booking_id)
        if booking.user_id != user_id and not is_admin(role):
            return send_custom_response(403, "Forbidden")

        cancelled = booking_service.cancel_booking(booking_id)
        return send_custom_response(200, "Booking cancelled successfully", cancelled)

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception(f"Unhandled error cancelling booking {booking_id}")
        return send_custom_response(500, "Internal server error")
