import logging

from hotel_core.models.bookings import BookingStatus
from hotel_core.utils.auth_context import get_caller, is_admin
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response
from hotel_handlers.wiring import build_booking_service

logger = logging.getLogger(__name__)

table = get_table()
booking_service = build_booking_service(table)


def get_user_bookings(event, context):
    try:
        user_id, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    params = event.get("queryStringParameters") or {}
    requested_user_id = params.get("user_id", user_id)

    if requested_user_id != user_id and not is_admin(role):
        return send_custom_response(403, "Forbidden")

    try:
        bookings = booking_service.get_user_bookings(requested_user_id)
        return send_custom_response(
            200,
            "Bookings retrieved successfully",
            {"count": len(bookings), "bookings": bookings},
        )

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception("Unhandled error listing bookings")
        return send_custom_response(500, "Internal server error")


def get_booking(event, context):
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
        return send_custom_response(200, "Booking retrieved successfully", booking)

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception("Unhandled error fetching booking")
        return send_custom_response(500, "Internal server error")


def list_bookings(event, context):
    try:
        _, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not is_admin(role):
        return send_custom_response(403, "Forbidden")

    raw_status = (event.get("queryStringParameters") or {}).get("status")
    try:
        status = BookingStatus(raw_status.lower()) if raw_status else None
    except ValueError:
        return send_custom_response(400, f"Unknown booking status: {raw_status}")

    try:
        bookings = booking_service.list_bookings(status=status)
        return send_custom_response(
            200,
            "Bookings retrieved successfully",
            {"count": len(bookings), "bookings": bookings},
        )

    except Exception:
        logger.exception("Unhandled error listing all bookings")
        return send_custom_response(500, "Internal server error")
