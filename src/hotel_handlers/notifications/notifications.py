import logging

from hotel_core.utils.auth_context import get_caller, is_admin
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response
from hotel_handlers.wiring import build_notification_service

logger = logging.getLogger(__name__)

table = get_table()
notification_service = build_notification_service(table)

TEMPLATES = {
    "confirmation": notification_service.send_booking_confirmation,
    "payment_reminder": notification_service.send_payment_reminder,
    "check_in": notification_service.send_check_in_instructions,
}


def get_notifications(event, context):
    try:
        user_id, _ = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        notifications = notification_service.get_user_notifications(user_id)
        return send_custom_response(
            200,
            "Notifications retrieved successfully",
            {"count": len(notifications), "notifications": notifications},
        )
    except Exception:
        logger.exception("Unhandled error listing notifications")
        return send_custom_response(500, "Internal server error")


def mark_notification_sent(event, context):
    try:
        user_id, _ = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    notification_id = (event.get("pathParameters") or {}).get("notification_id")
    if not notification_id:
        return send_custom_response(400, "notification_id is required in the path")

    try:
        notification = notification_service.mark_as_sent(user_id, notification_id)
        return send_custom_response(200, "Notification marked as sent", notification)
    except DOMAIN_ERRORS as err:
        return error_response(err)
    except Exception:
        logger.exception(f"Unhandled error updating notification {notification_id}")
        return send_custom_response(500, "Internal server error")


def send_booking_notification(event, context):
    try:
        _, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not is_admin(role):
        return send_custom_response(403, "Only admins can send notifications")

    path_params = event.get("pathParameters") or {}
    booking_id = path_params.get("booking_id")
    template = path_params.get("template")
    if not booking_id:
        return send_custom_response(400, "booking_id is required in the path")

    send = TEMPLATES.get(template)
    if send is None:
        return send_custom_response(
            400, f"Unknown template. Allowed: {sorted(TEMPLATES)}"
        )

    try:
        notifications = send(booking_id)
        return send_custom_response(201, "Notifications queued", notifications)
    except DOMAIN_ERRORS as err:
        return error_response(err)
    except Exception:
        logger.exception(f"Unhandled error sending {template} for booking {booking_id}")
        return send_custom_response(500, "Internal server error")
