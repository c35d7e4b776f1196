import logging

from hotel_core.utils.auth_context import get_caller, is_admin
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.wiring import build_report_service

logger = logging.getLogger(__name__)

table = get_table()
report_service = build_report_service(table)


def dashboard(event, context):
    try:
        _, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not is_admin(role):
        return send_custom_response(403, "Forbidden")

    try:
        stats = report_service.dashboard_stats()
        return send_custom_response(200, "Dashboard stats retrieved", stats)
    except Exception:
        logger.exception("Unhandled error building dashboard stats")
        return send_custom_response(500, "Internal server error")
