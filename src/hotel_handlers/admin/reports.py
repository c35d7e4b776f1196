import logging

from hotel_core.utils.auth_context import get_caller, is_admin
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dates import parse_iso_date
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response
from hotel_handlers.wiring import build_report_service

logger = logging.getLogger(__name__)

table = get_table()
report_service = build_report_service(table)


def _report_period(event):
    params = event.get("queryStringParameters") or {}
    return parse_iso_date(params["start_date"]), parse_iso_date(params["end_date"])


def _report(event, build, name):
    try:
        _, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not is_admin(role):
        return send_custom_response(403, "Forbidden")

    try:
        start, end = _report_period(event)
    except KeyError:
        return send_custom_response(400, "start_date and end_date are required")
    except ValueError:
        return send_custom_response(400, "Dates must be in YYYY-MM-DD format")

    try:
        return send_custom_response(200, f"{name} report generated", build(start, end))
    except DOMAIN_ERRORS as err:
        return error_response(err)
    except Exception:
        logger.exception(f"Unhandled error building {name.lower()} report")
        return send_custom_response(500, "Internal server error")


def revenue_report(event, context):
    return _report(event, report_service.revenue_report, "Revenue")


def occupancy_report(event, context):
    return _report(event, report_service.occupancy_report, "Occupancy")
