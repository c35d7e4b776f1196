import logging

from hotel_core.utils.auth_context import get_caller
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response
from hotel_handlers.wiring import build_promo_service

logger = logging.getLogger(__name__)

table = get_table()
promo_service = build_promo_service(table)


def use_promo(event, context):
    try:
        get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    code = (event.get("pathParameters") or {}).get("code")
    if not code:
        return send_custom_response(400, "code is required in the path")

    try:
        offer = promo_service.use_promo_code(code)
        return send_custom_response(200, "Promo code applied", offer)

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception(f"Unhandled error using promo code {code}")
        return send_custom_response(500, "Internal server error")
