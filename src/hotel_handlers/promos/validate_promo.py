import logging
from pydantic import ValidationError

from hotel_core.schemas.promos import ValidatePromoRequest
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.wiring import build_promo_service
from hotel_handlers.errors import validation_response

logger = logging.getLogger(__name__)

table = get_table()
promo_service = build_promo_service(table)


def validate_promo(event, context):
    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = ValidatePromoRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return validation_response(e)

    try:
        result = promo_service.validate_promo_code(
            request_body.code, request_body.booking_amount
        )
        message = "Promo code is valid" if result.valid else result.reason
        return send_custom_response(200, message, result)

    except Exception:
        logger.exception("Unhandled error validating promo code")
        return send_custom_response(500, "Internal server error")
