import logging
from pydantic import ValidationError

from hotel_core.schemas.promos import CreatePromoRequest, UpdatePromoRequest
from hotel_core.utils.auth_context import get_caller, is_admin
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response, validation_response
from hotel_handlers.wiring import build_promo_service

logger = logging.getLogger(__name__)

table = get_table()
promo_service = build_promo_service(table)


def create_promo(event, context):
    try:
        _, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not is_admin(role):
        return send_custom_response(403, "Only admins can create promo codes")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = CreatePromoRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return validation_response(e)

    try:
        offer = promo_service.create_promo(request_body)
        return send_custom_response(201, "Promo code created successfully", offer)

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception("Unhandled error creating promo code")
        return send_custom_response(500, "Internal server error")


def update_promo(event, context):
    try:
        _, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not is_admin(role):
        return send_custom_response(403, "Only admins can update promo codes")

    code = (event.get("pathParameters") or {}).get("code")
    if not code:
        return send_custom_response(400, "code is required in the path")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = UpdatePromoRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return validation_response(e)

    try:
        offer = promo_service.update_promo(code, request_body)
        return send_custom_response(200, "Promo code updated successfully", offer)

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception(f"Unhandled error updating promo code {code}")
        return send_custom_response(500, "Internal server error")


def list_promos(event, context):
    try:
        _, role = get_caller(event)
    except KeyError:
        role = None

    try:
        # guests only see offers they can use today
        offers = promo_service.list_promos() if is_admin(role) else promo_service.list_active_promos()
        return send_custom_response(
            200,
            "Promo codes retrieved successfully",
            {"count": len(offers), "promos": offers},
        )

    except Exception:
        logger.exception("Unhandled error listing promo codes")
        return send_custom_response(500, "Internal server error")
