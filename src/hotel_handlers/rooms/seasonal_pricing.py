import json
import logging
from decimal import Decimal, InvalidOperation
from pydantic import ValidationError

from hotel_core.schemas.rooms import CreateSeasonalPricingRequest
from hotel_core.utils.auth_context import get_caller, is_admin
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response, validation_response
from hotel_handlers.wiring import build_pricing_service

logger = logging.getLogger(__name__)

table = get_table()
pricing_service = build_pricing_service(table)


def _require_admin(event):
    try:
        _, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")
    if not is_admin(role):
        return send_custom_response(403, "Only admins can manage seasonal pricing")
    return None


def get_seasonal_pricing(event, context):
    room_type_id = (event.get("pathParameters") or {}).get("room_type_id")
    if not room_type_id:
        return send_custom_response(400, "room_type_id is required in the path")

    try:
        rules = pricing_service.get_seasonal_pricing(room_type_id)
        return send_custom_response(
            200,
            "Seasonal pricing retrieved successfully",
            {"count": len(rules), "seasonal_pricing": rules},
        )
    except Exception:
        logger.exception("Unhandled error listing seasonal pricing")
        return send_custom_response(500, "Internal server error")


def list_seasonal_pricing(event, context):
    try:
        rules = pricing_service.list_seasonal_pricing()
        return send_custom_response(
            200,
            "Seasonal pricing retrieved successfully",
            {"count": len(rules), "seasonal_pricing": rules},
        )
    except Exception:
        logger.exception("Unhandled error listing all seasonal pricing")
        return send_custom_response(500, "Internal server error")


def add_seasonal_pricing(event, context):
    denied = _require_admin(event)
    if denied:
        return denied

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = CreateSeasonalPricingRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return validation_response(e)

    try:
        rule = pricing_service.create_seasonal_pricing(request_body)
        return send_custom_response(201, "Seasonal pricing created successfully", rule)
    except DOMAIN_ERRORS as err:
        return error_response(err)
    except Exception:
        logger.exception("Unhandled error creating seasonal pricing")
        return send_custom_response(500, "Internal server error")


def update_seasonal_pricing(event, context):
    denied = _require_admin(event)
    if denied:
        return denied

    path_params = event.get("pathParameters") or {}
    room_type_id = path_params.get("room_type_id")
    pricing_id = path_params.get("pricing_id")
    if not room_type_id or not pricing_id:
        return send_custom_response(400, "room_type_id and pricing_id are required in the path")

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        return send_custom_response(400, "Invalid JSON body")

    try:
        if body.get("is_active") is False:
            rule = pricing_service.deactivate_seasonal_pricing(room_type_id, pricing_id)
        else:
            try:
                multiplier = Decimal(str(body["price_multiplier"]))
            except (KeyError, InvalidOperation):
                return send_custom_response(400, "price_multiplier must be a number")
            if not multiplier.is_finite() or multiplier <= 0:
                return send_custom_response(400, "price_multiplier must be positive")
            rule = pricing_service.update_multiplier(room_type_id, pricing_id, multiplier)
        return send_custom_response(200, "Seasonal pricing updated successfully", rule)
    except DOMAIN_ERRORS as err:
        return error_response(err)
    except Exception:
        logger.exception(f"Unhandled error updating seasonal pricing {pricing_id}")
        return send_custom_response(500, "Internal server error")
