import logging
from pydantic import ValidationError

from hotel_core.schemas.users import LoginRequest
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response, validation_response
from hotel_handlers.wiring import build_user_service

logger = logging.getLogger(__name__)

table = get_table()
service = build_user_service(table)


def login_handler(event, context):
    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = LoginRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return validation_response(e)

    try:
        token = service.login(request_body.email, request_body.password)
        return send_custom_response(status_code=200, message="login successful", data=token)
    except DOMAIN_ERRORS as err:
        return error_response(err)
    except Exception:
        logger.exception("Unhandled error during login")
        return send_custom_response(status_code=500, message="Internal server error")
