import logging
from pydantic import ValidationError

from hotel_core.schemas.users import SignupRequest
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response, validation_response
from hotel_handlers.wiring import build_user_service

logger = logging.getLogger(__name__)

table = get_table()
service = build_user_service(table)


def signup_handler(event, context):
    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = SignupRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return validation_response(e)

    try:
        token = service.signup(
            email=request_body.email,
            password=request_body.password,
            first_name=request_body.first_name,
            last_name=request_body.last_name,
            phone=request_body.phone,
        )
        return send_custom_response(
            status_code=201, message="signup successful", data=token
        )
    except DOMAIN_ERRORS as err:
        return error_response(err)
    except Exception:
        logger.exception("Unhandled error during signup")
        return send_custom_response(status_code=500, message="Internal server error")
