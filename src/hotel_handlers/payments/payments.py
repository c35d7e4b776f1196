import logging
from pydantic import ValidationError

from hotel_core.schemas.payments import CreatePaymentRequest, RefundRequest, UpdatePaymentRequest
from hotel_core.utils.auth_context import get_caller, is_admin
from hotel_core.utils.custom_response import send_custom_response
from hotel_core.utils.dynamodb import get_table
from hotel_handlers.errors import DOMAIN_ERRORS, error_response, validation_response
from hotel_handlers.wiring import build_booking_service, build_payment_service

logger = logging.getLogger(__name__)

table = get_table()
payment_service = build_payment_service(table)
booking_service = build_booking_service(table)


def create_payment(event, context):
    try:
        user_id, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = CreatePaymentRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return validation_response(e)

    try:
        booking = booking_service.get_booking(request_body.booking_id)
        if booking.user_id != user_id and not is_admin(role):
            return send_custom_response(403, "Forbidden")

        payment = payment_service.create_payment(request_body)
        return send_custom_response(201, "Payment created successfully", payment)

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception("Unhandled error creating payment")
        return send_custom_response(500, "Internal server error")


def get_booking_payments(event, context):
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

        payments = payment_service.get_payments_by_booking(booking_id)
        return send_custom_response(
            200,
            "Payments retrieved successfully",
            {"count": len(payments), "payments": payments},
        )

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception(f"Unhandled error listing payments for {booking_id}")
        return send_custom_response(500, "Internal server error")


def update_payment(event, context):
    try:
        _, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not is_admin(role):
        return send_custom_response(403, "Only admins can update payments")

    payment_id = (event.get("pathParameters") or {}).get("payment_id")
    if not payment_id:
        return send_custom_response(400, "payment_id is required in the path")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = UpdatePaymentRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return validation_response(e)

    try:
        payment = payment_service.update_payment(payment_id, request_body)
        return send_custom_response(200, "Payment updated successfully", payment)

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception(f"Unhandled error updating payment {payment_id}")
        return send_custom_response(500, "Internal server error")


def refund_payment(event, context):
    try:
        _, role = get_caller(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not is_admin(role):
        return send_custom_response(403, "Only admins can refund payments")

    payment_id = (event.get("pathParameters") or {}).get("payment_id")
    if not payment_id:
        return send_custom_response(400, "payment_id is required in the path")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = RefundRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return validation_response(e)

    try:
        payment = payment_service.process_refund(payment_id, request_body.amount)
        return send_custom_response(200, "Refund processed successfully", payment)

    except DOMAIN_ERRORS as err:
        return error_response(err)

    except Exception:
        logger.exception(f"Unhandled error refunding payment {payment_id}")
        return send_custom_response(500, "Internal server error")
