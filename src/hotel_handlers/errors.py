from pydantic import ValidationError

from hotel_core.utils.custom_exceptions import (
    CapacityExceeded,
    DuplicateEmail,
    InvalidCredentials,
    InvalidDateRange,
    InvalidPromoCode,
    InvalidRefundAmount,
    InvalidRequest,
    InvalidStatus,
    NoAvailableRooms,
    NotFoundException,
    PromoCodeExists,
    PromoUsageLimitReached,
    RoomAlreadyExists,
    RoomTypeMismatch,
)
from hotel_core.utils.custom_response import send_custom_response

DOMAIN_ERRORS = (
    NotFoundException,
    InvalidDateRange,
    CapacityExceeded,
    InvalidStatus,
    RoomTypeMismatch,
    InvalidRefundAmount,
    InvalidPromoCode,
    InvalidRequest,
    NoAvailableRooms,
    RoomAlreadyExists,
    PromoCodeExists,
    PromoUsageLimitReached,
    DuplicateEmail,
    InvalidCredentials,
)

_STATUS_CODES = (
    ((InvalidDateRange, CapacityExceeded, InvalidStatus, RoomTypeMismatch,
      InvalidRefundAmount, InvalidPromoCode, InvalidRequest), 400),
    ((InvalidCredentials,), 401),
    ((NoAvailableRooms, RoomAlreadyExists, PromoCodeExists, DuplicateEmail,
      PromoUsageLimitReached), 409),
)


def error_response(err: Exception):
    if isinstance(err, NotFoundException):
        return send_custom_response(err.status_code, str(err))
    for classes, status_code in _STATUS_CODES:
        if isinstance(err, classes):
            return send_custom_response(status_code, str(err))
    return send_custom_response(500, "Internal server error")


def validation_response(err: ValidationError):
    formatted = "; ".join(
        f"{'.'.join(map(str, e['loc']))}: {e['msg']}" if e["loc"] else e["msg"]
        for e in err.errors()
    )
    return send_custom_response(400, formatted or "Invalid request")
