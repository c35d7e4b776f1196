class NotFoundException(Exception):
    def __init__(self, resource: str, identifier: str, status_code: int = 404):
        self.resource = resource
        self.identifier = identifier
        self.status_code = status_code

    def __str__(self):
        return f"{self.resource} '{self.identifier}' not found"


class InvalidDateRange(Exception):
    pass


class CapacityExceeded(Exception):
    pass


class NoAvailableRooms(Exception):
    pass


class InvalidStatus(Exception):
    pass


class InvalidStatusTransition(InvalidStatus):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Invalid status transition from {current} to {requested}")


class RoomTypeMismatch(Exception):
    pass


class RoomAlreadyExists(Exception):
    pass


class InvalidRefundAmount(Exception):
    pass


class PromoCodeExists(Exception):
    pass


class InvalidPromoCode(Exception):
    pass


class PromoUsageLimitReached(Exception):
    pass


class DuplicateEmail(Exception):
    pass


class InvalidCredentials(Exception):
    pass


class InvalidRequest(Exception):
    pass
