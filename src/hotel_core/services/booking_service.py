import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import uuid4

from hotel_core.models.bookings import (
    CANCELLABLE_STATUSES,
    TERMINAL_STATUSES,
    Booking,
    BookingStatus,
    can_transition,
)
from hotel_core.repository.booking_repo import BookingRepository
from hotel_core.repository.room_repo import RoomRepository
from hotel_core.repository.room_type_repo import RoomTypeRepository
from hotel_core.repository.user_repo import UserRepository
from hotel_core.schemas.bookings import CreateBookingRequest, UpdateBookingRequest
from hotel_core.services.availability_service import AvailabilityService
from hotel_core.services.pricing_service import PricingService
from hotel_core.services.promo_service import PromoService
from hotel_core.utils.constants import MAX_STAY
from hotel_core.utils.custom_exceptions import (
    CapacityExceeded,
    InvalidDateRange,
    InvalidPromoCode,
    InvalidStatus,
    InvalidStatusTransition,
    NoAvailableRooms,
    NotFoundException,
    RoomTypeMismatch,
)
from hotel_core.utils.dates import nights_between
from hotel_core.utils.money import to_money

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(
        self,
        booking_repo: BookingRepository,
        user_repo: UserRepository,
        room_type_repo: RoomTypeRepository,
        room_repo: RoomRepository,
        availability_service: AvailabilityService,
        pricing_service: PricingService,
        promo_service: Optional[PromoService] = None,
        allow_past_check_in: bool = False,
    ):
        self.booking_repo = booking_repo
        self.user_repo = user_repo
        self.room_type_repo = room_type_repo
        self.room_repo = room_repo
        self.availability_service = availability_service
        self.pricing_service = pricing_service
        self.promo_service = promo_service
        self.allow_past_check_in = allow_past_check_in

    def create_booking(self, req: CreateBookingRequest, user_id: str) -> Booking:
        if self.user_repo.get_by_id(user_id) is None:
            raise NotFoundException("user", user_id, 404)

        room_type = self.room_type_repo.get_room_type(req.room_type_id)
        if room_type is None or not room_type.is_active:
            raise NotFoundException("room type", req.room_type_id, 404)

        self._validate_dates(req.check_in, req.check_out)

        if req.guests > room_type.max_occupancy:
            raise CapacityExceeded(
                f"Guest count ({req.guests}) exceeds maximum occupancy "
                f"({room_type.max_occupancy}) for this room type"
            )

        snapshot = self.availability_service.check(
            req.room_type_id, req.check_in, req.check_out
        )
        if not snapshot.is_available:
            raise NoAvailableRooms("No rooms available for the selected dates")

        total = self.pricing_service.calculate_price(
            req.room_type_id, req.check_in, req.check_out
        )

        discount = Decimal("0.00")
        promo_code = None
        if req.promo_code:
            discount, promo_code = self._apply_promo(req.promo_code, total)

        # best effort: capacity allows the stay even if no room can be pinned
        room_id = snapshot.free_rooms[0].room_id if snapshot.free_rooms else None

        booking = Booking(
            booking_id=str(uuid4()),
            user_id=user_id,
            room_type_id=req.room_type_id,
            room_id=room_id,
            check_in=req.check_in,
            check_out=req.check_out,
            guests=req.guests,
            total_amount=to_money(max(total - discount, Decimal("0"))),
            discount_amount=discount,
            promo_code=promo_code,
            special_requests=req.special_requests,
        )
        self.booking_repo.add_booking(
            booking, capacity=snapshot.total_rooms, promo_code=promo_code
        )
        if room_id is None:
            logger.warning(f"Booking {booking.booking_id} created without a room assignment")
        logger.info(
            f"Created booking {booking.booking_id} for room type {booking.room_type_id} "
            f"{booking.check_in} to {booking.check_out}"
        )
        return booking

    def _validate_dates(self, check_in: date, check_out: date):
        if check_out <= check_in:
            raise InvalidDateRange("Check-out date must be after check-in date")
        if nights_between(check_in, check_out) > MAX_STAY:
            raise InvalidDateRange(f"Maximum stay is {MAX_STAY} nights")
        if not self.allow_past_check_in and check_in < date.today():
            raise InvalidDateRange("Check-in date cannot be in the past")

    def _apply_promo(self, code: str, total: Decimal):
        if self.promo_service is None:
            raise InvalidPromoCode("Promo codes are not accepted")
        result = self.promo_service.validate_promo_code(code, total)
        if not result.valid:
            raise InvalidPromoCode(result.reason or "Invalid promo code")
        return result.discount, result.offer.code

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.booking_repo.get_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundException("booking", booking_id, 404)
        return booking

    def get_user_bookings(self, user_id: str) -> List[Booking]:
        if self.user_repo.get_by_id(user_id) is None:
            raise NotFoundException("user", user_id, 404)
        return self.booking_repo.get_user_bookings(user_id)

    def list_bookings(self, status: Optional[BookingStatus] = None) -> List[Booking]:
        bookings = self.booking_repo.list_bookings(status=status)
        return sorted(bookings, key=lambda b: (b.check_in, b.booking_id))

    def update_booking(self, booking_id: str, req: UpdateBookingRequest) -> Booking:
        booking = self.get_booking(booking_id)
        changes = req.provided()
        updated = booking

        if "room_id" in changes:
            room_id = changes["room_id"]
            if room_id != booking.room_id and booking.status in TERMINAL_STATUSES:
                raise InvalidStatus(
                    f"Cannot change the room of a booking with status: {booking.status.value}"
                )
            if room_id is not None and room_id != booking.room_id:
                self._check_room_for(booking, room_id)
            updated = replace(updated, room_id=room_id)

        if changes.get("status") is not None:
            status = BookingStatus(changes["status"])
            if not can_transition(booking.status, status):
                raise InvalidStatusTransition(booking.status.value, status.value)
            updated = replace(updated, status=status)

        if "special_requests" in changes:
            updated = replace(updated, special_requests=changes["special_requests"])

        if updated == booking:
            return booking

        self.booking_repo.update_booking(booking, updated)
        logger.info(
            f"Updated booking {booking_id}: status {booking.status.value} -> "
            f"{updated.status.value}, room {booking.room_id} -> {updated.room_id}"
        )
        return updated

    def _check_room_for(self, booking: Booking, room_id: str):
        room = self.room_repo.get_room_by_id(room_id)
        if room is None or not room.is_available:
            raise NotFoundException("available room", room_id, 404)
        if room.room_type_id != booking.room_type_id:
            raise RoomTypeMismatch(
                f"Room {room.room_number} does not belong to room type {booking.room_type_id}"
            )
        if not self.availability_service.is_room_free(
            room, booking.check_in, booking.check_out, exclude_booking_id=booking.booking_id
        ):
            raise NoAvailableRooms(
                f"Room {room.room_number} is already booked between "
                f"{booking.check_in} and {booking.check_out}"
            )

    def cancel_booking(self, booking_id: str) -> Booking:
        booking = self.get_booking(booking_id)
        if booking.status not in CANCELLABLE_STATUSES:
            raise InvalidStatus(f"Cannot cancel booking with status: {booking.status.value}")

        cancelled = replace(booking, status=BookingStatus.CANCELLED)
        self.booking_repo.update_booking(booking, cancelled)
        logger.info(f"Cancelled booking {booking_id}")
        return cancelled
