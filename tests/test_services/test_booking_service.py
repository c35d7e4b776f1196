import unittest
from dataclasses import replace
from itertools import product
from unittest.mock import MagicMock
from datetime import date, timedelta
from decimal import Decimal

from hotel_core.models.bookings import ALLOWED_TRANSITIONS, Booking, BookingStatus
from hotel_core.models.promos import DiscountType, PromoOffer, PromoValidation
from hotel_core.models.rooms import AvailabilitySnapshot, Room, RoomCategory, RoomType
from hotel_core.schemas.bookings import CreateBookingRequest, UpdateBookingRequest
from hotel_core.services.booking_service import BookingService
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


class TestBookingService(unittest.TestCase):

    def setUp(self):
        self.booking_repo = MagicMock()
        self.user_repo = MagicMock()
        self.room_type_repo = MagicMock()
        self.room_repo = MagicMock()
        self.availability = MagicMock()
        self.pricing = MagicMock()
        self.promos = MagicMock()

        self.service = BookingService(
            booking_repo=self.booking_repo,
            user_repo=self.user_repo,
            room_type_repo=self.room_type_repo,
            room_repo=self.room_repo,
            availability_service=self.availability,
            pricing_service=self.pricing,
            promo_service=self.promos,
        )

        self.user_repo.get_by_id.return_value = MagicMock(user_id="u1")
        self.room_type_repo.get_room_type.return_value = RoomType(
            room_type_id="rt1",
            name="Deluxe",
            category=RoomCategory.DELUXE,
            base_price=Decimal("100.00"),
            max_occupancy=2,
        )
        self.room = Room(room_id="r1", room_number="101", room_type_id="rt1")
        self.availability.check.return_value = AvailabilitySnapshot(
            total_rooms=2,
            conflicting_bookings=0,
            unassigned_conflicts=0,
            free_rooms=[self.room],
        )
        self.pricing.calculate_price.return_value = Decimal("200.00")

        self.check_in = date.today() + timedelta(days=10)
        self.req = CreateBookingRequest(
            room_type_id="rt1",
            check_in=self.check_in,
            check_out=self.check_in + timedelta(days=2),
            guests=2,
        )

    def _booking(self, status=BookingStatus.CONFIRMED, room_id="r1"):
        return Booking(
            booking_id="b1",
            user_id="u1",
            room_type_id="rt1",
            room_id=room_id,
            check_in=self.check_in,
            check_out=self.check_in + timedelta(days=2),
            guests=2,
            total_amount=Decimal("200.00"),
            status=status,
        )

    def test_create_booking_success(self):
        booking = self.service.create_booking(self.req, "u1")

        self.assertEqual(booking.status, BookingStatus.PENDING)
        self.assertEqual(booking.total_amount, Decimal("200.00"))
        self.assertEqual(booking.room_id, "r1")
        self.assertEqual(booking.nights, 2)
        self.booking_repo.add_booking.assert_called_once_with(
            booking, capacity=2, promo_code=None
        )

    def test_create_booking_requires_a_free_room(self):
        self.availability.check.return_value = AvailabilitySnapshot(
            total_rooms=1, conflicting_bookings=0, unassigned_conflicts=0, free_rooms=[]
        )
        # capacity alone is not enough, a room must be free too
        with self.assertRaises(NoAvailableRooms):
            self.service.create_booking(self.req, "u1")

    def test_create_booking_user_not_found(self):
        self.user_repo.get_by_id.return_value = None

        with self.assertRaises(NotFoundException):
            self.service.create_booking(self.req, "missing")

        self.booking_repo.add_booking.assert_not_called()

    def test_create_booking_room_type_not_found(self):
        self.room_type_repo.get_room_type.return_value = None

        with self.assertRaises(NotFoundException):
            self.service.create_booking(self.req, "u1")

    def test_create_booking_inactive_room_type(self):
        self.room_type_repo.get_room_type.return_value.is_active = False

        with self.assertRaises(NotFoundException):
            self.service.create_booking(self.req, "u1")

    def test_create_booking_capacity_exceeded(self):
        req = self.req.model_copy(update={"guests": 5})

        with self.assertRaises(CapacityExceeded):
            self.service.create_booking(req, "u1")

        self.availability.check.assert_not_called()
        self.booking_repo.add_booking.assert_not_called()

    def test_create_booking_in_the_past(self):
        past = date.today() - timedelta(days=1)
        req = self.req.model_copy(update={"check_in": past, "check_out": past + timedelta(days=2)})

        with self.assertRaises(InvalidDateRange):
            self.service.create_booking(req, "u1")

    def test_create_booking_past_allowed_when_configured(self):
        self.service.allow_past_check_in = True
        past = date.today() - timedelta(days=5)
        req = self.req.model_copy(update={"check_in": past, "check_out": past + timedelta(days=2)})

        booking = self.service.create_booking(req, "u1")

        self.assertEqual(booking.check_in, past)

    def test_create_booking_no_availability(self):
        self.availability.check.return_value = AvailabilitySnapshot(
            total_rooms=1, conflicting_bookings=1, unassigned_conflicts=0, free_rooms=[]
        )

        with self.assertRaises(NoAvailableRooms):
            self.service.create_booking(self.req, "u1")

        self.booking_repo.add_booking.assert_not_called()

    def test_create_booking_with_promo(self):
        offer = PromoOffer(
            code="SUMMER20",
            name="Summer",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=Decimal("20"),
            valid_from=date.today(),
            valid_until=date.today() + timedelta(days=90),
        )
        self.promos.validate_promo_code.return_value = PromoValidation(
            True, Decimal("40.00"), offer=offer
        )
        req = self.req.model_copy(update={"promo_code": "summer20"})

        booking = self.service.create_booking(req, "u1")

        self.assertEqual(booking.total_amount, Decimal("160.00"))
        self.assertEqual(booking.discount_amount, Decimal("40.00"))
        self.assertEqual(booking.promo_code, "SUMMER20")
        self.booking_repo.add_booking.assert_called_once_with(
            booking, capacity=2, promo_code="SUMMER20"
        )

    def test_create_booking_with_invalid_promo(self):
        self.promos.validate_promo_code.return_value = PromoValidation(
            False, Decimal("0.00"), reason="Promo code not found"
        )
        req = self.req.model_copy(update={"promo_code": "NOPE"})

        with self.assertRaises(InvalidPromoCode):
            self.service.create_booking(req, "u1")

        self.booking_repo.add_booking.assert_not_called()

    def test_get_booking_not_found(self):
        self.booking_repo.get_booking_by_id.return_value = None

        with self.assertRaises(NotFoundException):
            self.service.get_booking("missing")

    def test_get_user_bookings_requires_user(self):
        self.user_repo.get_by_id.return_value = None

        with self.assertRaises(NotFoundException):
            self.service.get_user_bookings("missing")

    def test_status_transitions(self):
        for current, requested in product(BookingStatus, BookingStatus):
            if current == requested:
                continue
            with self.subTest(current=current, requested=requested):
                self.booking_repo.reset_mock()
                self.booking_repo.get_booking_by_id.return_value = self._booking(status=current)
                req = UpdateBookingRequest(status=requested)

                if requested in ALLOWED_TRANSITIONS[current]:
                    updated = self.service.update_booking("b1", req)
                    self.assertEqual(updated.status, requested)
                    self.booking_repo.update_booking.assert_called_once()
                else:
                    with self.assertRaises(InvalidStatusTransition):
                        self.service.update_booking("b1", req)
                    self.booking_repo.update_booking.assert_not_called()

    def test_terminal_statuses_have_no_exits(self):
        self.assertEqual(ALLOWED_TRANSITIONS[BookingStatus.CANCELLED], frozenset())
        self.assertEqual(ALLOWED_TRANSITIONS[BookingStatus.COMPLETED], frozenset())

    def test_update_booking_no_changes(self):
        booking = self._booking()
        self.booking_repo.get_booking_by_id.return_value = booking

        result = self.service.update_booking("b1", UpdateBookingRequest())

        self.assertEqual(result, booking)
        self.booking_repo.update_booking.assert_not_called()

    def test_update_booking_assign_room(self):
        self.booking_repo.get_booking_by_id.return_value = self._booking(room_id=None)
        self.room_repo.get_room_by_id.return_value = Room(
            room_id="r2", room_number="102", room_type_id="rt1"
        )
        self.availability.is_room_free.return_value = True

        updated = self.service.update_booking("b1", UpdateBookingRequest(room_id="r2"))

        self.assertEqual(updated.room_id, "r2")
        self.availability.is_room_free.assert_called_once()
        self.assertEqual(
            self.availability.is_room_free.call_args.kwargs["exclude_booking_id"], "b1"
        )

    def test_update_booking_room_type_mismatch(self):
        self.booking_repo.get_booking_by_id.return_value = self._booking()
        self.room_repo.get_room_by_id.return_value = Room(
            room_id="r9", room_number="901", room_type_id="rt2"
        )

        with self.assertRaises(RoomTypeMismatch):
            self.service.update_booking("b1", UpdateBookingRequest(room_id="r9"))

    def test_update_booking_room_out_of_service(self):
        self.booking_repo.get_booking_by_id.return_value = self._booking()
        self.room_repo.get_room_by_id.return_value = Room(
            room_id="r2", room_number="102", room_type_id="rt1", is_available=False
        )

        with self.assertRaises(NotFoundException):
            self.service.update_booking("b1", UpdateBookingRequest(room_id="r2"))

    def test_update_booking_room_already_taken(self):
        self.booking_repo.get_booking_by_id.return_value = self._booking()
        self.room_repo.get_room_by_id.return_value = Room(
            room_id="r2", room_number="102", room_type_id="rt1"
        )
        self.availability.is_room_free.return_value = False

        with self.assertRaises(NoAvailableRooms):
            self.service.update_booking("b1", UpdateBookingRequest(room_id="r2"))

        self.booking_repo.update_booking.assert_not_called()

    def test_update_booking_room_change_on_terminal_booking(self):
        for status in (BookingStatus.CANCELLED, BookingStatus.COMPLETED):
            with self.subTest(status=status):
                self.booking_repo.get_booking_by_id.return_value = self._booking(status=status)

                with self.assertRaises(InvalidStatus) as ctx:
                    self.service.update_booking("b1", UpdateBookingRequest(room_id="r2"))

                self.assertIn(status.value, str(ctx.exception))

        self.room_repo.get_room_by_id.assert_not_called()
        self.booking_repo.update_booking.assert_not_called()

    def test_update_booking_cancelled_keeps_special_requests_editable(self):
        booking = self._booking(status=BookingStatus.CANCELLED)
        self.booking_repo.get_booking_by_id.return_value = booking

        updated = self.service.update_booking(
            "b1", UpdateBookingRequest(special_requests="refund by card")
        )

        self.assertEqual(updated.room_id, "r1")
        self.booking_repo.update_booking.assert_called_once_with(booking, updated)

    def test_update_booking_cancel_and_move_together(self):
        booking = self._booking(status=BookingStatus.PENDING)
        self.booking_repo.get_booking_by_id.return_value = booking
        self.room_repo.get_room_by_id.return_value = Room(
            room_id="r2", room_number="102", room_type_id="rt1"
        )
        self.availability.is_room_free.return_value = True

        updated = self.service.update_booking(
            "b1", UpdateBookingRequest(room_id="r2", status=BookingStatus.CANCELLED)
        )

        self.assertEqual(updated.status, BookingStatus.CANCELLED)
        self.assertEqual(updated.room_id, "r2")
        self.booking_repo.update_booking.assert_called_once_with(booking, updated)

    def test_list_bookings_sorted_by_check_in(self):
        later = self._booking()
        earlier = replace(later, booking_id="b0", check_in=self.check_in - timedelta(days=3))
        self.booking_repo.list_bookings.return_value = [later, earlier]

        result = self.service.list_bookings(status=BookingStatus.CONFIRMED)

        self.booking_repo.list_bookings.assert_called_once_with(status=BookingStatus.CONFIRMED)
        self.assertEqual([b.booking_id for b in result], ["b0", "b1"])

    def test_cancel_booking(self):
        booking = self._booking(status=BookingStatus.PENDING)
        self.booking_repo.get_booking_by_id.return_value = booking

        cancelled = self.service.cancel_booking("b1")

        self.assertEqual(cancelled.status, BookingStatus.CANCELLED)
        self.booking_repo.update_booking.assert_called_once_with(booking, cancelled)

    def test_cancel_booking_wrong_status(self):
        for status in (
            BookingStatus.CHECKED_IN,
            BookingStatus.CHECKED_OUT,
            BookingStatus.COMPLETED,
            BookingStatus.CANCELLED,
        ):
            with self.subTest(status=status):
                self.booking_repo.get_booking_by_id.return_value = self._booking(status=status)

                with self.assertRaises(InvalidStatus) as ctx:
                    self.service.cancel_booking("b1")

                self.assertIn(status.value, str(ctx.exception))
