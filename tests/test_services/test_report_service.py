import unittest
from unittest.mock import MagicMock
from datetime import date
from decimal import Decimal

from hotel_core.models.bookings import Booking, BookingStatus
from hotel_core.models.payments import Payment, PaymentMethod, PaymentStatus
from hotel_core.models.rooms import Room, RoomCategory, RoomType
from hotel_core.services.report_service import ReportService
from hotel_core.utils.custom_exceptions import InvalidDateRange


def _payment(payment_id, booking_id, amount, status=PaymentStatus.COMPLETED):
    return Payment(
        payment_id=payment_id,
        booking_id=booking_id,
        amount=Decimal(amount),
        payment_method=PaymentMethod.CREDIT_CARD,
        payment_status=status,
    )


def _booking(booking_id, room_type_id, room_id, check_in, check_out,
             status=BookingStatus.CONFIRMED):
    return Booking(
        booking_id=booking_id,
        user_id="u1",
        room_type_id=room_type_id,
        room_id=room_id,
        check_in=check_in,
        check_out=check_out,
        guests=1,
        total_amount=Decimal("100.00"),
        status=status,
    )


class TestReportService(unittest.TestCase):

    def setUp(self):
        self.booking_repo = MagicMock()
        self.payment_repo = MagicMock()
        self.room_repo = MagicMock()
        self.room_type_repo = MagicMock()
        self.service = ReportService(
            booking_repo=self.booking_repo,
            payment_repo=self.payment_repo,
            room_repo=self.room_repo,
            room_type_repo=self.room_type_repo,
        )

        self.deluxe = RoomType("rt1", "Deluxe", RoomCategory.DELUXE, Decimal("100.00"), 2)
        self.suite = RoomType("rt2", "Suite", RoomCategory.JUNIOR_SUITE, Decimal("250.00"), 4)
        types = {"rt1": self.deluxe, "rt2": self.suite}
        self.room_type_repo.get_room_type.side_effect = types.get
        self.room_type_repo.list_room_types.return_value = [self.deluxe, self.suite]

        self.rooms = [
            Room("r1", "101", "rt1"),
            Room("r2", "102", "rt1"),
            Room("r3", "201", "rt2"),
            Room("r4", "202", "rt2", is_available=False),
        ]
        self.room_repo.list_rooms.return_value = self.rooms

    def test_dashboard_stats(self):
        self.booking_repo.count_bookings.return_value = 7
        self.payment_repo.list_payments.return_value = [
            _payment("p1", "b1", "200.00"),
            _payment("p2", "b2", "150.50"),
            _payment("p3", "b3", "99.00", PaymentStatus.PENDING),
            _payment("p4", "b4", "80.00", PaymentStatus.REFUNDED),
        ]

        stats = self.service.dashboard_stats()

        self.assertEqual(stats.total_bookings, 7)
        self.assertEqual(stats.total_revenue, Decimal("350.50"))
        self.assertEqual(stats.pending_payments, 1)
        self.assertEqual(stats.occupancy_rate, Decimal("25.00"))

    def test_dashboard_stats_without_rooms(self):
        self.booking_repo.count_bookings.return_value = 0
        self.payment_repo.list_payments.return_value = []
        self.room_repo.list_rooms.return_value = []

        stats = self.service.dashboard_stats()

        self.assertEqual(stats.occupancy_rate, Decimal("0.00"))
        self.assertEqual(stats.total_revenue, Decimal("0.00"))

    def test_revenue_report_groups_by_category(self):
        bookings = {
            "b1": _booking("b1", "rt1", "r1", date(2025, 6, 1), date(2025, 6, 3)),
            "b2": _booking("b2", "rt2", "r3", date(2025, 6, 5), date(2025, 6, 6)),
            "b3": _booking("b3", "rt1", "r2", date(2025, 6, 8), date(2025, 6, 9)),
        }
        self.booking_repo.get_booking_by_id.side_effect = bookings.get
        self.payment_repo.list_payments.return_value = [
            _payment("p1", "b1", "200.00"),
            _payment("p2", "b2", "250.00"),
            _payment("p3", "b3", "100.00"),
            _payment("p4", "b3", "40.00", PaymentStatus.FAILED),
        ]

        report = self.service.revenue_report(date(2025, 6, 1), date(2025, 6, 30))

        self.assertEqual(report.total_revenue, Decimal("550.00"))
        self.assertEqual(report.booking_count, 3)
        self.assertEqual(report.average_booking_value, Decimal("183.33"))
        self.assertEqual(
            [(c.category, c.revenue, c.count) for c in report.revenue_by_category],
            [("deluxe", Decimal("300.00"), 2), ("junior_suite", Decimal("250.00"), 1)],
        )

    def test_revenue_report_skips_orphan_payments(self):
        self.booking_repo.get_booking_by_id.return_value = None
        self.payment_repo.list_payments.return_value = [_payment("p1", "gone", "200.00")]

        report = self.service.revenue_report(date(2025, 6, 1), date(2025, 6, 30))

        self.assertEqual(report.total_revenue, Decimal("0.00"))
        self.assertEqual(report.booking_count, 0)
        self.assertEqual(report.average_booking_value, Decimal("0.00"))

    def test_revenue_report_passes_whole_days(self):
        self.payment_repo.list_payments.return_value = []

        self.service.revenue_report(date(2025, 6, 1), date(2025, 6, 1))

        start, end = self.payment_repo.list_payments.call_args.args
        self.assertEqual(start.isoformat(), "2025-06-01T00:00:00+00:00")
        self.assertEqual(end.date(), date(2025, 6, 1))
        self.assertEqual(end.hour, 23)

    def test_reports_reject_inverted_range(self):
        with self.assertRaises(InvalidDateRange):
            self.service.revenue_report(date(2025, 6, 2), date(2025, 6, 1))

        with self.assertRaises(InvalidDateRange):
            self.service.occupancy_report(date(2025, 6, 2), date(2025, 6, 1))

    def test_occupancy_report(self):
        self.booking_repo.list_bookings.return_value = [
            _booking("b1", "rt1", "r1", date(2025, 6, 2), date(2025, 6, 4)),
            _booking("b2", "rt1", "r1", date(2025, 6, 10), date(2025, 6, 12)),
            # crosses the end of the period
            _booking("b3", "rt2", "r3", date(2025, 6, 28), date(2025, 7, 2)),
            _booking("b4", "rt1", None, date(2025, 6, 5), date(2025, 6, 6)),
        ]

        report = self.service.occupancy_report(date(2025, 6, 1), date(2025, 6, 30))

        self.booking_repo.list_bookings.assert_called_once_with(status=BookingStatus.CONFIRMED)
        self.assertEqual(report.total_rooms, 4)
        self.assertEqual(report.occupied_rooms, 1)
        self.assertEqual(report.occupancy_rate, Decimal("25.00"))
        by_category = {c.category: c for c in report.occupancy_by_category}
        self.assertEqual(by_category["deluxe"].occupied_rooms, 1)
        self.assertEqual(by_category["deluxe"].rate, Decimal("50.00"))
        self.assertEqual(by_category["junior_suite"].occupied_rooms, 0)

    def test_occupancy_report_rooms_of_missing_types(self):
        self.suite.is_active = False
        self.room_type_repo.list_room_types.return_value = [self.deluxe, self.suite]
        self.room_repo.list_rooms.return_value = self.rooms + [Room("r9", "901", "gone")]
        self.booking_repo.list_bookings.return_value = []

        report = self.service.occupancy_report(date(2025, 6, 1), date(2025, 6, 30))

        self.assertEqual(report.total_rooms, 5)
        by_category = {c.category: c.total_rooms for c in report.occupancy_by_category}
        self.assertEqual(by_category, {"deluxe": 2, "junior_suite": 2})
        self.assertEqual(sum(by_category.values()), 4)
