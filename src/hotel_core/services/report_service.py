import logging
from collections import defaultdict
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Dict, Optional

from hotel_core.models.bookings import Booking, BookingStatus
from hotel_core.models.payments import PaymentStatus
from hotel_core.models.reports import (
    CategoryOccupancy,
    CategoryRevenue,
    DashboardStats,
    OccupancyReport,
    RevenueReport,
)
from hotel_core.models.rooms import RoomType
from hotel_core.repository.booking_repo import BookingRepository
from hotel_core.repository.payment_repo import PaymentRepository
from hotel_core.repository.room_repo import RoomRepository
from hotel_core.repository.room_type_repo import RoomTypeRepository
from hotel_core.utils.custom_exceptions import InvalidDateRange
from hotel_core.utils.money import to_money

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def _rate(part: int, whole: int) -> Decimal:
    if whole == 0:
        return ZERO
    return to_money(Decimal(part) * 100 / Decimal(whole))


class ReportService:
    """Read-only aggregates for the admin dashboard."""

    def __init__(
        self,
        booking_repo: BookingRepository,
        payment_repo: PaymentRepository,
        room_repo: RoomRepository,
        room_type_repo: RoomTypeRepository,
    ):
        self.booking_repo = booking_repo
        self.payment_repo = payment_repo
        self.room_repo = room_repo
        self.room_type_repo = room_type_repo

    def dashboard_stats(self) -> DashboardStats:
        payments = self.payment_repo.list_payments()
        revenue = sum(
            (p.amount for p in payments if p.payment_status == PaymentStatus.COMPLETED),
            ZERO,
        )
        pending = sum(1 for p in payments if p.payment_status == PaymentStatus.PENDING)

        rooms = self.room_repo.list_rooms()
        occupied = sum(1 for r in rooms if not r.is_available)

        return DashboardStats(
            total_bookings=self.booking_repo.count_bookings(),
            total_revenue=to_money(revenue),
            occupancy_rate=_rate(occupied, len(rooms)),
            pending_payments=pending,
        )

    def revenue_report(self, start: date, end: date) -> RevenueReport:
        if end < start:
            raise InvalidDateRange("end date cannot be before start date")

        payments = self.payment_repo.list_payments(
            datetime.combine(start, time.min, tzinfo=timezone.utc),
            datetime.combine(end, time.max, tzinfo=timezone.utc),
        )

        bookings: Dict[str, Optional[Booking]] = {}
        room_types: Dict[str, Optional[RoomType]] = {}
        total = ZERO
        count = 0
        by_category: Dict[str, Decimal] = defaultdict(lambda: ZERO)
        count_by_category: Dict[str, int] = defaultdict(int)

        for payment in payments:
            if payment.payment_status != PaymentStatus.COMPLETED:
                continue
            if payment.booking_id not in bookings:
                bookings[payment.booking_id] = self.booking_repo.get_booking_by_id(payment.booking_id)
            booking = bookings[payment.booking_id]
            if booking is None:
                logger.warning(f"Payment {payment.payment_id} points at missing booking {payment.booking_id}")
                continue
            if booking.room_type_id not in room_types:
                room_types[booking.room_type_id] = self.room_type_repo.get_room_type(booking.room_type_id)
            room_type = room_types[booking.room_type_id]
            if room_type is None:
                continue

            total += payment.amount
            count += 1
            by_category[room_type.category.value] += payment.amount
            count_by_category[room_type.category.value] += 1

        return RevenueReport(
            total_revenue=to_money(total),
            booking_count=count,
            average_booking_value=to_money(total / count) if count else ZERO,
            revenue_by_category=[
                CategoryRevenue(category=c, revenue=to_money(by_category[c]), count=count_by_category[c])
                for c in sorted(by_category)
            ],
        )

    def occupancy_report(self, start: date, end: date) -> OccupancyReport:
        """Rooms holding a confirmed stay that lies wholly inside [start, end].

        Stays crossing either boundary are left out, so the figure is a
        lower bound for the period.

        The headline totals count every room. The per-category breakdown
        only has rooms whose room type still exists (inactive types included),
        so its totals can sum to less than ``total_rooms``.
        """
        if end < start:
            raise InvalidDateRange("end date cannot be before start date")

        rooms = self.room_repo.list_rooms()
        category_of = {
            rt.room_type_id: rt.category.value for rt in self.room_type_repo.list_room_types()
        }
        room_ids = {r.room_id for r in rooms}

        occupied_ids = {
            b.room_id
            for b in self.booking_repo.list_bookings(status=BookingStatus.CONFIRMED)
            if b.room_id in room_ids and b.check_in >= start and b.check_out <= end
        }

        totals = {c: 0 for c in category_of.values()}
        occupied = {c: 0 for c in category_of.values()}
        for room in rooms:
            category = category_of.get(room.room_type_id)
            if category is None:
                continue
            totals[category] += 1
            if room.room_id in occupied_ids:
                occupied[category] += 1

        return OccupancyReport(
            total_rooms=len(rooms),
            occupied_rooms=len(occupied_ids),
            occupancy_rate=_rate(len(occupied_ids), len(rooms)),
            occupancy_by_category=[
                CategoryOccupancy(
                    category=c,
                    total_rooms=totals[c],
                    occupied_rooms=occupied[c],
                    rate=_rate(occupied[c], totals[c]),
                )
                for c in sorted(totals)
            ],
        )
