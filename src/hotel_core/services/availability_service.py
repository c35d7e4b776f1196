from datetime import date
from typing import List, Optional

from hotel_core.models.bookings import BookingSlot, BookingStatus
from hotel_core.models.rooms import AvailabilitySnapshot, Room
from hotel_core.repository.booking_repo import BookingRepository
from hotel_core.repository.room_repo import RoomRepository
from hotel_core.utils.custom_exceptions import InvalidDateRange
from hotel_core.utils.dates import ranges_overlap


class AvailabilityService:
    """Answers whether a room type can take another stay.

    Two views are combined: the room-type capacity count (bookable rooms
    against overlapping non-cancelled bookings) and a per-room interval
    search, which is what picks the room to pin on write.
    """

    def __init__(self, room_repo: RoomRepository, booking_repo: BookingRepository):
        self.room_repo = room_repo
        self.booking_repo = booking_repo

    @staticmethod
    def _validate(check_in: date, check_out: date):
        if check_out <= check_in:
            raise InvalidDateRange("Check-out date must be after check-in date")

    def get_conflicts(
        self,
        room_type_id: str,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[str] = None,
    ) -> List[BookingSlot]:
        slots = self.booking_repo.get_room_type_slots(room_type_id, check_in, check_out)
        return [
            s
            for s in slots
            if s.status != BookingStatus.CANCELLED
            and s.booking_id != exclude_booking_id
            and ranges_overlap(s.check_in, s.check_out, check_in, check_out)
        ]

    def check(
        self,
        room_type_id: str,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[str] = None,
    ) -> AvailabilitySnapshot:
        self._validate(check_in, check_out)

        rooms = [r for r in self.room_repo.get_rooms_by_room_type(room_type_id) if r.is_available]
        conflicts = self.get_conflicts(room_type_id, check_in, check_out, exclude_booking_id)
        pinned = {c.room_id for c in conflicts if c.room_id}
        free_rooms: List[Room] = sorted(
            (r for r in rooms if r.room_id not in pinned),
            key=lambda r: r.room_number,
        )
        return AvailabilitySnapshot(
            total_rooms=len(rooms),
            conflicting_bookings=len(conflicts),
            unassigned_conflicts=sum(1 for c in conflicts if not c.room_id),
            free_rooms=free_rooms,
        )

    def is_available(self, room_type_id: str, check_in: date, check_out: date) -> bool:
        return self.check(room_type_id, check_in, check_out).is_available

    def is_room_free(
        self,
        room: Room,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        conflicts = self.get_conflicts(room.room_type_id, check_in, check_out, exclude_booking_id)
        return all(c.room_id != room.room_id for c in conflicts)
