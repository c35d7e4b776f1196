from enum import Enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


class RoomCategory(str, Enum):
    DELUXE = "deluxe"
    SUPERIOR = "superior"
    JUNIOR_SUITE = "junior_suite"


@dataclass
class RoomType:
    room_type_id: str
    name: str
    category: RoomCategory
    base_price: Decimal
    max_occupancy: int
    description: Optional[str] = None
    amenities: List[str] = field(default_factory=list)
    image_urls: List[str] = field(default_factory=list)
    is_active: bool = True


@dataclass
class Room:
    room_id: str
    room_number: str
    room_type_id: str
    # maintenance / out-of-service toggle, independent of bookings
    is_available: bool = True


@dataclass
class AvailabilitySnapshot:
    total_rooms: int
    conflicting_bookings: int
    # bookings that overlap but were never pinned to a room
    unassigned_conflicts: int
    free_rooms: List[Room] = field(default_factory=list)

    @property
    def is_available(self) -> bool:
        if self.total_rooms == 0:
            return False
        return (
            self.total_rooms > self.conflicting_bookings
            and len(self.free_rooms) > self.unassigned_conflicts
        )
