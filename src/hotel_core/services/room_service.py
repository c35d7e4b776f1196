import logging
from datetime import date
from typing import List, Optional
from uuid import uuid4

from hotel_core.models.rooms import Room, RoomCategory, RoomType
from hotel_core.repository.room_repo import RoomRepository
from hotel_core.repository.room_type_repo import RoomTypeRepository
from hotel_core.schemas.rooms import CreateRoomRequest
from hotel_core.services.availability_service import AvailabilityService
from hotel_core.utils.custom_exceptions import InvalidDateRange, InvalidRequest, NotFoundException

logger = logging.getLogger(__name__)


class RoomService:
    def __init__(
        self,
        room_repo: RoomRepository,
        room_type_repo: RoomTypeRepository,
        availability_service: AvailabilityService,
    ):
        self.room_repo = room_repo
        self.room_type_repo = room_type_repo
        self.availability_service = availability_service

    def add_room(self, req: CreateRoomRequest) -> Room:
        if self.room_type_repo.get_room_type(req.room_type_id) is None:
            raise NotFoundException("room type", req.room_type_id, 404)
        room = Room(
            room_id=str(uuid4()),
            room_number=req.room_number,
            room_type_id=req.room_type_id,
            is_available=req.is_available,
        )
        self.room_repo.add_room(room=room)
        logger.info(f"Added room {room.room_number} to room type {room.room_type_id}")
        return room

    def get_room(self, room_id: str) -> Room:
        room = self.room_repo.get_room_by_id(room_id)
        if room is None:
            raise NotFoundException("room", room_id, 404)
        return room

    def get_rooms_by_room_type(self, room_type_id: str) -> List[Room]:
        return self.room_repo.get_rooms_by_room_type(room_type_id)

    def list_rooms(self) -> List[Room]:
        return sorted(self.room_repo.list_rooms(), key=lambda r: r.room_number)

    def set_room_availability(self, room_id: str, is_available: bool) -> Room:
        room = self.get_room(room_id)
        self.room_repo.set_availability(room, is_available)
        room.is_available = is_available
        return room

    def check_availability(self, room_type_id: str, check_in: date, check_out: date) -> bool:
        return self.availability_service.is_available(room_type_id, check_in, check_out)

    def search_available_rooms(
        self,
        check_in: date,
        check_out: date,
        guests: int,
        category: Optional[RoomCategory] = None,
    ) -> List[RoomType]:
        if check_out <= check_in:
            raise InvalidDateRange("Check-out date must be after check-in date")
        if guests < 1:
            raise InvalidRequest("guests must be at least 1")

        results = []
        for room_type in self.room_type_repo.list_room_types(active_only=True):
            if category is not None and room_type.category != category:
                continue
            if room_type.max_occupancy < guests:
                continue
            if self.availability_service.is_available(room_type.room_type_id, check_in, check_out):
                results.append(room_type)
        return results
