import logging
from dataclasses import replace
from typing import List
from uuid import uuid4

from hotel_core.models.rooms import RoomType
from hotel_core.repository.room_type_repo import RoomTypeRepository
from hotel_core.schemas.rooms import CreateRoomTypeRequest, UpdateRoomTypeRequest
from hotel_core.utils.custom_exceptions import NotFoundException
from hotel_core.utils.money import to_money

logger = logging.getLogger(__name__)


class RoomTypeService:
    def __init__(self, room_type_repo: RoomTypeRepository):
        self.room_type_repo = room_type_repo

    def create_room_type(self, req: CreateRoomTypeRequest) -> RoomType:
        room_type = RoomType(
            room_type_id=str(uuid4()),
            name=req.name,
            category=req.category,
            description=req.description,
            base_price=to_money(req.base_price),
            max_occupancy=req.max_occupancy,
            amenities=list(req.amenities),
            image_urls=list(req.image_urls),
            is_active=req.is_active,
        )
        self.room_type_repo.add_room_type(room_type)
        logger.info(f"Created room type {room_type.name} ({room_type.room_type_id})")
        return room_type

    def get_room_type(self, room_type_id: str) -> RoomType:
        room_type = self.room_type_repo.get_room_type(room_type_id)
        if room_type is None:
            raise NotFoundException("room type", room_type_id, 404)
        return room_type

    def list_room_types(self, active_only: bool = True) -> List[RoomType]:
        return self.room_type_repo.list_room_types(active_only=active_only)

    def update_room_type(self, room_type_id: str, req: UpdateRoomTypeRequest) -> RoomType:
        room_type = self.get_room_type(room_type_id)
        changes = {
            name: getattr(req, name)
            for name in req.model_fields_set
            if getattr(req, name) is not None or name == "description"
        }
        if changes.get("base_price") is not None:
            changes["base_price"] = to_money(changes["base_price"])
        updated = replace(room_type, **changes)
        self.room_type_repo.save_room_type(updated)
        return updated

    def deactivate_room_type(self, room_type_id: str) -> RoomType:
        # soft delete, bookings keep pointing at the type
        room_type = self.get_room_type(room_type_id)
        updated = replace(room_type, is_active=False)
        self.room_type_repo.save_room_type(updated)
        logger.info(f"Deactivated room type {room_type_id}")
        return updated
