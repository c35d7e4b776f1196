from botocore.exceptions import ClientError
import logging
from typing import Any, Dict, List, Optional
from boto3.dynamodb.conditions import Key

from hotel_core.models.rooms import RoomCategory, RoomType
from hotel_core.repository.base import DynamoRepository
from hotel_core.utils.custom_exceptions import NotFoundException
from hotel_core.utils.money import to_money

logger = logging.getLogger(__name__)


class RoomTypeRepository(DynamoRepository):
    """Room types are stored twice: the details item and a full copy under
    the ``ROOMTYPES`` partition used for listing. Both are written together."""

    @staticmethod
    def _to_item(room_type: RoomType) -> Dict[str, Any]:
        return {
            "room_type_id": room_type.room_type_id,
            "name": room_type.name,
            "category": room_type.category.value,
            "description": room_type.description,
            "base_price": to_money(room_type.base_price),
            "max_occupancy": room_type.max_occupancy,
            "amenities": list(room_type.amenities),
            "image_urls": list(room_type.image_urls),
            "is_active": room_type.is_active,
        }

    @staticmethod
    def _to_domain(item: Dict[str, Any]) -> RoomType:
        return RoomType(
            room_type_id=item["room_type_id"],
            name=item["name"],
            category=RoomCategory(item["category"]),
            description=item.get("description"),
            base_price=to_money(item["base_price"]),
            max_occupancy=int(item["max_occupancy"]),
            amenities=list(item.get("amenities", [])),
            image_urls=list(item.get("image_urls", [])),
            is_active=bool(item.get("is_active", True)),
        )

    def _write(self, room_type: RoomType, condition: str):
        item = self._to_item(room_type)
        self.client.transact_write_items(
            TransactItems=[
                {
                    "Put": {
                        "TableName": self.table.name,
                        "Item": {"pk": f"ROOMTYPE#{room_type.room_type_id}", "sk": "DETAILS", **item},
                        "ConditionExpression": condition,
                    }
                },
                {
                    "Put": {
                        "TableName": self.table.name,
                        "Item": {"pk": "ROOMTYPES", "sk": f"ROOMTYPE#{room_type.room_type_id}", **item},
                    }
                },
            ]
        )

    def add_room_type(self, room_type: RoomType):
        try:
            self._write(room_type, "attribute_not_exists(pk)")
        except ClientError as err:
            logger.error(f"Error creating room type {room_type.room_type_id}: {err}")
            raise

    def save_room_type(self, room_type: RoomType):
        try:
            self._write(room_type, "attribute_exists(pk)")
        except ClientError as err:
            if err.response.get("Error", {}).get("Code") == "TransactionCanceledException":
                raise NotFoundException("room type", room_type.room_type_id, 404)
            logger.error(f"Error updating room type {room_type.room_type_id}: {err}")
            raise

    def get_room_type(self, room_type_id: str) -> Optional[RoomType]:
        try:
            response = self.table.get_item(
                Key={"pk": f"ROOMTYPE#{room_type_id}", "sk": "DETAILS"}
            )
        except ClientError as err:
            logger.error(f"Error retrieving room type {room_type_id}: {err}")
            raise
        item = response.get("Item")
        if not item:
            return None
        return self._to_domain(item)

    def list_room_types(self, active_only: bool = False) -> List[RoomType]:
        items = self._query_all(
            KeyConditionExpression=Key("pk").eq("ROOMTYPES") & Key("sk").begins_with("ROOMTYPE#")
        )
        room_types = [self._to_domain(item) for item in items]
        if active_only:
            room_types = [rt for rt in room_types if rt.is_active]
        return room_types
