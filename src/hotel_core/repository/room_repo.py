from botocore.exceptions import ClientError
import logging
from typing import Any, Dict, List, Optional
from boto3.dynamodb.conditions import Attr, Key

from hotel_core.models.rooms import Room
from hotel_core.repository.base import DynamoRepository
from hotel_core.utils.custom_exceptions import NotFoundException, RoomAlreadyExists

logger = logging.getLogger(__name__)


class RoomRepository(DynamoRepository):
    @staticmethod
    def _to_item(room: Room) -> Dict[str, Any]:
        return {
            "room_id": room.room_id,
            "room_number": room.room_number,
            "room_type_id": room.room_type_id,
            "is_available": room.is_available,
        }

    @staticmethod
    def _to_domain(item: Dict[str, Any]) -> Room:
        return Room(
            room_id=item["room_id"],
            room_number=item["room_number"],
            room_type_id=item["room_type_id"],
            is_available=bool(item.get("is_available", True)),
        )

    def add_room(self, room: Room):
        item = self._to_item(room)
        try:
            self.client.transact_write_items(
                TransactItems=[
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {"pk": f"ROOM#{room.room_id}", "sk": "DETAILS", **item},
                            "ConditionExpression": "attribute_not_exists(pk)",
                        }
                    },
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {"pk": f"ROOMTYPE#{room.room_type_id}", "sk": f"ROOM#{room.room_id}", **item},
                        }
                    },
                    {
                        # room numbers are unique across the hotel
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {"pk": f"ROOMNUMBER#{room.room_number}", "sk": "DETAILS", "room_id": room.room_id},
                            "ConditionExpression": "attribute_not_exists(pk)",
                        }
                    },
                ]
            )
        except ClientError as err:
            if err.response.get("Error", {}).get("Code") == "TransactionCanceledException":
                raise RoomAlreadyExists(f"Room number {room.room_number} already exists")
            logger.error(f"Error creating room {room.room_id}: {err}")
            raise

    def get_room_by_id(self, room_id: str) -> Optional[Room]:
        try:
            response = self.table.get_item(
                Key={"pk": f"ROOM#{room_id}", "sk": "DETAILS"}
            )
        except ClientError as err:
            logger.error(f"Error retrieving room by id {room_id}: {err}")
            raise

        item = response.get("Item")
        if not item:
            return None
        return self._to_domain(item)

    def get_rooms_by_room_type(self, room_type_id: str) -> List[Room]:
        items = self._query_all(
            KeyConditionExpression=(
                Key("pk").eq(f"ROOMTYPE#{room_type_id}") & Key("sk").begins_with("ROOM#")
            )
        )
        return [self._to_domain(item) for item in items]

    def list_rooms(self) -> List[Room]:
        items = self._scan_all(
            FilterExpression=Attr("pk").begins_with("ROOM#") & Attr("sk").eq("DETAILS")
        )
        return [self._to_domain(item) for item in items]

    def set_availability(self, room: Room, is_available: bool):
        updates = []
        for key in (
            {"pk": f"ROOM#{room.room_id}", "sk": "DETAILS"},
            {"pk": f"ROOMTYPE#{room.room_type_id}", "sk": f"ROOM#{room.room_id}"},
        ):
            updates.append(
                {
                    "Update": {
                        "TableName": self.table.name,
                        "Key": key,
                        "UpdateExpression": "SET #attribute = :value",
                        "ExpressionAttributeNames": {"#attribute": "is_available"},
                        "ExpressionAttributeValues": {":value": is_available},
                        "ConditionExpression": "attribute_exists(pk)",
                    }
                }
            )
        try:
            self.client.transact_write_items(TransactItems=updates)
        except ClientError as err:
            if err.response.get("Error", {}).get("Code") == "TransactionCanceledException":
                raise NotFoundException("room", room.room_id, 404)
            logger.error(f"Error updating room {room.room_id} availability: {err}")
            raise
