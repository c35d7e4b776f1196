from botocore.exceptions import ClientError
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List
from boto3.dynamodb.conditions import Attr, Key

from hotel_core.models.pricing import SeasonalPricing
from hotel_core.repository.base import DynamoRepository
from hotel_core.utils.custom_exceptions import NotFoundException
from hotel_core.utils.money import to_multiplier

logger = logging.getLogger(__name__)


class SeasonalPricingRepository(DynamoRepository):
    @staticmethod
    def _key(room_type_id: str, pricing_id: str) -> Dict[str, str]:
        return {"pk": f"ROOMTYPE#{room_type_id}", "sk": f"SEASON#{pricing_id}"}

    @staticmethod
    def _to_domain(item: Dict[str, Any]) -> SeasonalPricing:
        return SeasonalPricing(
            pricing_id=item["pricing_id"],
            room_type_id=item["room_type_id"],
            season_name=item["season_name"],
            price_multiplier=to_multiplier(item["price_multiplier"]),
            start_date=date.fromisoformat(item["start_date"]),
            end_date=date.fromisoformat(item["end_date"]),
            is_active=bool(item.get("is_active", True)),
        )

    def add_seasonal_pricing(self, pricing: SeasonalPricing):
        try:
            self.table.put_item(
                Item={
                    **self._key(pricing.room_type_id, pricing.pricing_id),
                    "pricing_id": pricing.pricing_id,
                    "room_type_id": pricing.room_type_id,
                    "season_name": pricing.season_name,
                    "price_multiplier": to_multiplier(pricing.price_multiplier),
                    "start_date": pricing.start_date.isoformat(),
                    "end_date": pricing.end_date.isoformat(),
                    "is_active": pricing.is_active,
                },
                ConditionExpression="attribute_not_exists(pk)",
            )
        except ClientError as err:
            logger.error(f"Error creating seasonal pricing {pricing.pricing_id}: {err}")
            raise

    def get_for_room_type(self, room_type_id: str) -> List[SeasonalPricing]:
        items = self._query_all(
            KeyConditionExpression=(
                Key("pk").eq(f"ROOMTYPE#{room_type_id}") & Key("sk").begins_with("SEASON#")
            )
        )
        return [self._to_domain(item) for item in items]

    def list_all(self) -> List[SeasonalPricing]:
        items = self._scan_all(
            FilterExpression=Attr("pk").begins_with("ROOMTYPE#") & Attr("sk").begins_with("SEASON#")
        )
        return [self._to_domain(item) for item in items]

    def _update(self, room_type_id: str, pricing_id: str, attribute: str, value) -> SeasonalPricing:
        try:
            response = self.table.update_item(
                Key=self._key(room_type_id, pricing_id),
                UpdateExpression="SET #attribute = :value",
                ExpressionAttributeNames={"#attribute": attribute},
                ExpressionAttributeValues={":value": value},
                ConditionExpression="attribute_exists(pk)",
                ReturnValues="ALL_NEW",
            )
        except ClientError as err:
            if err.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise NotFoundException("seasonal pricing", pricing_id, 404)
            logger.error(f"Error updating seasonal pricing {pricing_id}: {err}")
            raise
        return self._to_domain(response["Attributes"])

    def update_multiplier(self, room_type_id: str, pricing_id: str, multiplier: Decimal) -> SeasonalPricing:
        return self._update(room_type_id, pricing_id, "price_multiplier", to_multiplier(multiplier))

    def set_active(self, room_type_id: str, pricing_id: str, is_active: bool) -> SeasonalPricing:
        return self._update(room_type_id, pricing_id, "is_active", is_active)
