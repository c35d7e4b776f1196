from botocore.exceptions import ClientError
import logging
from datetime import date
from typing import Any, Dict, List, Optional
from boto3.dynamodb.conditions import Key

from hotel_core.models.promos import DiscountType, PromoOffer
from hotel_core.repository.base import DynamoRepository
from hotel_core.utils.custom_exceptions import (
    NotFoundException,
    PromoCodeExists,
    PromoUsageLimitReached,
)
from hotel_core.utils.money import to_money

logger = logging.getLogger(__name__)

_USAGE_CONDITION = (
    "attribute_exists(pk) AND "
    "(attribute_not_exists(#usage_limit) OR #used_count < #usage_limit)"
)


def _promo_key(code: str) -> Dict[str, str]:
    return {"pk": f"PROMO#{code}", "sk": "DETAILS"}


def usage_increment_update(table_name: str, code: str) -> Dict[str, Any]:
    """Transaction item bumping used_count by one, refused at the limit."""
    return {
        "Update": {
            "TableName": table_name,
            "Key": _promo_key(code),
            "UpdateExpression": "ADD #used_count :one",
            "ConditionExpression": _USAGE_CONDITION,
            "ExpressionAttributeNames": {
                "#used_count": "used_count",
                "#usage_limit": "usage_limit",
            },
            "ExpressionAttributeValues": {":one": 1},
        }
    }


class PromoRepository(DynamoRepository):
    @staticmethod
    def _to_item(offer: PromoOffer) -> Dict[str, Any]:
        item = {
            **_promo_key(offer.code),
            "code": offer.code,
            "name": offer.name,
            "description": offer.description,
            "discount_type": offer.discount_type.value,
            "discount_value": to_money(offer.discount_value),
            "valid_from": offer.valid_from.isoformat(),
            "valid_until": offer.valid_until.isoformat(),
            "used_count": offer.used_count,
            "is_active": offer.is_active,
        }
        # optional limits are left out entirely so attribute_not_exists works
        if offer.min_booking_amount is not None:
            item["min_booking_amount"] = to_money(offer.min_booking_amount)
        if offer.max_discount is not None:
            item["max_discount"] = to_money(offer.max_discount)
        if offer.usage_limit is not None:
            item["usage_limit"] = offer.usage_limit
        return item

    @staticmethod
    def _to_domain(item: Dict[str, Any]) -> PromoOffer:
        min_amount = item.get("min_booking_amount")
        max_discount = item.get("max_discount")
        usage_limit = item.get("usage_limit")
        return PromoOffer(
            code=item["code"],
            name=item["name"],
            description=item.get("description"),
            discount_type=DiscountType(item["discount_type"]),
            discount_value=to_money(item["discount_value"]),
            min_booking_amount=to_money(min_amount) if min_amount is not None else None,
            max_discount=to_money(max_discount) if max_discount is not None else None,
            valid_from=date.fromisoformat(item["valid_from"]),
            valid_until=date.fromisoformat(item["valid_until"]),
            usage_limit=int(usage_limit) if usage_limit is not None else None,
            used_count=int(item.get("used_count", 0)),
            is_active=bool(item.get("is_active", True)),
        )

    def add_promo(self, offer: PromoOffer):
        try:
            self.client.transact_write_items(
                TransactItems=[
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": self._to_item(offer),
                            "ConditionExpression": "attribute_not_exists(pk)",
                        }
                    },
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {"pk": "PROMOS", "sk": f"PROMO#{offer.code}"},
                        }
                    },
                ]
            )
        except ClientError as err:
            if err.response.get("Error", {}).get("Code") == "TransactionCanceledException":
                raise PromoCodeExists(f"promo code {offer.code} already exists")
            logger.error(f"Error creating promo {offer.code}: {err}")
            raise

    def save_promo(self, offer: PromoOffer):
        """Overwrite the editable fields of an existing offer.

        used_count is left alone so concurrent redemptions are not lost.
        """
        item = self._to_item(offer)
        editable = ["name", "description", "discount_type", "discount_value",
                    "valid_from", "valid_until", "is_active"]
        optional = ["min_booking_amount", "max_discount", "usage_limit"]

        names = {f"#{name}": name for name in editable + optional}
        values = {f":{name}": item[name] for name in editable}
        set_parts = [f"#{name} = :{name}" for name in editable]
        remove_parts = []
        for name in optional:
            if name in item:
                set_parts.append(f"#{name} = :{name}")
                values[f":{name}"] = item[name]
            else:
                remove_parts.append(f"#{name}")

        expression = "SET " + ", ".join(set_parts)
        if remove_parts:
            expression += " REMOVE " + ", ".join(remove_parts)

        try:
            response = self.table.update_item(
                Key=_promo_key(offer.code),
                UpdateExpression=expression,
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ConditionExpression="attribute_exists(pk)",
                ReturnValues="ALL_NEW",
            )
        except ClientError as err:
            if err.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise NotFoundException("promo code", offer.code, 404)
            logger.error(f"Error updating promo {offer.code}: {err}")
            raise
        return self._to_domain(response["Attributes"])

    def get_by_code(self, code: str) -> Optional[PromoOffer]:
        try:
            response = self.table.get_item(Key=_promo_key(code))
        except ClientError as err:
            logger.error(f"Error retrieving promo {code}: {err}")
            raise
        item = response.get("Item")
        if not item:
            return None
        return self._to_domain(item)

    def list_promos(self) -> List[PromoOffer]:
        items = self._query_all(
            KeyConditionExpression=Key("pk").eq("PROMOS") & Key("sk").begins_with("PROMO#")
        )
        offers = []
        for item in items:
            offer = self.get_by_code(item["sk"].split("PROMO#", 1)[1])
            if offer is not None:
                offers.append(offer)
        return offers

    def increment_usage(self, code: str) -> PromoOffer:
        update = usage_increment_update(self.table.name, code)["Update"]
        try:
            response = self.table.update_item(
                Key=update["Key"],
                UpdateExpression=update["UpdateExpression"],
                ConditionExpression=update["ConditionExpression"],
                ExpressionAttributeNames=update["ExpressionAttributeNames"],
                ExpressionAttributeValues=update["ExpressionAttributeValues"],
                ReturnValues="ALL_NEW",
            )
        except ClientError as err:
            if err.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                if self.get_by_code(code) is None:
                    raise NotFoundException("promo code", code, 404)
                raise PromoUsageLimitReached(f"promo code {code} has reached its usage limit")
            logger.error(f"Error incrementing usage of promo {code}: {err}")
            raise
        return self._to_domain(response["Attributes"])
