from botocore.exceptions import ClientError
import json
import logging
from decimal import Decimal
from datetime import datetime
from typing import Any, Dict, List, Optional
from boto3.dynamodb.conditions import Key

from hotel_core.models.payments import Payment, PaymentMethod, PaymentStatus
from hotel_core.repository.base import DynamoRepository
from hotel_core.utils.custom_exceptions import NotFoundException
from hotel_core.utils.dates import from_iso_string, to_iso_string, utc_now
from hotel_core.utils.money import to_money

logger = logging.getLogger(__name__)


def _dynamo_safe(details):
    # DynamoDB rejects floats, gateway payloads arrive as plain JSON
    if details is None:
        return None
    return json.loads(json.dumps(details, default=str), parse_float=Decimal)


class PaymentRepository(DynamoRepository):
    """Payments are kept under three keys: the details item, a per-booking
    copy and a ``PAYMENTS`` copy sorted by creation time for reporting."""

    @staticmethod
    def _keys(payment: Payment) -> List[Dict[str, str]]:
        created = to_iso_string(payment.created_at)
        return [
            {"pk": f"PAYMENT#{payment.payment_id}", "sk": "DETAILS"},
            {"pk": f"BOOKING#{payment.booking_id}", "sk": f"PAYMENT#{payment.payment_id}"},
            {"pk": "PAYMENTS", "sk": f"CREATED#{created}#PAYMENT#{payment.payment_id}"},
        ]

    @staticmethod
    def _to_item(payment: Payment) -> Dict[str, Any]:
        return {
            "payment_id": payment.payment_id,
            "booking_id": payment.booking_id,
            "amount": to_money(payment.amount),
            "payment_method": payment.payment_method.value,
            "payment_status": payment.payment_status.value,
            "transaction_id": payment.transaction_id,
            "payment_details": _dynamo_safe(payment.payment_details),
            "created_at": to_iso_string(payment.created_at),
        }

    @staticmethod
    def _to_domain(item: Dict[str, Any]) -> Payment:
        return Payment(
            payment_id=item["payment_id"],
            booking_id=item["booking_id"],
            amount=to_money(item["amount"]),
            payment_method=PaymentMethod(item["payment_method"]),
            payment_status=PaymentStatus(item["payment_status"]),
            transaction_id=item.get("transaction_id"),
            payment_details=item.get("payment_details"),
            created_at=from_iso_string(item["created_at"]),
        )

    def add_payment(self, payment: Payment):
        item = self._to_item(payment)
        puts = []
        for i, key in enumerate(self._keys(payment)):
            put = {"TableName": self.table.name, "Item": {**key, **item}}
            if i == 0:
                put["ConditionExpression"] = "attribute_not_exists(pk)"
            puts.append({"Put": put})
        try:
            self.client.transact_write_items(TransactItems=puts)
        except ClientError as err:
            logger.error(f"Error creating payment {payment.payment_id}: {err}")
            raise

    def save_payment(self, payment: Payment):
        """Overwrite status, transaction reference and details on every copy."""
        updates = []
        for i, key in enumerate(self._keys(payment)):
            update = {
                "TableName": self.table.name,
                "Key": key,
                "UpdateExpression": (
                    "SET #payment_status = :status, #transaction_id = :txn, "
                    "#payment_details = :details, #updated_at = :updated_at"
                ),
                "ExpressionAttributeNames": {
                    "#payment_status": "payment_status",
                    "#transaction_id": "transaction_id",
                    "#payment_details": "payment_details",
                    "#updated_at": "updated_at",
                },
                "ExpressionAttributeValues": {
                    ":status": payment.payment_status.value,
                    ":txn": payment.transaction_id,
                    ":details": _dynamo_safe(payment.payment_details),
                    ":updated_at": to_iso_string(utc_now()),
                },
            }
            if i == 0:
                update["ConditionExpression"] = "attribute_exists(pk)"
            updates.append({"Update": update})
        try:
            self.client.transact_write_items(TransactItems=updates)
        except ClientError as err:
            if err.response.get("Error", {}).get("Code") == "TransactionCanceledException":
                raise NotFoundException("payment", payment.payment_id, 404)
            logger.error(f"Error updating payment {payment.payment_id}: {err}")
            raise

    def get_payment(self, payment_id: str) -> Optional[Payment]:
        try:
            response = self.table.get_item(
                Key={"pk": f"PAYMENT#{payment_id}", "sk": "DETAILS"}
            )
        except ClientError as err:
            logger.error(f"Error retrieving payment {payment_id}: {err}")
            raise
        item = response.get("Item")
        if not item:
            return None
        return self._to_domain(item)

    def get_payments_by_booking(self, booking_id: str) -> List[Payment]:
        items = self._query_all(
            KeyConditionExpression=(
                Key("pk").eq(f"BOOKING#{booking_id}") & Key("sk").begins_with("PAYMENT#")
            )
        )
        return [self._to_domain(item) for item in items]

    def list_payments(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> List[Payment]:
        if start is None and end is None:
            condition = Key("pk").eq("PAYMENTS") & Key("sk").begins_with("CREATED#")
        else:
            lower = f"CREATED#{to_iso_string(start)}" if start else "CREATED#"
            # "~" sorts after every character used in the sort key
            upper = f"CREATED#{to_iso_string(end)}~" if end else "CREATED#~"
            condition = Key("pk").eq("PAYMENTS") & Key("sk").between(lower, upper)
        return [self._to_domain(item) for item in self._query_all(KeyConditionExpression=condition)]
