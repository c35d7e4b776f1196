import unittest
from unittest.mock import MagicMock
from datetime import datetime, timezone
from decimal import Decimal

from hotel_core.repository.payment_repo import PaymentRepository
from hotel_core.models.payments import Payment, PaymentMethod, PaymentStatus


class TestPaymentRepository(unittest.TestCase):

    def setUp(self):
        self.table = MagicMock()
        self.table.name = "hotel"
        self.client = MagicMock()
        self.repo = PaymentRepository(self.table, self.client)

        self.payment = Payment(
            payment_id="p1",
            booking_id="b1",
            amount=Decimal("200.00"),
            payment_method=PaymentMethod.CREDIT_CARD,
            payment_details={"card_last4": "4242", "fee": 1.5},
            created_at=datetime(2025, 6, 1, 10, 30, tzinfo=timezone.utc),
        )

    def test_add_payment_writes_three_copies(self):
        self.repo.add_payment(self.payment)

        _, kwargs = self.client.transact_write_items.call_args
        items = [i["Put"]["Item"] for i in kwargs["TransactItems"]]
        self.assertEqual(
            [(i["pk"], i["sk"]) for i in items],
            [
                ("PAYMENT#p1", "DETAILS"),
                ("BOOKING#b1", "PAYMENT#p1"),
                ("PAYMENTS", "CREATED#2025-06-01T10:30:00+00:00#PAYMENT#p1"),
            ],
        )
        # floats are not accepted by DynamoDB
        self.assertEqual(items[0]["payment_details"]["fee"], Decimal("1.5"))

    def test_save_payment_requires_existing_item(self):
        self.payment.payment_status = PaymentStatus.REFUNDED

        self.repo.save_payment(self.payment)

        _, kwargs = self.client.transact_write_items.call_args
        first = kwargs["TransactItems"][0]["Update"]
        self.assertEqual(first["ConditionExpression"], "attribute_exists(pk)")
        self.assertEqual(first["ExpressionAttributeValues"][":status"], "refunded")

    def test_list_payments_in_range(self):
        self.table.query.return_value = {
            "Items": [
                {
                    "payment_id": "p1",
                    "booking_id": "b1",
                    "amount": Decimal("200"),
                    "payment_method": "paypal",
                    "payment_status": "completed",
                    "created_at": "2025-06-01T10:30:00+00:00",
                }
            ]
        }

        payments = self.repo.list_payments(
            datetime(2025, 6, 1, tzinfo=timezone.utc),
            datetime(2025, 6, 30, 23, 59, 59, tzinfo=timezone.utc),
        )

        self.assertEqual(payments[0].amount, Decimal("200.00"))
        self.assertEqual(payments[0].payment_status, PaymentStatus.COMPLETED)
        self.assertIsNone(payments[0].payment_details)


if __name__ == "__main__":
    unittest.main()
