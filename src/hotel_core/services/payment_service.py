import logging
from dataclasses import replace
from decimal import Decimal
from typing import List
from uuid import uuid4

from hotel_core.models.payments import Payment, PaymentStatus
from hotel_core.repository.booking_repo import BookingRepository
from hotel_core.repository.payment_repo import PaymentRepository
from hotel_core.schemas.payments import CreatePaymentRequest, UpdatePaymentRequest
from hotel_core.utils.custom_exceptions import (
    InvalidRefundAmount,
    InvalidStatus,
    NotFoundException,
)
from hotel_core.utils.money import to_money

logger = logging.getLogger(__name__)


class PaymentService:
    """Payment records only; talking to a real gateway is out of scope."""

    def __init__(self, payment_repo: PaymentRepository, booking_repo: BookingRepository):
        self.payment_repo = payment_repo
        self.booking_repo = booking_repo

    def create_payment(self, req: CreatePaymentRequest) -> Payment:
        if self.booking_repo.get_booking_by_id(req.booking_id) is None:
            raise NotFoundException("booking", req.booking_id, 404)

        payment = Payment(
            payment_id=str(uuid4()),
            booking_id=req.booking_id,
            amount=to_money(req.amount),
            payment_method=req.payment_method,
            payment_details=req.payment_details,
        )
        self.payment_repo.add_payment(payment)
        logger.info(f"Created payment {payment.payment_id} for booking {payment.booking_id}")
        return payment

    def get_payment(self, payment_id: str) -> Payment:
        payment = self.payment_repo.get_payment(payment_id)
        if payment is None:
            raise NotFoundException("payment", payment_id, 404)
        return payment

    def get_payments_by_booking(self, booking_id: str) -> List[Payment]:
        if self.booking_repo.get_booking_by_id(booking_id) is None:
            raise NotFoundException("booking", booking_id, 404)
        return self.payment_repo.get_payments_by_booking(booking_id)

    def update_payment(self, payment_id: str, req: UpdatePaymentRequest) -> Payment:
        payment = self.get_payment(payment_id)
        if payment.payment_status == PaymentStatus.REFUNDED:
            raise InvalidStatus(f"Payment {payment_id} is already refunded")

        changes = {"payment_status": req.payment_status}
        if "transaction_id" in req.model_fields_set:
            changes["transaction_id"] = req.transaction_id
        if "payment_details" in req.model_fields_set:
            changes["payment_details"] = req.payment_details

        updated = replace(payment, **changes)
        self.payment_repo.save_payment(updated)
        logger.info(
            f"Payment {payment_id} {payment.payment_status.value} -> {updated.payment_status.value}"
        )
        return updated

    def process_refund(self, payment_id: str, amount: Decimal) -> Payment:
        payment = self.get_payment(payment_id)
        amount = to_money(amount)
        if amount <= 0:
            raise InvalidRefundAmount("Refund amount must be positive")
        if amount > payment.amount:
            raise InvalidRefundAmount(
                f"Refund amount {amount} exceeds original payment {payment.amount}"
            )
        if payment.payment_status != PaymentStatus.COMPLETED:
            raise InvalidStatus(
                f"Cannot refund payment with status: {payment.payment_status.value}"
            )

        details = dict(payment.payment_details or {})
        details["refund_amount"] = str(amount)
        if payment.transaction_id:
            details["original_transaction_id"] = payment.transaction_id

        refunded = replace(
            payment,
            payment_status=PaymentStatus.REFUNDED,
            transaction_id=f"refund_{uuid4().hex[:12]}",
            payment_details=details,
        )
        self.payment_repo.save_payment(refunded)
        logger.info(f"Refunded {amount} on payment {payment_id}")
        return refunded
