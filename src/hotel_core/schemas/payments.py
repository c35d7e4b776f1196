from decimal import Decimal
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field
from hotel_core.models.payments import PaymentMethod, PaymentStatus


class CreatePaymentRequest(BaseModel):
    booking_id: str = Field(min_length=1)
    amount: Decimal = Field(gt=0, decimal_places=2)
    payment_method: PaymentMethod
    payment_details: Optional[Dict[str, Any]] = None


class UpdatePaymentRequest(BaseModel):
    payment_status: PaymentStatus
    transaction_id: Optional[str] = None
    payment_details: Optional[Dict[str, Any]] = None


class RefundRequest(BaseModel):
    amount: Decimal = Field(decimal_places=2)
