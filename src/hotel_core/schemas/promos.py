from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, model_validator
from hotel_core.models.promos import DiscountType


class CreatePromoRequest(BaseModel):
    code: str = Field(min_length=3, max_length=32)
    name: str = Field(min_length=1)
    description: Optional[str] = None
    discount_type: DiscountType
    discount_value: Decimal = Field(gt=0, decimal_places=2)
    min_booking_amount: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    max_discount: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    valid_from: date
    valid_until: date
    usage_limit: Optional[int] = Field(default=None, gt=0)
    is_active: bool = True

    @model_validator(mode="after")
    def validate_offer(self):
        if self.valid_until < self.valid_from:
            raise ValueError("valid_until cannot be before valid_from")
        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValueError("percentage discount cannot exceed 100")
        self.code = self.code.strip().upper()
        return self


class ValidatePromoRequest(BaseModel):
    code: str = Field(min_length=1)
    booking_amount: Decimal = Field(ge=0, decimal_places=2)


class UpdatePromoRequest(BaseModel):
    """Partial update; the code itself and used_count cannot be changed.

    Sending null clears description, min_booking_amount, max_discount or
    usage_limit; it is ignored for the other fields.
    """

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    min_booking_amount: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    max_discount: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    valid_from: Optional[date] = None
    valid_until: Optional[date] = None
    usage_limit: Optional[int] = Field(default=None, gt=0)
    is_active: Optional[bool] = None

    def provided(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}
