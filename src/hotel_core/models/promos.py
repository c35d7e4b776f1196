from enum import Enum
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass
class PromoOffer:
    code: str
    name: str
    discount_type: DiscountType
    discount_value: Decimal
    valid_from: date
    valid_until: date
    description: Optional[str] = None
    min_booking_amount: Optional[Decimal] = None
    max_discount: Optional[Decimal] = None
    usage_limit: Optional[int] = None
    used_count: int = 0
    is_active: bool = True

    @property
    def is_exhausted(self) -> bool:
        return self.usage_limit is not None and self.used_count >= self.usage_limit


@dataclass
class PromoValidation:
    valid: bool
    discount: Decimal
    offer: Optional[PromoOffer] = None
    reason: Optional[str] = None
