from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional


@dataclass
class SeasonalPricing:
    pricing_id: str
    room_type_id: str
    season_name: str
    price_multiplier: Decimal
    start_date: date
    end_date: date
    is_active: bool = True

    def covers(self, day: date) -> bool:
        # inclusive on both ends
        return self.start_date <= day <= self.end_date

    @property
    def span_days(self) -> int:
        return (self.end_date - self.start_date).days


@dataclass
class NightlyRate:
    night: date
    multiplier: Decimal
    amount: Decimal
    season_name: Optional[str] = None


@dataclass
class PriceQuote:
    room_type_id: str
    check_in: date
    check_out: date
    nights: int
    base_price: Decimal
    total: Decimal
    breakdown: List[NightlyRate] = field(default_factory=list)
