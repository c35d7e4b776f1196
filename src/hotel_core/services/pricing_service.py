import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import uuid4

from hotel_core.models.pricing import NightlyRate, PriceQuote, SeasonalPricing
from hotel_core.repository.room_type_repo import RoomTypeRepository
from hotel_core.repository.seasonal_pricing_repo import SeasonalPricingRepository
from hotel_core.schemas.rooms import CreateSeasonalPricingRequest
from hotel_core.utils.custom_exceptions import InvalidDateRange, InvalidRequest, NotFoundException
from hotel_core.utils.dates import iter_nights, nights_between
from hotel_core.utils.money import to_money, to_multiplier

logger = logging.getLogger(__name__)

NO_MULTIPLIER = Decimal("1.00")


def select_rule(rules: Iterable[SeasonalPricing], day: date) -> Optional[SeasonalPricing]:
    """Pick the seasonal rule that prices ``day``.

    Only active rules covering the day qualify. When several overlap the
    narrowest date range wins, then the one starting latest, then the
    lowest id, so the result never depends on storage order.
    """
    candidates = [r for r in rules if r.is_active and r.covers(day)]
    if not candidates:
        return None
    return min(
        candidates,
        key=lambda r: (r.span_days, -r.start_date.toordinal(), r.pricing_id),
    )


class PricingService:
    def __init__(
        self,
        room_type_repo: RoomTypeRepository,
        seasonal_repo: SeasonalPricingRepository,
    ):
        self.room_type_repo = room_type_repo
        self.seasonal_repo = seasonal_repo

    def quote(self, room_type_id: str, check_in: date, check_out: date) -> PriceQuote:
        if check_out <= check_in:
            raise InvalidDateRange("Check-out date must be after check-in date")

        room_type = self.room_type_repo.get_room_type(room_type_id)
        if room_type is None:
            raise NotFoundException("room type", room_type_id, 404)

        rules = self.seasonal_repo.get_for_room_type(room_type_id)
        breakdown: List[NightlyRate] = []
        for night in iter_nights(check_in, check_out):
            rule = select_rule(rules, night)
            multiplier = rule.price_multiplier if rule else NO_MULTIPLIER
            breakdown.append(
                NightlyRate(
                    night=night,
                    multiplier=multiplier,
                    amount=to_money(room_type.base_price * multiplier),
                    season_name=rule.season_name if rule else None,
                )
            )

        nights = nights_between(check_in, check_out)

        return PriceQuote(
            room_type_id=room_type_id,
            check_in=check_in,
            check_out=check_out,
            nights=nights,
            base_price=room_type.base_price,
            total=to_money(sum((n.amount for n in breakdown), Decimal("0"))),
            breakdown=breakdown,
        )

    def calculate_price(self, room_type_id: str, check_in: date, check_out: date) -> Decimal:
        return self.quote(room_type_id, check_in, check_out).total

    def get_active_rule(self, room_type_id: str, day: date) -> Optional[SeasonalPricing]:
        return select_rule(self.seasonal_repo.get_for_room_type(room_type_id), day)

    def get_seasonal_pricing(self, room_type_id: str) -> List[SeasonalPricing]:
        return self.seasonal_repo.get_for_room_type(room_type_id)

    def list_seasonal_pricing(self) -> List[SeasonalPricing]:
        rules = self.seasonal_repo.list_all()
        return sorted(rules, key=lambda r: (r.room_type_id, r.start_date, r.pricing_id))

    def create_seasonal_pricing(self, req: CreateSeasonalPricingRequest) -> SeasonalPricing:
        if self.room_type_repo.get_room_type(req.room_type_id) is None:
            raise NotFoundException("room type", req.room_type_id, 404)

        pricing = SeasonalPricing(
            pricing_id=str(uuid4()),
            room_type_id=req.room_type_id,
            season_name=req.season_name,
            price_multiplier=to_multiplier(req.price_multiplier),
            start_date=req.start_date,
            end_date=req.end_date,
            is_active=req.is_active,
        )
        self.seasonal_repo.add_seasonal_pricing(pricing)
        logger.info(
            f"Added season {pricing.season_name} x{pricing.price_multiplier} "
            f"to room type {pricing.room_type_id}"
        )
        return pricing

    def update_multiplier(self, room_type_id: str, pricing_id: str, multiplier: Decimal) -> SeasonalPricing:
        if multiplier <= 0:
            raise InvalidRequest("price multiplier must be positive")
        return self.seasonal_repo.update_multiplier(room_type_id, pricing_id, multiplier)

    def deactivate_seasonal_pricing(self, room_type_id: str, pricing_id: str) -> SeasonalPricing:
        return self.seasonal_repo.set_active(room_type_id, pricing_id, False)
