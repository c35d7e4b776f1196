import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import List, Optional

from hotel_core.models.promos import DiscountType, PromoOffer, PromoValidation
from hotel_core.repository.promo_repo import PromoRepository
from hotel_core.schemas.promos import CreatePromoRequest, UpdatePromoRequest
from hotel_core.utils.custom_exceptions import InvalidDateRange, InvalidRequest, NotFoundException
from hotel_core.utils.money import to_money

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")

# optional fields an explicit null clears
_CLEARABLE = {"description", "min_booking_amount", "max_discount", "usage_limit"}


def normalise_code(code: str) -> str:
    return code.strip().upper()


def compute_discount(offer: PromoOffer, booking_amount: Decimal) -> Decimal:
    if offer.discount_type == DiscountType.PERCENTAGE:
        discount = booking_amount * offer.discount_value / Decimal(100)
    else:
        discount = offer.discount_value
    if offer.max_discount is not None and discount > offer.max_discount:
        discount = offer.max_discount
    return to_money(discount)


class PromoService:
    def __init__(self, promo_repo: PromoRepository):
        self.promo_repo = promo_repo

    def create_promo(self, req: CreatePromoRequest) -> PromoOffer:
        offer = PromoOffer(
            code=normalise_code(req.code),
            name=req.name,
            description=req.description,
            discount_type=req.discount_type,
            discount_value=to_money(req.discount_value),
            min_booking_amount=req.min_booking_amount,
            max_discount=req.max_discount,
            valid_from=req.valid_from,
            valid_until=req.valid_until,
            usage_limit=req.usage_limit,
            is_active=req.is_active,
        )
        self.promo_repo.add_promo(offer)
        logger.info(f"Created promo {offer.code}")
        return offer

    def get_promo(self, code: str) -> PromoOffer:
        offer = self.promo_repo.get_by_code(normalise_code(code))
        if offer is None:
            raise NotFoundException("promo code", code, 404)
        return offer

    def update_promo(self, code: str, req: UpdatePromoRequest) -> PromoOffer:
        offer = self.get_promo(code)
        changes = {
            name: value
            for name, value in req.provided().items()
            if value is not None or name in _CLEARABLE
        }
        for name in ("discount_value", "min_booking_amount", "max_discount"):
            if changes.get(name) is not None:
                changes[name] = to_money(changes[name])

        updated = replace(offer, **changes)
        if updated.valid_until < updated.valid_from:
            raise InvalidDateRange("valid_until cannot be before valid_from")
        if updated.discount_type == DiscountType.PERCENTAGE and updated.discount_value > 100:
            raise InvalidRequest("percentage discount cannot exceed 100")

        saved = self.promo_repo.save_promo(updated)
        logger.info(f"Updated promo {saved.code}: {sorted(changes)}")
        return saved

    def list_promos(self) -> List[PromoOffer]:
        return self.promo_repo.list_promos()

    def list_active_promos(self, today: Optional[date] = None) -> List[PromoOffer]:
        today = today or date.today()
        return [
            o
            for o in self.promo_repo.list_promos()
            if o.is_active and o.valid_from <= today <= o.valid_until
        ]

    def validate_promo_code(
        self, code: str, booking_amount: Decimal, today: Optional[date] = None
    ) -> PromoValidation:
        """Check a code against an amount. Never changes used_count."""
        today = today or date.today()
        booking_amount = to_money(booking_amount)

        offer = self.promo_repo.get_by_code(normalise_code(code))
        if offer is None:
            return PromoValidation(False, ZERO, reason="Promo code not found")
        if not offer.is_active:
            return PromoValidation(False, ZERO, reason="Promo code is inactive")
        if not offer.valid_from <= today <= offer.valid_until:
            return PromoValidation(False, ZERO, reason="Promo code is not valid today")
        if offer.is_exhausted:
            return PromoValidation(False, ZERO, reason="Promo code usage limit reached")
        if offer.min_booking_amount is not None and booking_amount < offer.min_booking_amount:
            return PromoValidation(
                False,
                ZERO,
                reason=f"Minimum booking amount is {offer.min_booking_amount}",
            )

        return PromoValidation(True, compute_discount(offer, booking_amount), offer=offer)

    def use_promo_code(self, code: str) -> PromoOffer:
        offer = self.promo_repo.increment_usage(normalise_code(code))
        logger.info(f"Promo {offer.code} used {offer.used_count} times")
        return offer
