# parking_booking/pricing/discounts.py
from decimal import Decimal
from typing import Tuple

from parking_booking.pricing.types import (
    BookingType,
    OnlineDiscountConfig,
    PaymentMethod,
    PriceBreakdown,
    PromoDecision,
    PromoRejection,
)
from parking_booking.utils.decimal_utils import ZERO, clamp_non_negative, percent_of


def apply_online_discount(
    base_price: Decimal,
    payment_method: PaymentMethod,
    online: OnlineDiscountConfig,
) -> Tuple[Decimal, Decimal]:
    """Returns (online_discount, after_online)."""
    if payment_method == PaymentMethod.ONLINE and online.enabled and online.percent > 0:
        discount = percent_of(base_price, online.percent)
        return discount, clamp_non_negative(base_price - discount)
    return ZERO, base_price


def apply_discounts(
    base_price: Decimal,
    booking_type: BookingType,
    online_discount: Decimal,
    after_online: Decimal,
    promo: PromoDecision,
    currency: str,
    promo_requested: bool = False,
) -> PriceBreakdown:
    """
    Fold the promo decision into the online-discounted amount.

    The promo amount was decided against ``after_online``, never against the
    base price, so the two discounts compound in that order.
    """
    if promo.valid:
        promo_discount = promo.discount_amount
        total = clamp_non_negative(after_online - promo_discount)
        return PriceBreakdown(
            base_price=base_price,
            booking_type=booking_type,
            online_discount=online_discount,
            after_online=after_online,
            promo_discount=promo_discount,
            promo_code=promo.applied_code,
            total=total,
            currency=currency,
            promo_id=promo.record_id,
        )

    return PriceBreakdown(
        base_price=base_price,
        booking_type=booking_type,
        online_discount=online_discount,
        after_online=after_online,
        promo_discount=ZERO,
        promo_code="",
        total=after_online,
        currency=currency,
        promo_rejected=promo_requested,
        promo_reason=promo.reason if promo_requested else None,
    )


def strip_promo(breakdown: PriceBreakdown, reason: PromoRejection) -> PriceBreakdown:
    """Drop an already-applied promo, e.g. when the ledger refuses the usage."""
    return apply_discounts(
        breakdown.base_price,
        breakdown.booking_type,
        breakdown.online_discount,
        breakdown.after_online,
        PromoDecision.rejected(reason),
        breakdown.currency,
        promo_requested=True,
    )
