# parking_booking/pricing/promo_validator.py
from datetime import date
from decimal import Decimal
from typing import Optional

from parking_booking.pricing.types import (
    DiscountKind,
    PaymentMethod,
    PromoDecision,
    PromoRejection,
    PromoSnapshot,
)
from parking_booking.utils.decimal_utils import ZERO, percent_of, to_decimal


def normalize_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def compute_discount(promo: PromoSnapshot, amount: Decimal) -> Decimal:
    if promo.discount_type == DiscountKind.PERCENT:
        return percent_of(amount, promo.discount_value)
    return min(amount, to_decimal(promo.discount_value))


def validate(
    code: Optional[str],
    current_amount: Decimal,
    payment_method: PaymentMethod,
    promo: Optional[PromoSnapshot],
    today: date,
) -> PromoDecision:
    """
    Decide whether ``promo`` applies to ``current_amount``.

    Checks run in a fixed order and stop at the first failure. Nothing here
    touches the usage counter.
    """
    code = normalize_code(code)
    if not code:
        return PromoDecision.rejected(PromoRejection.EMPTY_CODE)
    if current_amount <= ZERO:
        return PromoDecision.rejected(PromoRejection.NON_POSITIVE_AMOUNT)

    if promo is None or not promo.active or normalize_code(promo.code) != code:
        return PromoDecision.rejected(PromoRejection.NOT_FOUND)

    if promo.valid_from and today < promo.valid_from:
        return PromoDecision.rejected(PromoRejection.NOT_YET_VALID)
    if promo.valid_to and today > promo.valid_to:
        return PromoDecision.rejected(PromoRejection.EXPIRED)

    if promo.max_uses > 0 and promo.used_count >= promo.max_uses:
        return PromoDecision.rejected(PromoRejection.USAGE_LIMIT_REACHED)

    if promo.min_amount > 0 and current_amount < promo.min_amount:
        return PromoDecision.rejected(PromoRejection.BELOW_MINIMUM)

    if payment_method == PaymentMethod.ONLINE and not promo.allow_online:
        return PromoDecision.rejected(PromoRejection.PAYMENT_METHOD_NOT_ALLOWED)
    if payment_method == PaymentMethod.CASH and not promo.allow_cash:
        return PromoDecision.rejected(PromoRejection.PAYMENT_METHOD_NOT_ALLOWED)

    discount = compute_discount(promo, current_amount)
    if discount <= ZERO:
        return PromoDecision.rejected(PromoRejection.ZERO_DISCOUNT)

    return PromoDecision(
        valid=True,
        discount_amount=discount,
        applied_code=promo.code,
        record_id=promo.id,
    )
