# parking_booking/pricing/engine.py
from datetime import date
from typing import Optional

from parking_booking.core.exceptions import ValidationError
from parking_booking.pricing import calendar, tiers
from parking_booking.pricing.discounts import apply_discounts, apply_online_discount
from parking_booking.pricing.promo_validator import normalize_code, validate
from parking_booking.pricing.types import (
    BookingRequest,
    Err,
    Ok,
    OnlineDiscountConfig,
    ParkingClass,
    PricingConfig,
    PromoSnapshot,
    QuoteResult,
)


def check_request(request: BookingRequest) -> Optional[ValidationError]:
    if not request.parking_class or request.start is None or request.end is None:
        return ValidationError("Missing data")
    if request.end <= request.start:
        return ValidationError("End must be after start")
    return None


def quote(
    request: BookingRequest,
    config: PricingConfig,
    online: OnlineDiscountConfig,
    promo: Optional[PromoSnapshot],
    today: date,
) -> QuoteResult:
    """
    Price a booking request end to end.

    Pure and side-effect free: ``promo`` is the snapshot the caller looked up
    for ``request.promo_code`` (or None), and ``today`` drives the promo
    validity window. Malformed requests come back as ``Err``; an unusable
    promo only sets ``promo_rejected`` on the breakdown.
    """
    error = check_request(request)
    if error is not None:
        return Err(error)

    normal_days, event_days = calendar.classify(request.start, request.end, config.event_dates)
    days = calendar.total_days(request.start, request.end)
    is_internal = request.parking_class == ParkingClass.INTERNAL

    base_price, booking_type = tiers.price(days, event_days, normal_days, is_internal, config)
    online_discount, after_online = apply_online_discount(base_price, request.payment_method, online)

    promo_requested = bool(normalize_code(request.promo_code))
    decision = validate(request.promo_code, after_online, request.payment_method, promo, today)

    return Ok(
        apply_discounts(
            base_price,
            booking_type,
            online_discount,
            after_online,
            decision,
            config.currency,
            promo_requested=promo_requested,
        )
    )
