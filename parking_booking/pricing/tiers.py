# parking_booking/pricing/tiers.py
from decimal import Decimal
from typing import Tuple

from parking_booking.pricing.types import BookingType, DEFAULT_MONTHLY_THRESHOLD, PricingConfig
from parking_booking.utils.decimal_utils import round_money


def monthly_threshold(config: PricingConfig) -> int:
    threshold = config.monthly_threshold_days
    return threshold if threshold >= 1 else DEFAULT_MONTHLY_THRESHOLD


def price(
    total_days: int,
    event_days: int,
    normal_days: int,
    is_internal: bool,
    config: PricingConfig,
) -> Tuple[Decimal, BookingType]:
    """
    Base price and booking classification for a stay.

    Below the monthly threshold every day is billed at the day rate, or the
    event rate on event dates. At or above it the stay is billed in whole
    month blocks plus a day-rate remainder and event dates are ignored.
    """
    threshold = monthly_threshold(config)
    day_rate = config.day_rate(is_internal)

    if total_days < threshold:
        base = normal_days * day_rate + event_days * config.event_rate(is_internal)
        booking_type = BookingType.EVENT if event_days > 0 else BookingType.DAY
    else:
        months, extra_days = divmod(total_days, threshold)
        base = months * config.month_rate(is_internal) + extra_days * day_rate
        booking_type = BookingType.MONTHLY

    return round_money(Decimal(base)), booking_type
