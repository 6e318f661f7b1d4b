# parking_booking/pricing/__init__.py
from parking_booking.pricing.engine import quote
from parking_booking.pricing.types import (
    BookingRequest,
    BookingType,
    DiscountKind,
    Err,
    Ok,
    OnlineDiscountConfig,
    ParkingClass,
    PaymentMethod,
    PriceBreakdown,
    PricingConfig,
    PromoDecision,
    PromoRejection,
    PromoSnapshot,
)

__all__ = [
    "quote",
    "BookingRequest",
    "BookingType",
    "DiscountKind",
    "Err",
    "Ok",
    "OnlineDiscountConfig",
    "ParkingClass",
    "PaymentMethod",
    "PriceBreakdown",
    "PricingConfig",
    "PromoDecision",
    "PromoRejection",
    "PromoSnapshot",
]
