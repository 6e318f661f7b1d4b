# parking_booking/pricing/types.py
import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import FrozenSet, Optional, Union

from parking_booking.core.exceptions import ValidationError
from parking_booking.utils.decimal_utils import ZERO


class ParkingClass(str, enum.Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"


class PaymentMethod(str, enum.Enum):
    ONLINE = "online"
    CASH = "cash"


class BookingType(str, enum.Enum):
    DAY = "day"
    EVENT = "event"
    MONTHLY = "monthly"


class DiscountKind(str, enum.Enum):
    PERCENT = "percent"
    FIXED = "fixed"


class PromoRejection(str, enum.Enum):
    EMPTY_CODE = "empty_code"
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    NOT_FOUND = "not_found"
    NOT_YET_VALID = "not_yet_valid"
    EXPIRED = "expired"
    USAGE_LIMIT_REACHED = "usage_limit_reached"
    BELOW_MINIMUM = "below_minimum"
    PAYMENT_METHOD_NOT_ALLOWED = "payment_method_not_allowed"
    ZERO_DISCOUNT = "zero_discount"
    LEDGER_CONFLICT = "ledger_conflict"


DEFAULT_MONTHLY_THRESHOLD = 28


@dataclass(frozen=True)
class PricingConfig:
    day_rate_internal: Decimal = Decimal("10")
    day_rate_external: Decimal = Decimal("7")
    month_rate_internal: Decimal = Decimal("90")
    month_rate_external: Decimal = Decimal("70")
    event_rate_internal: Decimal = Decimal("20")
    event_rate_external: Decimal = Decimal("12")
    monthly_threshold_days: int = DEFAULT_MONTHLY_THRESHOLD
    event_dates: FrozenSet[date] = field(default_factory=frozenset)
    currency: str = "USD"

    def day_rate(self, is_internal: bool) -> Decimal:
        return self.day_rate_internal if is_internal else self.day_rate_external

    def month_rate(self, is_internal: bool) -> Decimal:
        return self.month_rate_internal if is_internal else self.month_rate_external

    def event_rate(self, is_internal: bool) -> Decimal:
        return self.event_rate_internal if is_internal else self.event_rate_external


@dataclass(frozen=True)
class OnlineDiscountConfig:
    enabled: bool = True
    percent: Decimal = Decimal("10")


@dataclass(frozen=True)
class BookingRequest:
    parking_class: Optional[ParkingClass]
    start: Optional[datetime]
    end: Optional[datetime]
    payment_method: PaymentMethod = PaymentMethod.CASH
    promo_code: Optional[str] = None


@dataclass(frozen=True)
class PromoSnapshot:
    """Read-only copy of a promo code row, detached from the session."""

    id: int
    code: str
    discount_type: DiscountKind
    discount_value: Decimal
    min_amount: Decimal = ZERO
    max_uses: int = 0
    used_count: int = 0
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    allow_online: bool = True
    allow_cash: bool = True
    active: bool = True

    @classmethod
    def from_record(cls, record) -> "PromoSnapshot":
        return cls(
            id=record.id,
            code=record.code,
            discount_type=DiscountKind(record.discount_type),
            discount_value=Decimal(record.discount_value),
            min_amount=Decimal(record.min_amount or 0),
            max_uses=record.max_uses or 0,
            used_count=record.used_count or 0,
            valid_from=record.valid_from,
            valid_to=record.valid_to,
            allow_online=bool(record.allow_online),
            allow_cash=bool(record.allow_cash),
            active=bool(record.active),
        )


@dataclass(frozen=True)
class PromoDecision:
    valid: bool
    discount_amount: Decimal = ZERO
    applied_code: str = ""
    record_id: Optional[int] = None
    reason: Optional[PromoRejection] = None

    @classmethod
    def rejected(cls, reason: PromoRejection) -> "PromoDecision":
        return cls(valid=False, reason=reason)


@dataclass(frozen=True)
class PriceBreakdown:
    base_price: Decimal
    booking_type: BookingType
    online_discount: Decimal
    after_online: Decimal
    promo_discount: Decimal
    promo_code: str
    total: Decimal
    currency: str
    # id of the applied promo row; only the commit step uses it
    promo_id: Optional[int] = None
    promo_rejected: bool = False
    promo_reason: Optional[PromoRejection] = None


@dataclass(frozen=True)
class Ok:
    value: PriceBreakdown
    ok: bool = True


@dataclass(frozen=True)
class Err:
    error: ValidationError
    ok: bool = False


QuoteResult = Union[Ok, Err]
