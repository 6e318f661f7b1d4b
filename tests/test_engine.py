"""
Tests for the discount pipeline and the quote engine that chains all pricing steps.
"""
from datetime import date, datetime
from decimal import Decimal

import pytest

from parking_booking.pricing.discounts import apply_discounts, apply_online_discount, strip_promo
from parking_booking.pricing.engine import quote
from parking_booking.pricing.promo_validator import compute_discount
from parking_booking.pricing.types import (
    BookingRequest,
    BookingType,
    DiscountKind,
    OnlineDiscountConfig,
    ParkingClass,
    PaymentMethod,
    PricingConfig,
    PromoDecision,
    PromoRejection,
    PromoSnapshot,
)

TODAY = date(2026, 3, 1)
ONLINE_10 = OnlineDiscountConfig(enabled=True, percent=Decimal("10"))


def percent10(**overrides):
    fields = dict(id=7, code="PERCENT10", discount_type=DiscountKind.PERCENT, discount_value=Decimal("10"))
    fields.update(overrides)
    return PromoSnapshot(**fields)


# =============================================================================
# Online discount
# =============================================================================

class TestOnlineDiscount:

    def test_applied_for_online_payment(self):
        assert apply_online_discount(Decimal("100.00"), PaymentMethod.ONLINE, ONLINE_10) == (
            Decimal("10.00"), Decimal("90.00"),
        )

    def test_not_applied_for_cash(self):
        assert apply_online_discount(Decimal("100.00"), PaymentMethod.CASH, ONLINE_10) == (
            Decimal("0"), Decimal("100.00"),
        )

    def test_disabled_feature(self):
        online = OnlineDiscountConfig(enabled=False, percent=Decimal("10"))
        discount, after = apply_online_discount(Decimal("100.00"), PaymentMethod.ONLINE, online)
        assert discount == 0
        assert after == Decimal("100.00")

    def test_zero_percent(self):
        online = OnlineDiscountConfig(enabled=True, percent=Decimal("0"))
        assert apply_online_discount(Decimal("100.00"), PaymentMethod.ONLINE, online)[0] == 0

    def test_rounds_to_cents(self):
        online = OnlineDiscountConfig(enabled=True, percent=Decimal("15"))
        discount, after = apply_online_discount(Decimal("7.00"), PaymentMethod.ONLINE, online)
        assert discount == Decimal("1.05")
        assert after == Decimal("5.95")


# =============================================================================
# Promo stacking
# =============================================================================

class TestApplyDiscounts:

    def test_promo_taken_from_after_online_amount(self):
        breakdown = apply_discounts(
            Decimal("100.00"), BookingType.DAY, Decimal("10.00"), Decimal("90.00"),
            PromoDecision(valid=True, discount_amount=Decimal("9.00"), applied_code="PERCENT10", record_id=7),
            "USD",
        )
        assert breakdown.total == Decimal("81.00")
        assert breakdown.promo_code == "PERCENT10"
        assert breakdown.promo_id == 7
        assert breakdown.promo_rejected is False

    def test_total_clamped_at_zero(self):
        breakdown = apply_discounts(
            Decimal("5.00"), BookingType.DAY, Decimal("0"), Decimal("5.00"),
            PromoDecision(valid=True, discount_amount=Decimal("7.00"), applied_code="X", record_id=1),
            "USD",
        )
        assert breakdown.total == Decimal("0")

    def test_rejected_promo_leaves_total(self):
        breakdown = apply_discounts(
            Decimal("100.00"), BookingType.DAY, Decimal("0"), Decimal("100.00"),
            PromoDecision.rejected(PromoRejection.EXPIRED), "USD", promo_requested=True,
        )
        assert breakdown.total == Decimal("100.00")
        assert breakdown.promo_discount == 0
        assert breakdown.promo_code == ""
        assert breakdown.promo_rejected is True
        assert breakdown.promo_reason == PromoRejection.EXPIRED

    def test_no_promo_requested_is_not_flagged(self):
        breakdown = apply_discounts(
            Decimal("100.00"), BookingType.DAY, Decimal("0"), Decimal("100.00"),
            PromoDecision.rejected(PromoRejection.EMPTY_CODE), "USD",
        )
        assert breakdown.promo_rejected is False
        assert breakdown.promo_reason is None

    def test_strip_promo_restores_after_online_total(self):
        applied = apply_discounts(
            Decimal("100.00"), BookingType.DAY, Decimal("10.00"), Decimal("90.00"),
            PromoDecision(valid=True, discount_amount=Decimal("9.00"), applied_code="PERCENT10", record_id=7),
            "USD",
        )
        stripped = strip_promo(applied, PromoRejection.LEDGER_CONFLICT)
        assert stripped.total == Decimal("90.00")
        assert stripped.online_discount == Decimal("10.00")
        assert stripped.promo_discount == 0
        assert stripped.promo_id is None
        assert stripped.promo_reason == PromoRejection.LEDGER_CONFLICT


# =============================================================================
# Engine
# =============================================================================

def make_request(start, end, parking_class=ParkingClass.INTERNAL, method=PaymentMethod.CASH, promo_code=None):
    return BookingRequest(parking_class=parking_class, start=start, end=end, payment_method=method, promo_code=promo_code)


class TestQuoteValidation:

    def test_missing_parking_class(self):
        result = quote(make_request(datetime(2026, 3, 1), datetime(2026, 3, 2), parking_class=None),
                       PricingConfig(), ONLINE_10, None, TODAY)
        assert result.ok is False
        assert result.error.message == "Missing data"

    def test_missing_end(self):
        result = quote(make_request(datetime(2026, 3, 1), None), PricingConfig(), ONLINE_10, None, TODAY)
        assert result.ok is False

    def test_end_equal_to_start(self):
        moment = datetime(2026, 3, 1, 10, 0)
        result = quote(make_request(moment, moment), PricingConfig(), ONLINE_10, None, TODAY)
        assert result.ok is False
        assert result.error.message == "End must be after start"

    def test_end_before_start(self):
        result = quote(make_request(datetime(2026, 3, 2), datetime(2026, 3, 1)), PricingConfig(), ONLINE_10, None, TODAY)
        assert result.ok is False


class TestQuoteScenarios:

    def test_internal_three_days(self):
        result = quote(make_request(datetime(2026, 3, 1, 10), datetime(2026, 3, 4, 10)),
                       PricingConfig(), ONLINE_10, None, TODAY)
        assert result.ok is True
        breakdown = result.value
        assert breakdown.base_price == Decimal("30.00")
        assert breakdown.booking_type == BookingType.DAY
        assert breakdown.total == Decimal("30.00")
        assert breakdown.currency == "USD"

    def test_external_thirty_days_monthly(self):
        result = quote(
            make_request(datetime(2026, 3, 1, 10), datetime(2026, 3, 31, 10), parking_class=ParkingClass.EXTERNAL),
            PricingConfig(), ONLINE_10, None, TODAY,
        )
        assert result.value.base_price == Decimal("84.00")
        assert result.value.booking_type == BookingType.MONTHLY

    def test_online_then_percent_promo(self):
        # 10 internal days -> 100, online 10% -> 90, PERCENT10 -> 9 off
        promo = percent10(min_amount=Decimal("50"))
        result = quote(
            make_request(datetime(2026, 3, 1, 10), datetime(2026, 3, 11, 10),
                         method=PaymentMethod.ONLINE, promo_code="percent10"),
            PricingConfig(), ONLINE_10, promo, TODAY,
        )
        breakdown = result.value
        assert breakdown.base_price == Decimal("100.00")
        assert breakdown.online_discount == Decimal("10.00")
        assert breakdown.after_online == Decimal("90.00")
        assert breakdown.promo_discount == Decimal("9.00")
        assert breakdown.total == Decimal("81.00")
        assert breakdown.promo_code == "PERCENT10"
        assert breakdown.promo_id == 7

    def test_promo_disallowing_online(self):
        promo = percent10(allow_online=False)
        result = quote(
            make_request(datetime(2026, 3, 1, 10), datetime(2026, 3, 11, 10),
                         method=PaymentMethod.ONLINE, promo_code="PERCENT10"),
            PricingConfig(), ONLINE_10, promo, TODAY,
        )
        breakdown = result.value
        assert breakdown.promo_discount == 0
        assert breakdown.promo_code == ""
        assert breakdown.total == Decimal("90.00")
        assert breakdown.promo_rejected is True
        assert breakdown.promo_reason == PromoRejection.PAYMENT_METHOD_NOT_ALLOWED

    def test_minimum_checked_against_after_online_amount(self):
        # base 100 passes a 95 minimum, but 90 after the online discount does not
        promo = percent10(min_amount=Decimal("95"))
        result = quote(
            make_request(datetime(2026, 3, 1, 10), datetime(2026, 3, 11, 10),
                         method=PaymentMethod.ONLINE, promo_code="PERCENT10"),
            PricingConfig(), ONLINE_10, promo, TODAY,
        )
        assert result.value.promo_reason == PromoRejection.BELOW_MINIMUM
        assert result.value.total == Decimal("90.00")

    def test_fixed_promo_after_online_discount(self):
        promo = percent10(discount_type=DiscountKind.FIXED, discount_value=Decimal("20"))
        result = quote(
            make_request(datetime(2026, 3, 1, 10), datetime(2026, 3, 11, 10),
                         method=PaymentMethod.ONLINE, promo_code="PERCENT10"),
            PricingConfig(), ONLINE_10, promo, TODAY,
        )
        # 100 - 10 online = 90, then 20 fixed -> 70 (the reverse order would give 72)
        assert result.value.total == Decimal("70.00")

    def test_percent_promo_order_independent(self):
        promo = percent10()
        result = quote(
            make_request(datetime(2026, 3, 1, 10), datetime(2026, 3, 11, 10),
                         method=PaymentMethod.ONLINE, promo_code="PERCENT10"),
            PricingConfig(), ONLINE_10, promo, TODAY,
        )
        # reverse order: promo on the base price, then the online discount
        base = Decimal("100.00")
        after_promo = base - compute_discount(promo, base)
        _, reverse_total = apply_online_discount(after_promo, PaymentMethod.ONLINE, ONLINE_10)
        assert result.value.total == Decimal("81.00")
        assert result.value.total == reverse_total

    def test_fixed_promo_online_first_is_cheaper(self):
        promo = percent10(discount_type=DiscountKind.FIXED, discount_value=Decimal("20"))
        result = quote(
            make_request(datetime(2026, 3, 1, 10), datetime(2026, 3, 11, 10),
                         method=PaymentMethod.ONLINE, promo_code="PERCENT10"),
            PricingConfig(), ONLINE_10, promo, TODAY,
        )
        base = Decimal("100.00")
        after_promo = base - compute_discount(promo, base)
        _, reverse_total = apply_online_discount(after_promo, PaymentMethod.ONLINE, ONLINE_10)
        assert reverse_total == Decimal("72.00")
        assert result.value.total < reverse_total

    def test_event_day_surcharge(self):
        config = PricingConfig(event_dates=frozenset({date(2026, 3, 2)}))
        result = quote(make_request(datetime(2026, 3, 1, 10), datetime(2026, 3, 4, 10)),
                       config, ONLINE_10, None, TODAY)
        assert result.value.base_price == Decimal("40.00")
        assert result.value.booking_type == BookingType.EVENT

    def test_sub_day_booking_billed_as_one_day(self):
        result = quote(make_request(datetime(2026, 3, 1, 8), datetime(2026, 3, 1, 11)),
                       PricingConfig(), ONLINE_10, None, TODAY)
        assert result.value.base_price == Decimal("10.00")

    def test_unknown_promo_flags_rejection(self):
        result = quote(make_request(datetime(2026, 3, 1, 10), datetime(2026, 3, 4, 10), promo_code="NOPE"),
                       PricingConfig(), ONLINE_10, None, TODAY)
        assert result.value.promo_rejected is True
        assert result.value.promo_reason == PromoRejection.NOT_FOUND
        assert result.value.total == Decimal("30.00")

    def test_currency_from_config(self):
        result = quote(make_request(datetime(2026, 3, 1, 10), datetime(2026, 3, 2, 10)),
                       PricingConfig(currency="EUR"), ONLINE_10, None, TODAY)
        assert result.value.currency == "EUR"

    @pytest.mark.parametrize("repeat", range(3))
    def test_same_inputs_same_breakdown(self, repeat):
        promo = percent10()
        req = make_request(datetime(2026, 3, 1, 10), datetime(2026, 3, 6, 10), promo_code="PERCENT10")
        first = quote(req, PricingConfig(), ONLINE_10, promo, TODAY)
        second = quote(req, PricingConfig(), ONLINE_10, promo, TODAY)
        assert first == second
