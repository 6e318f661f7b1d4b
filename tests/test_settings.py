"""
Tests for the settings-backed config provider and the /settings endpoints.
"""
from datetime import date
from decimal import Decimal

import pytest

from parking_booking.services.settings_service import (
    build_integration_settings,
    build_online_discount_config,
    build_pricing_config,
    parse_event_dates,
)
from conftest import save_settings


# =============================================================================
# Unit Tests - parsing with defaults
# =============================================================================

class TestPricingConfigDefaults:

    def test_empty_store_uses_documented_defaults(self):
        config = build_pricing_config({})
        assert config.day_rate_internal == Decimal("10")
        assert config.day_rate_external == Decimal("7")
        assert config.month_rate_internal == Decimal("90")
        assert config.month_rate_external == Decimal("70")
        assert config.event_rate_internal == Decimal("20")
        assert config.event_rate_external == Decimal("12")
        assert config.monthly_threshold_days == 28
        assert config.event_dates == frozenset()
        assert config.currency == "USD"

    def test_stored_values_override_defaults(self):
        config = build_pricing_config({"day_internal": "12.5", "currency": "eur", "monthly_threshold_days": "30"})
        assert config.day_rate_internal == Decimal("12.5")
        assert config.currency == "EUR"
        assert config.monthly_threshold_days == 30

    @pytest.mark.parametrize("raw", ["abc", "", "-5", "NaN", "inf"])
    def test_unusable_rate_falls_back(self, raw):
        assert build_pricing_config({"day_external": raw}).day_rate_external == Decimal("7")

    @pytest.mark.parametrize("raw", ["0", "-1", "many", "2.5"])
    def test_unusable_threshold_falls_back(self, raw):
        assert build_pricing_config({"monthly_threshold_days": raw}).monthly_threshold_days == 28

    def test_blank_currency_falls_back(self):
        assert build_pricing_config({"currency": "  "}).currency == "USD"


class TestOnlineDiscountConfig:

    def test_defaults(self):
        online = build_online_discount_config({})
        assert online.enabled is True
        assert online.percent == Decimal("10")

    def test_disabled(self):
        assert build_online_discount_config({"online_discount_enabled": "0"}).enabled is False

    def test_garbage_flag_uses_default(self):
        assert build_online_discount_config({"online_discount_enabled": "maybe"}).enabled is True


class TestEventDates:

    def test_comma_and_newline_separated(self):
        dates = parse_event_dates("2026-03-01, 2026-03-05\n2026-04-01\r\n")
        assert dates == frozenset({date(2026, 3, 1), date(2026, 3, 5), date(2026, 4, 1)})

    def test_duplicates_collapse(self):
        assert parse_event_dates("2026-03-01,2026-03-01") == frozenset({date(2026, 3, 1)})

    def test_malformed_entries_skipped(self):
        assert parse_event_dates("2026-3-1, tomorrow, 2026-02-30, 2026-03-02") == frozenset({date(2026, 3, 2)})

    def test_empty(self):
        assert parse_event_dates(None) == frozenset()


class TestIntegrationSettings:

    def test_defaults_disable_everything(self):
        integrations = build_integration_settings({})
        assert integrations.whatsapp_enabled is False
        assert integrations.stripe_enabled is False
        assert integrations.currency == "USD"


# =============================================================================
# Integration Tests - /settings
# =============================================================================

class TestSettingsEndpoints:

    @pytest.mark.asyncio
    async def test_get_returns_defaults(self, client):
        response = await client.get("/settings/")
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["day_internal"]) == Decimal("10")
        assert data["monthly_threshold_days"] == 28
        assert data["currency"] == "USD"
        assert data["stripe_secret_key_set"] is False

    @pytest.mark.asyncio
    async def test_update_and_read_back(self, client):
        response = await client.put("/settings/", json={
            "day_internal": "11.00",
            "event_dates": ["2026-03-05", "2026-03-02", "2026-03-05"],
            "online_discount_enabled": False,
            "currency": "eur",
            "stripe_secret_key": "sk_test_123",
        })
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["day_internal"]) == Decimal("11")
        assert data["event_dates"] == ["2026-03-02", "2026-03-05"]
        assert data["online_discount_enabled"] is False
        assert data["currency"] == "EUR"
        assert data["stripe_secret_key_set"] is True
        assert "stripe_secret_key" not in data

    @pytest.mark.asyncio
    async def test_rejects_invalid_threshold(self, client):
        response = await client.put("/settings/", json={"monthly_threshold_days": 0})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_malformed_stored_value_reads_as_default(self, client):
        await save_settings(month_external="seventy")
        response = await client.get("/settings/")
        assert Decimal(response.json()["month_external"]) == Decimal("70")
