# parking_booking/services/settings_service.py
import logging
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, FrozenSet, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from parking_booking.models.settings_models import Setting
from parking_booking.pricing.types import DEFAULT_MONTHLY_THRESHOLD, OnlineDiscountConfig, PricingConfig
from parking_booking.schemas.settings_schemas import SettingsOut, SettingsUpdate
from parking_booking.utils.decimal_utils import parse_decimal

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, str] = {
    "day_internal": "10",
    "day_external": "7",
    "month_internal": "90",
    "month_external": "70",
    "event_internal": "20",
    "event_external": "12",
    "monthly_threshold_days": str(DEFAULT_MONTHLY_THRESHOLD),
    "online_discount_enabled": "1",
    "online_discount_percent": "10",
    "event_dates": "",
    "currency": "usd",
    "admin_email": "",
    "whatsapp_enabled": "0",
    "whatsapp_phone_id": "",
    "whatsapp_token": "",
    "whatsapp_admin_number": "",
    "stripe_enabled": "0",
    "stripe_secret_key": "",
    "stripe_publishable_key": "",
}

EVENT_DATE_SEPARATORS = re.compile(r"[\r\n,]+")
EVENT_DATE_FORMAT = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class IntegrationSettings:
    currency: str = "USD"
    admin_email: str = ""
    whatsapp_enabled: bool = False
    whatsapp_phone_id: str = ""
    whatsapp_token: str = ""
    whatsapp_admin_number: str = ""
    stripe_enabled: bool = False
    stripe_secret_key: str = ""
    stripe_publishable_key: str = ""


# -----------------------
# Parsing helpers
# -----------------------
def _value(values: Dict[str, Optional[str]], key: str) -> str:
    raw = values.get(key)
    return DEFAULTS[key] if raw is None else raw


def get_decimal(values: Dict[str, Optional[str]], key: str, minimum: Decimal = Decimal("0")) -> Decimal:
    parsed = parse_decimal(_value(values, key))
    if parsed is None or parsed < minimum:
        logger.warning("Setting %r has unusable value %r, using default %s", key, values.get(key), DEFAULTS[key])
        return Decimal(DEFAULTS[key])
    return parsed


def get_int(values: Dict[str, Optional[str]], key: str, minimum: int = 0) -> int:
    raw = _value(values, key).strip()
    try:
        parsed = int(raw)
    except ValueError:
        parsed = None
    if parsed is None or parsed < minimum:
        logger.warning("Setting %r has unusable value %r, using default %s", key, values.get(key), DEFAULTS[key])
        return int(DEFAULTS[key])
    return parsed


def get_bool(values: Dict[str, Optional[str]], key: str) -> bool:
    raw = _value(values, key).strip().lower()
    if raw in TRUE_VALUES:
        return True
    if raw in FALSE_VALUES:
        return False
    logger.warning("Setting %r has unusable value %r, using default %s", key, values.get(key), DEFAULTS[key])
    return DEFAULTS[key] in TRUE_VALUES


def parse_event_dates(raw: Optional[str]) -> FrozenSet[date]:
    """Dates as YYYY-MM-DD separated by commas or newlines; anything else is skipped."""
    dates = set()
    for chunk in EVENT_DATE_SEPARATORS.split(raw or ""):
        chunk = chunk.strip()
        if not EVENT_DATE_FORMAT.match(chunk):
            continue
        try:
            dates.add(date.fromisoformat(chunk))
        except ValueError:
            logger.warning("Ignoring invalid event date %r", chunk)
    return frozenset(dates)


def format_event_dates(dates) -> str:
    return "\n".join(d.isoformat() for d in sorted(set(dates)))


def get_currency(values: Dict[str, Optional[str]]) -> str:
    currency = _value(values, "currency").strip()
    return (currency or DEFAULTS["currency"]).upper()


# -----------------------
# Config builders
# -----------------------
def build_pricing_config(values: Dict[str, Optional[str]]) -> PricingConfig:
    return PricingConfig(
        day_rate_internal=get_decimal(values, "day_internal"),
        day_rate_external=get_decimal(values, "day_external"),
        month_rate_internal=get_decimal(values, "month_internal"),
        month_rate_external=get_decimal(values, "month_external"),
        event_rate_internal=get_decimal(values, "event_internal"),
        event_rate_external=get_decimal(values, "event_external"),
        monthly_threshold_days=get_int(values, "monthly_threshold_days", minimum=1),
        event_dates=parse_event_dates(values.get("event_dates")),
        currency=get_currency(values),
    )


def build_online_discount_config(values: Dict[str, Optional[str]]) -> OnlineDiscountConfig:
    return OnlineDiscountConfig(
        enabled=get_bool(values, "online_discount_enabled"),
        percent=get_decimal(values, "online_discount_percent"),
    )


def build_integration_settings(values: Dict[str, Optional[str]]) -> IntegrationSettings:
    return IntegrationSettings(
        currency=get_currency(values),
        admin_email=_value(values, "admin_email").strip(),
        whatsapp_enabled=get_bool(values, "whatsapp_enabled"),
        whatsapp_phone_id=_value(values, "whatsapp_phone_id").strip(),
        whatsapp_token=_value(values, "whatsapp_token").strip(),
        whatsapp_admin_number=_value(values, "whatsapp_admin_number").strip(),
        stripe_enabled=get_bool(values, "stripe_enabled"),
        stripe_secret_key=_value(values, "stripe_secret_key").strip(),
        stripe_publishable_key=_value(values, "stripe_publishable_key").strip(),
    )


# -----------------------
# READ
# -----------------------
async def get_settings_map(db: AsyncSession) -> Dict[str, Optional[str]]:
    result = await db.execute(select(Setting))
    return {row.key: row.value for row in result.scalars().all()}


async def load_pricing(db: AsyncSession) -> Tuple[PricingConfig, OnlineDiscountConfig]:
    values = await get_settings_map(db)
    return build_pricing_config(values), build_online_discount_config(values)


async def load_integrations(db: AsyncSession) -> IntegrationSettings:
    return build_integration_settings(await get_settings_map(db))


async def get_settings(db: AsyncSession) -> SettingsOut:
    values = await get_settings_map(db)
    pricing = build_pricing_config(values)
    online = build_online_discount_config(values)
    integrations = build_integration_settings(values)

    return SettingsOut(
        day_internal=pricing.day_rate_internal,
        day_external=pricing.day_rate_external,
        month_internal=pricing.month_rate_internal,
        month_external=pricing.month_rate_external,
        event_internal=pricing.event_rate_internal,
        event_external=pricing.event_rate_external,
        monthly_threshold_days=pricing.monthly_threshold_days,
        online_discount_enabled=online.enabled,
        online_discount_percent=online.percent,
        event_dates=sorted(pricing.event_dates),
        currency=pricing.currency,
        admin_email=integrations.admin_email,
        whatsapp_enabled=integrations.whatsapp_enabled,
        whatsapp_phone_id=integrations.whatsapp_phone_id,
        whatsapp_admin_number=integrations.whatsapp_admin_number,
        whatsapp_token_set=bool(integrations.whatsapp_token),
        stripe_enabled=integrations.stripe_enabled,
        stripe_publishable_key=integrations.stripe_publishable_key,
        stripe_secret_key_set=bool(integrations.stripe_secret_key),
    )


# -----------------------
# UPDATE
# -----------------------
def _serialize(key: str, value) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if key == "event_dates":
        return format_event_dates(value)
    if key == "currency":
        return value.strip().lower()
    return str(value).strip()


async def update_settings(db: AsyncSession, payload: SettingsUpdate) -> SettingsOut:
    update_data = payload.model_dump(exclude_unset=True, exclude_none=True)

    for key, value in update_data.items():
        setting = await db.get(Setting, key)
        if setting is None:
            setting = Setting(key=key)
            db.add(setting)
        setting.value = _serialize(key, value)

    await db.commit()
    logger.info("Updated settings: %s", ", ".join(sorted(update_data)) or "none")
    return await get_settings(db)
