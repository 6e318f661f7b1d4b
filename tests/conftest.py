"""
Shared fixtures: an in-memory SQLite database and an async client bound to the app.
"""
import os

os.environ["DB_TYPE"] = "sqlite"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SMTP_HOST"] = ""

from datetime import date, datetime
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from main import app
from parking_booking.core.db import AsyncSessionLocal, engine, init_models
from parking_booking.models.promo_models import PromoCode
from parking_booking.models.settings_models import Setting
from parking_booking.pricing.types import PricingConfig


# =============================================================================
# Database
# =============================================================================

@pytest_asyncio.fixture
async def db_ready():
    """Fresh schema per test; disposing the pool discards the in-memory database."""
    await init_models()
    yield
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_ready):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def create_promo(**overrides) -> int:
    fields = dict(
        code="PERCENT10",
        discount_type="percent",
        discount_value=Decimal("10"),
        min_amount=Decimal("0"),
        max_uses=0,
        used_count=0,
        valid_from=None,
        valid_to=None,
        allow_online=True,
        allow_cash=True,
        active=True,
    )
    fields.update(overrides)
    async with AsyncSessionLocal() as session:
        promo = PromoCode(**fields)
        session.add(promo)
        await session.commit()
        return promo.id


async def promo_used_count(promo_id: int) -> int:
    async with AsyncSessionLocal() as session:
        promo = await session.get(PromoCode, promo_id)
        return promo.used_count


async def save_settings(**values) -> None:
    async with AsyncSessionLocal() as session:
        for key, value in values.items():
            session.add(Setting(key=key, value=value))
        await session.commit()


# =============================================================================
# Plain values
# =============================================================================

@pytest.fixture
def config():
    return PricingConfig()


def at(day: int, hour: int = 10, month: int = 3, year: int = 2026) -> datetime:
    return datetime(year, month, day, hour, 0)


TODAY = date(2026, 3, 1)
