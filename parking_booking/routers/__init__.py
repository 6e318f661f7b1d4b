# parking_booking/routers/__init__.py

from .bookings_router import router as bookings_router
from .promo_router import router as promo_router
from .quote_router import router as quote_router
from .settings_router import router as settings_router

__all__ = [
    "bookings_router",
    "promo_router",
    "quote_router",
    "settings_router",
]
