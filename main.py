# main.py
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from parking_booking.core.config import LOG_LEVEL
from parking_booking.core.db import init_models
from parking_booking.middleware.request_logger import RequestLoggerMiddleware
from parking_booking.routers import bookings_router, promo_router, quote_router, settings_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    title="Parking Booking API",
    description="Parking reservations with tiered pricing, event surcharges and promo codes",
    version="2.0.0"
)
# CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # adjust for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggerMiddleware)

# Health check endpoint
@app.get("/", tags=["Health"])
async def health_check():
    return {"status": "ok", "message": "Backend is running"}

# Register routers
app.include_router(quote_router)
app.include_router(bookings_router)
app.include_router(promo_router)
app.include_router(settings_router)


@app.on_event("startup")
async def on_startup():
    await init_models()
