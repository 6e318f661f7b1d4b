# parking_booking/services/booking_service.py
import logging
from datetime import date, datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from parking_booking.core.exceptions import LedgerConflict
from parking_booking.models.booking_models import Booking, BookingStatus
from parking_booking.pricing import engine
from parking_booking.pricing.discounts import strip_promo
from parking_booking.pricing.promo_validator import normalize_code
from parking_booking.pricing.types import (
    BookingRequest,
    PaymentMethod,
    PriceBreakdown,
    PromoRejection,
    PromoSnapshot,
    QuoteResult,
)
from parking_booking.schemas.booking_schemas import (
    BookingCreate,
    BookingCreateResponse,
    BookingListResponse,
    BookingOut,
    PriceBreakdownOut,
    QuoteRequest,
)
from parking_booking.services import notification_service, payment_service, promo_service, settings_service

logger = logging.getLogger(__name__)

PROMO_REJECTED_WARNING = "Promo code is invalid or expired."
PROMO_CONFLICT_WARNING = "Promo code is no longer available and was not applied."
PAYMENT_FAILED_WARNING = "Booking created but online payment could not be started. Please contact support."


def _wall_clock(value: Optional[datetime]) -> Optional[datetime]:
    # event days are matched on local calendar dates, so drop any offset
    if value is not None and value.tzinfo is not None:
        return value.replace(tzinfo=None)
    return value


def _same_zone(start: Optional[datetime], end: Optional[datetime]):
    """Express end in start's offset so both wall clocks describe the same instants."""
    if start is not None and end is not None and start.tzinfo is not None and end.tzinfo is not None:
        end = end.astimezone(start.tzinfo)
    return _wall_clock(start), _wall_clock(end)


def to_booking_request(payload: QuoteRequest) -> BookingRequest:
    start, end = _same_zone(payload.start_datetime, payload.end_datetime)
    return BookingRequest(
        parking_class=payload.parking_type,
        start=start,
        end=end,
        payment_method=payload.payment_method,
        promo_code=payload.promo_code,
    )


async def build_quote(db: AsyncSession, request: BookingRequest, today: Optional[date] = None) -> QuoteResult:
    """Load config and the promo snapshot, then run the pure engine. Read-only."""
    config, online = await settings_service.load_pricing(db)

    promo = None
    if normalize_code(request.promo_code):
        record = await promo_service.find_active_by_code(db, request.promo_code)
        if record is not None:
            promo = PromoSnapshot.from_record(record)

    return engine.quote(request, config, online, promo, today or date.today())


# --------------------------
# PREVIEW
# --------------------------
async def preview_quote(db: AsyncSession, payload: QuoteRequest, today: Optional[date] = None) -> PriceBreakdownOut:
    result = await build_quote(db, to_booking_request(payload), today)
    if not result.ok:
        raise HTTPException(status_code=400, detail=result.error.message)
    return PriceBreakdownOut.model_validate(result.value)


# --------------------------
# COMMIT
# --------------------------
async def _consume_promo(db: AsyncSession, breakdown: PriceBreakdown, warnings: list) -> PriceBreakdown:
    if breakdown.promo_id is None:
        return breakdown
    try:
        await promo_service.increment_usage(db, breakdown.promo_id)
    except LedgerConflict:
        logger.warning("Promo %s lost its last usage before commit; booking continues without it", breakdown.promo_code)
        warnings.append(PROMO_CONFLICT_WARNING)
        return strip_promo(breakdown, PromoRejection.LEDGER_CONFLICT)
    return breakdown


async def create_booking(db: AsyncSession, payload: BookingCreate, today: Optional[date] = None) -> BookingCreateResponse:
    customer_name = (payload.customer_name or "").strip()
    if not customer_name:
        raise HTTPException(status_code=400, detail="Please fill all required fields.")

    request = to_booking_request(payload)
    result = await build_quote(db, request, today)
    if not result.ok:
        raise HTTPException(status_code=400, detail=result.error.message)

    breakdown = result.value
    warnings = []
    if breakdown.promo_rejected:
        warnings.append(PROMO_REJECTED_WARNING)

    # usage increment and booking insert commit together
    breakdown = await _consume_promo(db, breakdown, warnings)

    booking = Booking(
        customer_name=customer_name,
        customer_email=(payload.customer_email or "").strip() or None,
        customer_phone=(payload.customer_phone or "").strip() or None,
        car_plate=(payload.car_plate or "").strip() or None,
        start_datetime=request.start,
        end_datetime=request.end,
        parking_type=request.parking_class.value,
        booking_type=breakdown.booking_type.value,
        payment_method=request.payment_method.value,
        base_price=breakdown.base_price,
        discount_online=breakdown.online_discount,
        discount_promo=breakdown.promo_discount,
        total_price=breakdown.total,
        promo_code=breakdown.promo_code or None,
        status=BookingStatus.PENDING,
    )
    db.add(booking)
    await db.flush()
    await db.commit()
    await db.refresh(booking)

    logger.info(
        "Booking %s created: %s %s, total %s %s, promo %r",
        booking.id, booking.parking_type, booking.booking_type,
        breakdown.currency, breakdown.total, breakdown.promo_code,
    )

    integrations = await settings_service.load_integrations(db)
    await notification_service.dispatch_booking_notifications(booking, integrations)

    payment_url = None
    if request.payment_method == PaymentMethod.ONLINE and integrations.stripe_enabled:
        payment_url = await payment_service.create_checkout_session(
            booking.id, breakdown.total, breakdown.currency, integrations.stripe_secret_key
        )
        if payment_url is None:
            warnings.append(PAYMENT_FAILED_WARNING)

    return BookingCreateResponse(
        booking=BookingOut.model_validate(booking),
        breakdown=PriceBreakdownOut.model_validate(breakdown),
        payment_url=payment_url,
        warnings=warnings,
    )


# --------------------------
# READ
# --------------------------
async def get_booking(db: AsyncSession, booking_id: int) -> Booking:
    booking = await db.get(Booking, booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


async def list_bookings(
    db: AsyncSession,
    status: Optional[BookingStatus] = None,
    limit: int = 50,
    offset: int = 0,
) -> BookingListResponse:
    filters = []
    if status is not None:
        filters.append(Booking.status == status)

    total = (await db.execute(select(func.count(Booking.id)).where(*filters))).scalar() or 0
    result = await db.execute(
        select(Booking)
        .where(*filters)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return BookingListResponse(
        total=total,
        bookings=[BookingOut.model_validate(b) for b in result.scalars().all()],
    )


# --------------------------
# UPDATE
# --------------------------
async def update_booking_status(db: AsyncSession, booking_id: int, status: BookingStatus) -> Booking:
    booking = await get_booking(db, booking_id)
    booking.status = status
    await db.commit()
    await db.refresh(booking)
    logger.info("Booking %s status set to %s", booking.id, status.value)
    return booking


async def handle_payment_return(db: AsyncSession, booking_id: int, result: str):
    """Checkout redirect target: success confirms a pending booking, cancel leaves it pending."""
    booking = await get_booking(db, booking_id)

    if result == "success":
        if booking.status == BookingStatus.PENDING:
            booking.status = BookingStatus.CONFIRMED
            await db.commit()
            await db.refresh(booking)
            logger.info("Booking %s confirmed after payment", booking.id)
        return "Payment successful. Your booking is now confirmed.", booking

    logger.info("Payment cancelled for booking %s", booking.id)
    return "Payment was cancelled. Your booking is still pending.", booking
