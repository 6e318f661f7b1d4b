# parking_booking/routers/quote_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from parking_booking.core.db import get_db
from parking_booking.schemas.booking_schemas import QuoteRequest, PriceBreakdownOut
from parking_booking.services import booking_service

router = APIRouter(prefix="/quote", tags=["Pricing"])


@router.post("/", response_model=PriceBreakdownOut)
async def route_preview_quote(payload: QuoteRequest, db: AsyncSession = Depends(get_db)):
    """
    Live price preview for the booking form.
    Never consumes a promo code usage; the same inputs always return the same breakdown.
    """
    return await booking_service.preview_quote(db, payload)
