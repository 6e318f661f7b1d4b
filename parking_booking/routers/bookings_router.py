# parking_booking/routers/bookings_router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from parking_booking.core.db import get_db
from parking_booking.models.booking_models import BookingStatus
from parking_booking.schemas.booking_schemas import (
    BookingCreate,
    BookingCreateResponse,
    BookingListResponse,
    BookingOut,
    BookingStatusUpdate,
)
from parking_booking.schemas.response_schemas import ResponseMessage
from parking_booking.services import booking_service

router = APIRouter(prefix="/bookings", tags=["Bookings"])


# CREATE
@router.post("/", response_model=BookingCreateResponse, status_code=201)
async def route_create_booking(payload: BookingCreate, db: AsyncSession = Depends(get_db)):
    """
    Price and save a booking.
    A valid promo code is consumed exactly once here. Notification or payment
    problems come back as warnings; the booking itself is already saved.
    """
    return await booking_service.create_booking(db, payload)


# GET ALL
@router.get("/", response_model=BookingListResponse)
async def route_list_bookings(
    db: AsyncSession = Depends(get_db),
    status: BookingStatus | None = Query(None, description="Filter by status (pending/confirmed/canceled)"),
    limit: int = Query(50, ge=1, le=200, description="Limit number of results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
):
    return await booking_service.list_bookings(db, status=status, limit=limit, offset=offset)


# GET SINGLE
@router.get("/{booking_id}", response_model=BookingOut)
async def route_get_booking(booking_id: int, db: AsyncSession = Depends(get_db)):
    return await booking_service.get_booking(db, booking_id)


# UPDATE STATUS
@router.patch("/{booking_id}/status", response_model=BookingOut)
async def route_update_booking_status(
    booking_id: int,
    payload: BookingStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.update_booking_status(db, booking_id, payload.status)


# PAYMENT RETURN
@router.get("/{booking_id}/payment-return", response_model=ResponseMessage[BookingOut])
async def route_payment_return(
    booking_id: int,
    result: str = Query(..., pattern="^(success|cancel)$"),
    db: AsyncSession = Depends(get_db),
):
    """Landing point for the checkout success and cancel redirects."""
    message, booking = await booking_service.handle_payment_return(db, booking_id, result)
    return ResponseMessage(message=message, data=BookingOut.model_validate(booking))
