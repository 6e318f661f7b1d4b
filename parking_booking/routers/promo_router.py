# parking_booking/routers/promo_router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from parking_booking.core.db import get_db
from parking_booking.schemas.promo_schemas import PromoCodeCreate, PromoCodeUpdate, PromoCodeOut
from parking_booking.schemas.response_schemas import ResponseMessage
from parking_booking.services import promo_service

router = APIRouter(prefix="/promo-codes", tags=["Promo Codes"])


@router.post("/", response_model=PromoCodeOut, status_code=201)
async def route_create_promo(payload: PromoCodeCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a promo code. Codes are stored upper-cased and matched case-insensitively.
    """
    return await promo_service.create_promo(db, payload)


@router.get("/", response_model=List[PromoCodeOut])
async def route_get_all_promos(
    db: AsyncSession = Depends(get_db),
    code: str | None = Query(None, description="Filter by code (partial match)"),
    active: bool | None = Query(None, description="Filter by active flag"),
    discount_type: str | None = Query(None, description="Filter by type (percent/fixed)"),
):
    return await promo_service.get_all_promos(db, code=code, active=active, discount_type=discount_type)


@router.get("/{promo_id}", response_model=PromoCodeOut)
async def route_get_promo(promo_id: int, db: AsyncSession = Depends(get_db)):
    return await promo_service.get_promo(db, promo_id)


@router.put("/{promo_id}", response_model=PromoCodeOut)
async def route_update_promo(promo_id: int, payload: PromoCodeUpdate, db: AsyncSession = Depends(get_db)):
    """Update promo details. The usage counter is only advanced by bookings."""
    return await promo_service.update_promo(db, promo_id, payload)


@router.delete("/{promo_id}", response_model=ResponseMessage[PromoCodeOut])
async def route_delete_promo(promo_id: int, db: AsyncSession = Depends(get_db)):
    """Hard delete. Past bookings keep their own copy of the code and discount."""
    deleted = await promo_service.delete_promo(db, promo_id)
    return ResponseMessage(message="Promo code deleted", data=PromoCodeOut.model_validate(deleted))
