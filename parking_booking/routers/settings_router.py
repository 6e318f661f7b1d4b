# parking_booking/routers/settings_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from parking_booking.core.db import get_db
from parking_booking.schemas.settings_schemas import SettingsOut, SettingsUpdate
from parking_booking.services import settings_service

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("/", response_model=SettingsOut)
async def route_get_settings(db: AsyncSession = Depends(get_db)):
    """Effective pricing and integration settings, with defaults filled in. Secrets are not returned."""
    return await settings_service.get_settings(db)


@router.put("/", response_model=SettingsOut)
async def route_update_settings(payload: SettingsUpdate, db: AsyncSession = Depends(get_db)):
    return await settings_service.update_settings(db, payload)
