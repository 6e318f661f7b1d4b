# parking_booking/services/promo_service.py
import logging
from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException

from parking_booking.core.exceptions import LedgerConflict
from parking_booking.models.promo_models import PromoCode
from parking_booking.pricing.promo_validator import normalize_code
from parking_booking.schemas.promo_schemas import PromoCodeCreate, PromoCodeUpdate

logger = logging.getLogger(__name__)

NULLABLE_FIELDS = {"valid_from", "valid_to"}


# -----------------------
# LEDGER
# -----------------------
async def find_active_by_code(db: AsyncSession, code: str | None) -> PromoCode | None:
    code = normalize_code(code)
    if not code:
        return None
    result = await db.execute(
        select(PromoCode).where(func.upper(PromoCode.code) == code, PromoCode.active == True)
    )
    return result.scalar_one_or_none()


async def increment_usage(db: AsyncSession, promo_id: int) -> None:
    """
    Consume one usage of a promo code inside the caller's transaction.

    A single conditional UPDATE, so two bookings racing for the last slot
    cannot both succeed. Raises LedgerConflict when no row qualifies.
    """
    stmt = (
        update(PromoCode)
        .where(
            PromoCode.id == promo_id,
            PromoCode.active == True,
            or_(PromoCode.max_uses == 0, PromoCode.used_count < PromoCode.max_uses),
        )
        .values(used_count=PromoCode.used_count + 1)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    if result.rowcount != 1:
        logger.warning("Promo code %s usage rejected by ledger", promo_id)
        raise LedgerConflict(promo_id)
    logger.info("Promo code %s usage incremented", promo_id)


# -----------------------
# Validation helpers
# -----------------------
def _check_promo_fields(discount_type, discount_value, valid_from, valid_to, allow_online, allow_cash):
    if discount_type == "percent" and discount_value > 100:
        raise HTTPException(status_code=400, detail="Percent discount must be between 0 and 100")
    if valid_from and valid_to and valid_from > valid_to:
        raise HTTPException(status_code=400, detail="valid_from must not be after valid_to")
    if not allow_online and not allow_cash:
        raise HTTPException(status_code=400, detail="Promo code must allow at least one payment method")


async def _ensure_code_free(db: AsyncSession, code: str, exclude_id: int | None = None):
    filters = [func.upper(PromoCode.code) == code]
    if exclude_id is not None:
        filters.append(PromoCode.id != exclude_id)
    existing = await db.execute(select(PromoCode.id).where(and_(*filters)))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(status_code=400, detail="Promo code already exists")


# -----------------------
# CREATE
# -----------------------
async def create_promo(db: AsyncSession, payload: PromoCodeCreate) -> PromoCode:
    code = normalize_code(payload.code)
    if not code:
        raise HTTPException(status_code=400, detail="Promo code is required")

    _check_promo_fields(
        payload.discount_type,
        payload.discount_value,
        payload.valid_from,
        payload.valid_to,
        payload.allow_online,
        payload.allow_cash,
    )
    await _ensure_code_free(db, code)

    promo = PromoCode(**payload.model_dump(exclude={"code"}), code=code, used_count=0)
    db.add(promo)
    await db.commit()
    await db.refresh(promo)

    logger.info("Created promo code %s (ID: %s)", promo.code, promo.id)
    return promo


# -----------------------
# READ
# -----------------------
async def get_all_promos(
    db: AsyncSession,
    code: str | None = None,
    active: bool | None = None,
    discount_type: str | None = None,
):
    filters = []
    if code:
        filters.append(PromoCode.code.ilike(f"%{code.strip()}%"))
    if active is not None:
        filters.append(PromoCode.active == active)
    if discount_type:
        filters.append(PromoCode.discount_type == discount_type.lower())

    query = select(PromoCode).where(*filters).order_by(PromoCode.created_at.desc(), PromoCode.id.desc())
    result = await db.execute(query)
    return result.scalars().all()


async def get_promo(db: AsyncSession, promo_id: int) -> PromoCode:
    promo = await db.get(PromoCode, promo_id)
    if not promo:
        raise HTTPException(status_code=404, detail="Promo code not found")
    return promo


# -----------------------
# UPDATE
# -----------------------
async def update_promo(db: AsyncSession, promo_id: int, payload: PromoCodeUpdate) -> PromoCode:
    promo = await get_promo(db, promo_id)
    # explicit null is kept so the validity window can be reopened
    update_data = payload.model_dump(exclude_unset=True)
    cleared = sorted(key for key, value in update_data.items() if value is None and key not in NULLABLE_FIELDS)
    if cleared:
        raise HTTPException(status_code=400, detail=f"Fields cannot be null: {', '.join(cleared)}")

    if "code" in update_data:
        update_data["code"] = normalize_code(update_data["code"])
        if not update_data["code"]:
            raise HTTPException(status_code=400, detail="Promo code is required")
        await _ensure_code_free(db, update_data["code"], exclude_id=promo.id)

    _check_promo_fields(
        update_data.get("discount_type", promo.discount_type),
        update_data.get("discount_value", promo.discount_value),
        update_data.get("valid_from", promo.valid_from),
        update_data.get("valid_to", promo.valid_to),
        update_data.get("allow_online", promo.allow_online),
        update_data.get("allow_cash", promo.allow_cash),
    )

    max_uses = update_data.get("max_uses", promo.max_uses)
    if max_uses and max_uses < promo.used_count:
        raise HTTPException(status_code=400, detail="max_uses cannot be lower than the current usage count")

    for key, value in update_data.items():
        setattr(promo, key, value)

    await db.commit()
    await db.refresh(promo)

    logger.info("Updated promo code %s (ID: %s)", promo.code, promo.id)
    return promo


# -----------------------
# DELETE (hard)
# -----------------------
async def delete_promo(db: AsyncSession, promo_id: int) -> PromoCode:
    promo = await get_promo(db, promo_id)
    await db.delete(promo)
    await db.commit()

    logger.info("Deleted promo code %s (ID: %s)", promo.code, promo_id)
    return promo
