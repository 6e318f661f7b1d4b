# parking_booking/schemas/promo_schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from typing_extensions import Annotated
from datetime import date, datetime
from decimal import Decimal

PositiveDecimal = Annotated[Decimal, Field(gt=0, max_digits=10, decimal_places=2)]
NonNegativeDecimal = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]
DiscountType = Annotated[str, Field(pattern="^(percent|fixed)$")]


class PromoCodeBase(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    discount_type: DiscountType = "percent"
    discount_value: PositiveDecimal
    min_amount: NonNegativeDecimal = Decimal("0.00")
    max_uses: int = Field(default=0, ge=0, description="0 = unlimited")
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    allow_online: bool = True
    allow_cash: bool = True
    active: bool = True


class PromoCodeCreate(PromoCodeBase):
    pass


class PromoCodeUpdate(BaseModel):
    code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[PositiveDecimal] = None
    min_amount: Optional[NonNegativeDecimal] = None
    max_uses: Optional[int] = Field(default=None, ge=0)
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    allow_online: Optional[bool] = None
    allow_cash: Optional[bool] = None
    active: Optional[bool] = None


class PromoCodeOut(PromoCodeBase):
    id: int
    used_count: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
