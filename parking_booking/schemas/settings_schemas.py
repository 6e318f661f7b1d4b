# parking_booking/schemas/settings_schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional
from typing_extensions import Annotated
from datetime import date
from decimal import Decimal

Rate = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]
Percent = Annotated[Decimal, Field(ge=0, le=100, max_digits=5, decimal_places=2)]


class SettingsOut(BaseModel):
    day_internal: Decimal
    day_external: Decimal
    month_internal: Decimal
    month_external: Decimal
    event_internal: Decimal
    event_external: Decimal
    monthly_threshold_days: int
    online_discount_enabled: bool
    online_discount_percent: Decimal
    event_dates: List[date]
    currency: str
    admin_email: str
    whatsapp_enabled: bool
    whatsapp_phone_id: str
    whatsapp_admin_number: str
    whatsapp_token_set: bool
    stripe_enabled: bool
    stripe_publishable_key: str
    stripe_secret_key_set: bool


class SettingsUpdate(BaseModel):
    day_internal: Optional[Rate] = None
    day_external: Optional[Rate] = None
    month_internal: Optional[Rate] = None
    month_external: Optional[Rate] = None
    event_internal: Optional[Rate] = None
    event_external: Optional[Rate] = None
    monthly_threshold_days: Optional[int] = Field(default=None, ge=1)
    online_discount_enabled: Optional[bool] = None
    online_discount_percent: Optional[Percent] = None
    event_dates: Optional[List[date]] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    admin_email: Optional[str] = None
    whatsapp_enabled: Optional[bool] = None
    whatsapp_phone_id: Optional[str] = None
    whatsapp_token: Optional[str] = None
    whatsapp_admin_number: Optional[str] = None
    stripe_enabled: Optional[bool] = None
    stripe_secret_key: Optional[str] = None
    stripe_publishable_key: Optional[str] = None
