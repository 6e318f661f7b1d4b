# parking_booking/schemas/booking_schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from parking_booking.models.booking_models import BookingStatus
from parking_booking.pricing.types import BookingType, ParkingClass, PaymentMethod, PromoRejection


class QuoteRequest(BaseModel):
    # required fields are checked by the pricing engine so the caller gets
    # the same message for preview and commit
    parking_type: Optional[ParkingClass] = None
    start_datetime: Optional[datetime] = None
    end_datetime: Optional[datetime] = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    promo_code: Optional[str] = Field(default=None, max_length=100)


class PriceBreakdownOut(BaseModel):
    base_price: Decimal
    booking_type: BookingType
    online_discount: Decimal
    promo_discount: Decimal
    promo_code: str
    total: Decimal
    currency: str
    promo_rejected: bool = False
    promo_reason: Optional[PromoRejection] = None

    model_config = ConfigDict(from_attributes=True)


class BookingCreate(QuoteRequest):
    customer_name: Optional[str] = Field(default=None, max_length=255)
    customer_email: Optional[str] = Field(default=None, max_length=255)
    customer_phone: Optional[str] = Field(default=None, max_length=50)
    car_plate: Optional[str] = Field(default=None, max_length=50)


class BookingOut(BaseModel):
    id: int
    customer_name: str
    customer_email: Optional[str]
    customer_phone: Optional[str]
    car_plate: Optional[str]
    start_datetime: datetime
    end_datetime: datetime
    parking_type: ParkingClass
    booking_type: BookingType
    payment_method: PaymentMethod
    base_price: Decimal
    discount_online: Decimal
    discount_promo: Decimal
    total_price: Decimal
    promo_code: Optional[str]
    status: BookingStatus
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BookingCreateResponse(BaseModel):
    booking: BookingOut
    breakdown: PriceBreakdownOut
    payment_url: Optional[str] = None
    warnings: List[str] = []


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingListResponse(BaseModel):
    total: int
    bookings: List[BookingOut]
