# parking_booking/models/booking_models.py
from decimal import Decimal
import enum
from sqlalchemy import Column, Integer, String, Numeric, DateTime, Enum
from sqlalchemy.sql import func
from parking_booking.core.db import Base


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"


class Booking(Base):
    __tablename__ = "parking_bookings"

    id = Column(Integer, primary_key=True, index=True)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(50), nullable=True)
    car_plate = Column(String(50), nullable=True)

    start_datetime = Column(DateTime, nullable=False)
    end_datetime = Column(DateTime, nullable=False)
    parking_type = Column(String(20), nullable=False)
    booking_type = Column(String(20), nullable=False)
    payment_method = Column(String(20), nullable=False)

    base_price = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    discount_online = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    discount_promo = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    total_price = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    # copy of the code string, not a foreign key; promo rows can be hard-deleted
    promo_code = Column(String(100), nullable=True)

    status = Column(Enum(BookingStatus, name="booking_status"), default=BookingStatus.PENDING, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
