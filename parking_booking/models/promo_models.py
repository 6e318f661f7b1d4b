# parking_booking/models/promo_models.py
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Numeric, Date, Boolean, DateTime, CheckConstraint
from sqlalchemy.sql import func
from parking_booking.core.db import Base


class PromoCode(Base):
    __tablename__ = "promo_codes"
    __table_args__ = (
        CheckConstraint("used_count >= 0", name="ck_promo_used_count_non_negative"),
        CheckConstraint("max_uses = 0 OR used_count <= max_uses", name="ck_promo_used_count_within_cap"),
    )

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), unique=True, nullable=False, index=True)  # always upper-cased
    discount_type = Column(String(20), nullable=False)  # 'percent' or 'fixed'
    discount_value = Column(Numeric(10, 2), nullable=False)
    min_amount = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    max_uses = Column(Integer, nullable=False, default=0)  # 0 = unlimited
    used_count = Column(Integer, nullable=False, default=0)
    valid_from = Column(Date, nullable=True)
    valid_to = Column(Date, nullable=True)
    allow_online = Column(Boolean, nullable=False, default=True)
    allow_cash = Column(Boolean, nullable=False, default=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
