# parking_booking/models/settings_models.py
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from parking_booking.core.db import Base


class Setting(Base):
    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())
