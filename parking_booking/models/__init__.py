# parking_booking/models/__init__.py
from parking_booking.models.booking_models import Booking, BookingStatus
from parking_booking.models.promo_models import PromoCode
from parking_booking.models.settings_models import Setting
