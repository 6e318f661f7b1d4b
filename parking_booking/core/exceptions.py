# parking_booking/core/exceptions.py


class ValidationError(Exception):
    """Malformed required booking input (missing field, end not after start)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LedgerConflict(Exception):
    """The promo usage counter could not be advanced (cap reached or code gone)."""

    def __init__(self, promo_id: int):
        super().__init__(f"Promo code {promo_id} can no longer be used")
        self.promo_id = promo_id
