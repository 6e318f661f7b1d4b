# parking_booking/services/payment_service.py
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

import httpx

from parking_booking.core.config import HTTP_TIMEOUT_SECONDS, PUBLIC_BASE_URL, STRIPE_API_URL

logger = logging.getLogger(__name__)


def to_minor_units(amount) -> int:
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def payment_return_url(booking_id: int, result: str) -> str:
    return f"{PUBLIC_BASE_URL}/bookings/{booking_id}/payment-return?result={result}"


async def create_checkout_session(
    booking_id: int,
    amount: Decimal,
    currency: str,
    secret_key: str,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[str]:
    """
    Start a Stripe Checkout session for a booking.

    Returns the hosted checkout URL, or None when the session could not be
    created. The booking price is final either way.
    """
    secret_key = (secret_key or "").strip()
    if not secret_key:
        logger.warning("Stripe secret key not configured, cannot start payment for booking %s", booking_id)
        return None

    data = {
        "mode": "payment",
        "success_url": payment_return_url(booking_id, "success"),
        "cancel_url": payment_return_url(booking_id, "cancel"),
        "client_reference_id": str(booking_id),
        "line_items[0][price_data][currency]": currency.lower(),
        "line_items[0][price_data][product_data][name]": f"Parking Booking #{booking_id}",
        "line_items[0][price_data][unit_amount]": str(to_minor_units(amount)),
        "line_items[0][quantity]": "1",
    }
    url = f"{STRIPE_API_URL}/checkout/sessions"
    headers = {"Authorization": f"Bearer {secret_key}"}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as own_client:
                response = await own_client.post(url, data=data, headers=headers)
        else:
            response = await client.post(url, data=data, headers=headers)
    except httpx.HTTPError:
        logger.exception("Stripe checkout request failed for booking %s", booking_id)
        return None

    if response.status_code not in (200, 201):
        logger.warning(
            "Stripe checkout for booking %s returned %s: %s",
            booking_id, response.status_code, response.text[:500],
        )
        return None

    try:
        session_url = response.json().get("url")
    except ValueError:
        logger.warning("Stripe checkout for booking %s returned a non-JSON body", booking_id)
        return None

    if not session_url:
        logger.warning("Stripe checkout for booking %s returned no url", booking_id)
        return None
    return session_url
