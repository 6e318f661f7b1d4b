# parking_booking/services/notification_service.py
"""
Booking notifications: HTML email to the customer and the admin, and
WhatsApp Cloud API text messages when enabled.

Every sender reports success as a bool and logs failures; nothing here is
allowed to fail a booking that is already saved.
"""
import asyncio
import logging
import re
import smtplib
from decimal import Decimal
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Optional, Tuple

import httpx

from parking_booking.core.config import (
    HTTP_TIMEOUT_SECONDS,
    SMTP_FROM_EMAIL,
    SMTP_HOST,
    SMTP_PASSWORD,
    SMTP_PORT,
    SMTP_USE_TLS,
    SMTP_USERNAME,
    WHATSAPP_API_URL,
    WHATSAPP_API_VERSION,
)
from parking_booking.models.booking_models import Booking
from parking_booking.services.settings_service import IntegrationSettings

logger = logging.getLogger(__name__)

NON_DIGITS = re.compile(r"\D+")


def _text(value) -> str:
    return getattr(value, "value", value) or ""


def format_money(currency: str, amount) -> str:
    return f"{currency} {Decimal(amount or 0):,.2f}"


def normalize_phone(number: Optional[str]) -> str:
    return NON_DIGITS.sub("", number or "")


# -----------------------
# Message content
# -----------------------
def build_customer_email(booking: Booking, currency: str) -> Tuple[str, str]:
    lines = [
        ("Booking ID", booking.id),
        ("Parking type", _text(booking.parking_type).capitalize()),
        ("Booking type", _text(booking.booking_type).capitalize()),
        ("Start", booking.start_datetime),
        ("End", booking.end_datetime),
        ("Payment method", _text(booking.payment_method).capitalize()),
        ("Base price", format_money(currency, booking.base_price)),
    ]
    if booking.discount_online and booking.discount_online > 0:
        lines.append(("Online discount", "-" + format_money(currency, booking.discount_online)))
    if booking.promo_code:
        lines.append(("Promo code", f"{booking.promo_code} ({format_money(currency, booking.discount_promo)})"))
    lines.append(("Total", format_money(currency, booking.total_price)))
    lines.append(("Status", _text(booking.status).capitalize()))

    subject = f"Your parking booking #{booking.id}"
    return subject, _html_list("Thank you for your booking", lines)


def build_admin_email(booking: Booking, currency: str) -> Tuple[str, str]:
    lines = [
        ("ID", booking.id),
        ("Name", booking.customer_name),
        ("Email", booking.customer_email),
        ("Phone", booking.customer_phone),
        ("Car Plate", booking.car_plate),
        ("Parking type", _text(booking.parking_type).capitalize()),
        ("Booking type", _text(booking.booking_type).capitalize()),
        ("Start", booking.start_datetime),
        ("End", booking.end_datetime),
        ("Payment method", _text(booking.payment_method).capitalize()),
        ("Total", format_money(currency, booking.total_price)),
    ]
    subject = f"New parking booking #{booking.id}"
    return subject, _html_list("New parking booking", lines)


def _html_list(title: str, lines) -> str:
    items = "".join(
        f"<li><strong>{escape(label)}:</strong> {escape(str(value if value is not None else ''))}</li>"
        for label, value in lines
    )
    return f"<h2>{escape(title)}</h2><ul>{items}</ul>"


def build_customer_whatsapp(booking: Booking, currency: str) -> str:
    return (
        f"Hello {booking.customer_name}, your parking booking #{booking.id} has been created.\n"
        f"Type: {_text(booking.parking_type)} ({_text(booking.booking_type)})\n"
        f"From: {booking.start_datetime}\n"
        f"To: {booking.end_datetime}\n"
        f"Payment: {_text(booking.payment_method)}\n"
        f"Total: {format_money(currency, booking.total_price)}"
    )


def build_admin_whatsapp(booking: Booking, currency: str) -> str:
    return (
        f"New booking #{booking.id}\n"
        f"Name: {booking.customer_name}\n"
        f"Phone: {booking.customer_phone or ''}\n"
        f"Type: {_text(booking.parking_type)} ({_text(booking.booking_type)})\n"
        f"Total: {format_money(currency, booking.total_price)}"
    )


# -----------------------
# Email (SMTP)
# -----------------------
def _send_smtp(to_email: str, subject: str, html_body: str) -> None:
    message = MIMEMultipart("alternative")
    message["Subject"] = subject
    message["From"] = SMTP_FROM_EMAIL
    message["To"] = to_email
    message.attach(MIMEText(html_body, "html", "utf-8"))

    with smtplib.SMTP(SMTP_HOST, SMTP_PORT, timeout=HTTP_TIMEOUT_SECONDS) as server:
        if SMTP_USE_TLS:
            server.starttls()
        if SMTP_USERNAME:
            server.login(SMTP_USERNAME, SMTP_PASSWORD)
        server.sendmail(SMTP_FROM_EMAIL, [to_email], message.as_string())


async def send_email(to_email: str, subject: str, html_body: str) -> bool:
    if not to_email:
        return False
    if not SMTP_HOST:
        logger.info("SMTP not configured, skipping email %r to %s", subject, to_email)
        return False
    try:
        await asyncio.to_thread(_send_smtp, to_email, subject, html_body)
    except (smtplib.SMTPException, OSError):
        logger.exception("Failed to send email %r to %s", subject, to_email)
        return False
    return True


# -----------------------
# WhatsApp Cloud API
# -----------------------
async def send_whatsapp(
    phone_id: str,
    token: str,
    to_number: str,
    body_text: str,
    client: Optional[httpx.AsyncClient] = None,
) -> bool:
    to_number = normalize_phone(to_number)
    if not to_number:
        return False

    url = f"{WHATSAPP_API_URL}/{WHATSAPP_API_VERSION}/{phone_id}/messages"
    payload = {
        "messaging_product": "whatsapp",
        "to": to_number,
        "type": "text",
        "text": {"preview_url": False, "body": body_text},
    }
    headers = {"Authorization": f"Bearer {token}"}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as own_client:
                response = await own_client.post(url, json=payload, headers=headers)
        else:
            response = await client.post(url, json=payload, headers=headers)
        response.raise_for_status()
    except httpx.HTTPError:
        logger.exception("WhatsApp message to %s failed", to_number)
        return False
    return True


# -----------------------
# Dispatch
# -----------------------
async def send_email_notifications(booking: Booking, integrations: IntegrationSettings) -> None:
    currency = integrations.currency
    if booking.customer_email:
        subject, body = build_customer_email(booking, currency)
        await send_email(booking.customer_email, subject, body)
    if integrations.admin_email:
        subject, body = build_admin_email(booking, currency)
        await send_email(integrations.admin_email, subject, body)


async def send_whatsapp_notifications(
    booking: Booking,
    integrations: IntegrationSettings,
    client: Optional[httpx.AsyncClient] = None,
) -> None:
    if not integrations.whatsapp_enabled:
        return
    if not integrations.whatsapp_phone_id or not integrations.whatsapp_token:
        logger.warning("WhatsApp enabled but phone id or token missing")
        return

    currency = integrations.currency
    if booking.customer_phone:
        await send_whatsapp(
            integrations.whatsapp_phone_id,
            integrations.whatsapp_token,
            booking.customer_phone,
            build_customer_whatsapp(booking, currency),
            client=client,
        )
    if integrations.whatsapp_admin_number:
        await send_whatsapp(
            integrations.whatsapp_phone_id,
            integrations.whatsapp_token,
            integrations.whatsapp_admin_number,
            build_admin_whatsapp(booking, currency),
            client=client,
        )


async def dispatch_booking_notifications(booking: Booking, integrations: IntegrationSettings) -> None:
    await send_email_notifications(booking, integrations)
    await send_whatsapp_notifications(booking, integrations)
