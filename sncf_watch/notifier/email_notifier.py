from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

from ..config.settings import Settings
from ..models.events import OfferEvent
from .telegram import format_offer_message

LOGGER = logging.getLogger(__name__)


def send_email_notification(event: OfferEvent, settings: Settings) -> None:
    """Send the offer announcement as an HTML email."""

    if not event.offers:
        return
    if not settings.email_enabled:
        LOGGER.debug("Email notifier is not fully configured; skipping")
        return

    html_body = format_offer_message(event).replace("\n", "<br>\n")
    message = EmailMessage()
    message["Subject"] = f"Train offer alert: {event.itinerary_name}"
    message["From"] = settings.email_sender
    message["To"] = settings.email_recipient
    message.set_content(
        f"{event.itinerary_name}\n"
        + "\n".join(f"{offer.comfort_class_label} : {offer.price_label}" for offer in event.offers)
    )
    message.add_alternative(f"<html><body>{html_body}</body></html>", subtype="html")

    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port or 587, timeout=10) as server:
            server.starttls()
            if settings.smtp_username and settings.smtp_password:
                server.login(settings.smtp_username, settings.smtp_password)
            server.send_message(message)
        LOGGER.info("Email notification sent")
    except Exception as exc:  # noqa: BLE001
        LOGGER.error("Email notification failed: %s", exc)
