"""Notification helpers."""

from .email_notifier import send_email_notification
from .telegram import format_offer_message, send_offer_event

__all__ = ["format_offer_message", "send_email_notification", "send_offer_event"]
