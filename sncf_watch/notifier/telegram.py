from __future__ import annotations

from html import escape
import logging
import re
from typing import List

import requests

from ..models.events import OfferEvent
from ..models.proposal import Offer

LOGGER = logging.getLogger(__name__)
API_BASE = "https://api.telegram.org"
TELEGRAM_MESSAGE_LIMIT = 4000
PURCHASE_URL = "https://www.sncf-connect.com/"
SECTION_DIVIDER = "------------------------------------"
_HTML_TAG = re.compile(r"<[^>]+>")


def send_offer_event(token: str, chat_id: str, event: OfferEvent) -> None:
    """Send one HTML Telegram message announcing the offers in ``event``."""

    message = format_offer_message(event)
    for chunk in split_message_for_telegram(message):
        if chunk.strip():
            _post_message(token, chat_id, chunk)


def format_offer_message(event: OfferEvent) -> str:
    proposal = event.proposal
    departure = proposal.departure
    arrival = proposal.arrival

    lines = [f"<b>{escape(event.itinerary_name)}</b>"]
    if event.is_update:
        lines.append(f"--- Nouvelle(s) offre(s) pour le train de {escape(departure.time_label)} ---")
    else:
        lines.append("--- Nouvelle offre directe trouvée! ---")
    lines.extend(
        [
            f"Départ : {escape(departure.time_label)} {escape(departure.date_label)}",
            f"Arrivée : {escape(arrival.time_label)} {escape(arrival.date_label)}",
            f"Durée : {escape(proposal.duration_label)}",
            f"Type : {escape(proposal.transporter_description)}",
            "Offres :",
        ]
    )
    lines.extend(_format_offer_line(offer) for offer in event.offers)
    lines.append(f'Lien pour achat: <a href="{PURCHASE_URL}">SNCF Connect</a>')
    lines.append(SECTION_DIVIDER)
    return "\n".join(lines)


def split_message_for_telegram(text: str, max_length: int = TELEGRAM_MESSAGE_LIMIT) -> List[str]:
    """Split large telegram payloads into chunks on line boundaries.

    Lines built by :func:`format_offer_message` keep their markup balanced, so
    line-boundary cuts never break a tag. A single line longer than
    ``max_length`` loses its tags before being cut.
    """

    if len(text) <= max_length:
        return [text]

    chunks: List[str] = []
    current_lines: List[str] = []
    current_len = 0

    def flush_current() -> None:
        nonlocal current_lines, current_len
        if current_lines:
            chunks.append("\n".join(current_lines))
            current_lines = []
            current_len = 0

    for line in text.splitlines():
        line_len = len(line)
        if line_len > max_length:
            flush_current()
            chunks.extend(_split_long_line(line, max_length))
            continue

        addition = line_len if not current_lines else line_len + 1
        if current_len + addition > max_length:
            flush_current()
        current_lines.append(line)
        current_len += addition

    flush_current()
    return chunks or [""]


def _split_long_line(line: str, max_length: int) -> List[str]:
    # Tags cannot be balanced across chunks, so an oversized line is sent as plain text.
    plain = _HTML_TAG.sub("", line)
    pieces: List[str] = []
    start = 0
    while start < len(plain):
        end = min(start + max_length, len(plain))
        entity_start = plain.rfind("&", start, end)
        if end < len(plain) and entity_start > start and ";" not in plain[entity_start:end]:
            end = entity_start
        pieces.append(plain[start:end])
        start = end
    return pieces


def _format_offer_line(offer: Offer) -> str:
    class_name = "1er classe" if offer.is_first_class else "2de classe"
    return f"- {class_name} : {escape(offer.price_label)}"


def _post_message(token: str, chat_id: str, text: str) -> None:
    url = f"{API_BASE}/bot{token}/sendMessage"
    payload = {
        "chat_id": chat_id,
        "text": text,
        "parse_mode": "HTML",
        "disable_web_page_preview": True,
    }
    response = requests.post(url, json=payload, timeout=10)
    if response.status_code >= 400:
        LOGGER.error("Telegram notification failed: %s | %s", response.status_code, response.text)
    else:
        LOGGER.info("Telegram notification sent")
