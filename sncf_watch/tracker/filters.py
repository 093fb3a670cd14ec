from __future__ import annotations

from datetime import datetime, time
import math
import re

from ..config.settings import AppConfig
from ..models.proposal import Offer, Proposal

_PRICE_NOISE = re.compile(r"[^0-9,]")
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")
_TIME_FMT = "%H:%M"


def parse_price(label: str) -> float:
    """Turn a price label such as ``"45,00 €"`` into ``45.0``.

    Everything but digits and commas is dropped and the first comma becomes the
    decimal point. Labels with no number left give ``nan``.
    """

    cleaned = _PRICE_NOISE.sub("", label or "").replace(",", ".", 1)
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return math.nan
    return float(match.group(0))


def is_direct(proposal: Proposal) -> bool:
    return "direct" in proposal.transporter_description.lower()


def departs_before(proposal: Proposal, minimum: time) -> bool:
    label = proposal.departure.time_label.strip()
    try:
        departure = datetime.strptime(label, _TIME_FMT).time()
    except ValueError:
        # Unparseable labels keep the plain string ordering.
        return label < minimum.strftime(_TIME_FMT)
    return departure < minimum


def offer_within_budget(offer: Offer, maximum_price: float) -> bool:
    # nan <= x is always False, so malformed labels drop out here.
    return parse_price(offer.price_label) <= maximum_price


def filter_proposal(proposal: Proposal, config: AppConfig) -> Proposal | None:
    """Return ``proposal`` trimmed to its affordable offers, or ``None`` if it is rejected."""

    if config.train_type_direct_only and not is_direct(proposal):
        return None
    if departs_before(proposal, config.minimum_departure_time):
        return None
    kept = proposal.keep_offers(lambda offer: offer_within_budget(offer, config.maximum_ticket_price))
    if not kept.all_offers():
        return None
    return kept
