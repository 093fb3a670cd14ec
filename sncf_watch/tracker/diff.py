from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from ..config.settings import AppConfig
from ..models.events import EventKind, OfferEvent
from ..models.proposal import Proposal
from .cache import ItineraryCache
from .filters import filter_proposal

LOGGER = logging.getLogger(__name__)


def process_proposals(
    itinerary_name: str,
    proposals: Sequence[Proposal],
    config: AppConfig,
    cache: ItineraryCache,
) -> List[OfferEvent]:
    """Filter one cycle's proposals and return the offers that are new since the last cycle.

    The itinerary's cache entry is replaced by this cycle's filtered proposals
    once all of them have been compared. Proposals that vanished or stopped
    matching are dropped without an event.
    """

    previous = cache.snapshot(itinerary_name)
    fresh: Dict[str, Proposal] = {}
    events: List[OfferEvent] = []

    for proposal in proposals:
        kept = filter_proposal(proposal, config)
        if kept is None:
            LOGGER.debug("Filtered out %s (%s)", proposal.travel_id, itinerary_name)
            continue

        fresh[kept.travel_id] = kept
        offers = kept.all_offers()
        cached = previous.get(kept.travel_id)

        if cached is None:
            events.append(OfferEvent(itinerary_name, EventKind.NEW_PROPOSAL, kept, tuple(offers)))
            continue

        seen = {offer.identity for offer in cached.all_offers()}
        appeared = tuple(offer for offer in offers if offer.identity not in seen)
        if appeared:
            events.append(OfferEvent(itinerary_name, EventKind.UPDATED_PROPOSAL, kept, appeared))

    cache.replace(itinerary_name, fresh)
    LOGGER.info(
        "%s: %d proposals received, %d kept, %d to notify",
        itinerary_name,
        len(proposals),
        len(fresh),
        len(events),
    )
    return events
