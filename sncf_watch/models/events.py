from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .proposal import Offer, Proposal


class EventKind(str, Enum):
    NEW_PROPOSAL = "new direct offer found"
    UPDATED_PROPOSAL = "update to existing proposal"


@dataclass(slots=True, frozen=True)
class OfferEvent:
    """Offers that became visible for one proposal during a cycle."""

    itinerary_name: str
    kind: EventKind
    proposal: Proposal
    offers: Tuple[Offer, ...]

    @property
    def is_update(self) -> bool:
        return self.kind is EventKind.UPDATED_PROPOSAL
