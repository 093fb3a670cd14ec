"""Data models."""

from .events import EventKind, OfferEvent
from .proposal import Offer, Proposal, StopLabel
from .response import (
    EmptyResponse,
    ItineraryResponse,
    LongDistanceResponse,
    TopLevelResponse,
    parse_itinerary_response,
)

__all__ = [
    "EmptyResponse",
    "EventKind",
    "ItineraryResponse",
    "LongDistanceResponse",
    "Offer",
    "OfferEvent",
    "Proposal",
    "StopLabel",
    "TopLevelResponse",
    "parse_itinerary_response",
]
