"""Offer filtering and change detection."""

from .cache import ItineraryCache
from .diff import process_proposals
from .filters import filter_proposal, parse_price

__all__ = ["ItineraryCache", "filter_proposal", "parse_price", "process_proposals"]
