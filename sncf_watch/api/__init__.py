"""SNCF Connect itinerary API client."""

from .client import ItineraryClient, ItineraryFetchError, dump_response

__all__ = ["ItineraryClient", "ItineraryFetchError", "dump_response"]
