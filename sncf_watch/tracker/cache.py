from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterator, Mapping

from ..models.proposal import Proposal


class ItineraryCache:
    """Last filtered proposals seen per itinerary, keyed by ``travel_id``.

    Only proposals that passed the filters in their latest observation are
    stored. Each cycle swaps an itinerary's entry wholesale.
    """

    def __init__(self) -> None:
        self._itineraries: Dict[str, Dict[str, Proposal]] = {}

    def snapshot(self, itinerary_name: str) -> Mapping[str, Proposal]:
        return MappingProxyType(self._itineraries.get(itinerary_name, {}))

    def replace(self, itinerary_name: str, proposals: Mapping[str, Proposal]) -> None:
        self._itineraries[itinerary_name] = dict(proposals)

    def travel_ids(self, itinerary_name: str) -> set[str]:
        return set(self._itineraries.get(itinerary_name, {}))

    def __contains__(self, itinerary_name: object) -> bool:
        return itinerary_name in self._itineraries

    def __iter__(self) -> Iterator[str]:
        return iter(self._itineraries)

    def __len__(self) -> int:
        return len(self._itineraries)
