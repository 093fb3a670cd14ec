"""Shapes of the itinerary search response.

The API returns proposals either nested under a ``longDistance`` section or at
the top level of the body. Each shape gets its own class so callers can tell
which one was seen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Union

from .proposal import Proposal


@dataclass(slots=True)
class _ResponseBase:
    itinerary_id: Optional[str]
    proposals: List[Proposal] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class LongDistanceResponse(_ResponseBase):
    """Proposals found under ``longDistance.proposals.proposals``."""

    shape: ClassVar[str] = "long-distance"


@dataclass(slots=True)
class TopLevelResponse(_ResponseBase):
    """Proposals found under the top-level ``proposals`` key."""

    shape: ClassVar[str] = "top-level"


@dataclass(slots=True)
class EmptyResponse(_ResponseBase):
    """No recognizable proposal list in the body."""

    shape: ClassVar[str] = "empty"


ItineraryResponse = Union[LongDistanceResponse, TopLevelResponse, EmptyResponse]


def _long_distance_items(data: Dict[str, Any]) -> List[Dict[str, Any]] | None:
    section = data.get("longDistance")
    if not isinstance(section, dict):
        return None
    nested = section.get("proposals")
    if not isinstance(nested, dict):
        return None
    items = nested.get("proposals")
    if isinstance(items, list) and items:
        return items
    return None


def _itinerary_id(data: Dict[str, Any]) -> Optional[str]:
    if data.get("itineraryId"):
        return str(data["itineraryId"])
    section = data.get("longDistance")
    if isinstance(section, dict) and section.get("itineraryId"):
        return str(section["itineraryId"])
    return None


def parse_itinerary_response(data: Any) -> ItineraryResponse:
    if not isinstance(data, dict):
        return EmptyResponse(itinerary_id=None, raw={"body": data})

    itinerary_id = _itinerary_id(data)

    long_distance = _long_distance_items(data)
    if long_distance is not None:
        return LongDistanceResponse(
            itinerary_id=itinerary_id,
            proposals=[Proposal.from_dict(item) for item in long_distance if isinstance(item, dict)],
            raw=data,
        )

    top_level = data.get("proposals")
    if isinstance(top_level, list):
        return TopLevelResponse(
            itinerary_id=itinerary_id,
            proposals=[Proposal.from_dict(item) for item in top_level if isinstance(item, dict)],
            raw=data,
        )

    return EmptyResponse(itinerary_id=itinerary_id, raw=data)
