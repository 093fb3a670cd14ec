from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, List, Tuple


def _label(payload: Any, key: str) -> str:
    if not isinstance(payload, dict):
        return ""
    value = payload.get(key)
    return "" if value is None else str(value)


def _offers_from_group(group: Any) -> List["Offer"]:
    if not isinstance(group, dict):
        return []
    items = group.get("offers")
    if not isinstance(items, list):
        return []
    return [Offer.from_dict(item) for item in items if isinstance(item, dict)]


@dataclass(slots=True, frozen=True)
class Offer:
    """A priced ticket option inside a proposal."""

    offer_id: str
    comfort_class_label: str
    price_label: str
    title: str

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Offer":
        comfort_class = payload.get("comfortClass")
        return cls(
            offer_id=_label(payload, "id"),
            comfort_class_label=_label(comfort_class, "label"),
            price_label=_label(payload, "priceLabel"),
            title=_label(payload, "title"),
        )

    @property
    def identity(self) -> Tuple[str, str]:
        # API offer ids change between requests for the same logical offer.
        return (self.price_label, self.title)

    @property
    def is_first_class(self) -> bool:
        return "1" in self.comfort_class_label


@dataclass(slots=True, frozen=True)
class StopLabel:
    """Station, time and date labels as rendered by the API."""

    station_label: str
    time_label: str
    date_label: str

    @classmethod
    def from_dict(cls, payload: Any, station_key: str) -> "StopLabel":
        return cls(
            station_label=_label(payload, station_key),
            time_label=_label(payload, "timeLabel"),
            date_label=_label(payload, "dateLabel"),
        )


@dataclass(slots=True, frozen=True)
class Proposal:
    """One journey option returned by the itinerary search."""

    proposal_id: str
    travel_id: str
    departure: StopLabel
    arrival: StopLabel
    duration_label: str
    transporter_description: str
    first_class_offers: Tuple[Offer, ...] = field(default_factory=tuple)
    second_class_offers: Tuple[Offer, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Proposal":
        return cls(
            proposal_id=_label(payload, "id"),
            travel_id=_label(payload, "travelId"),
            departure=StopLabel.from_dict(payload.get("departure"), "originStationLabel"),
            arrival=StopLabel.from_dict(payload.get("arrival"), "destinationStationLabel"),
            duration_label=_label(payload, "durationLabel"),
            transporter_description=_label(payload, "transporterDescription"),
            first_class_offers=tuple(_offers_from_group(payload.get("firstComfortClassOffers"))),
            second_class_offers=tuple(_offers_from_group(payload.get("secondComfortClassOffers"))),
        )

    def all_offers(self) -> List[Offer]:
        return [*self.first_class_offers, *self.second_class_offers]

    def keep_offers(self, predicate: Callable[[Offer], bool]) -> "Proposal":
        """Return a copy whose offer groups only retain offers matching ``predicate``."""

        return replace(
            self,
            first_class_offers=tuple(o for o in self.first_class_offers if predicate(o)),
            second_class_offers=tuple(o for o in self.second_class_offers if predicate(o)),
        )
