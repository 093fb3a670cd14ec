from datetime import time

import pytest

from sncf_watch.config.settings import AppConfig
from sncf_watch.models.proposal import Proposal


def offer_dict(price_label, *, comfort="2nde classe", title="Seconde", offer_id="o-1"):
    return {
        "id": offer_id,
        "comfortClass": {"label": comfort},
        "priceLabel": price_label,
        "title": title,
    }


def proposal_dict(
    travel_id="T1",
    *,
    departure_time="08:15",
    transporter="TGV INOUI - Direct",
    first=None,
    second=None,
):
    payload = {
        "id": f"p-{travel_id}",
        "travelId": travel_id,
        "departure": {"originStationLabel": "Paris Gare de Lyon", "timeLabel": departure_time, "dateLabel": "dim. 1 juin"},
        "arrival": {"destinationStationLabel": "Lyon Part-Dieu", "timeLabel": "10:12", "dateLabel": "dim. 1 juin"},
        "durationLabel": "1h57",
        "transporterDescription": transporter,
    }
    if first is not None:
        payload["firstComfortClassOffers"] = {"offers": first}
    if second is not None:
        payload["secondComfortClassOffers"] = {"offers": second}
    return payload


@pytest.fixture
def make_proposal():
    def _make(travel_id="T1", **kwargs):
        return Proposal.from_dict(proposal_dict(travel_id, **kwargs))

    return _make


@pytest.fixture
def make_offer():
    return offer_dict


@pytest.fixture
def app_config():
    return AppConfig(
        seconds_between_each_request=0,
        seconds_between_each_batch=0,
        dates_to_search=("2025-06-01",),
        minimum_departure_time=time(7, 0),
        train_type_direct_only=True,
        maximum_ticket_price=50,
    )
