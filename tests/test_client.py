import json
from unittest.mock import Mock

import pytest
import requests

from conftest import offer_dict, proposal_dict

from sncf_watch.api.client import ItineraryClient, ItineraryFetchError


def make_response(status_code=200, payload=None, text=""):
    response = Mock(status_code=status_code, ok=200 <= status_code < 300, text=text)
    response.json.return_value = payload
    return response


def make_client(*responses):
    session = Mock()
    session.post.side_effect = list(responses)
    sleep = Mock()
    client = ItineraryClient(
        {"x-api-key": "k"},
        base_url="https://api.example.test/v1/",
        more_results_delay_seconds=5,
        session=session,
        sleep=sleep,
    )
    return client, session, sleep


def test_fetch_combines_initial_and_more_results(tmp_path):
    initial = {
        "longDistance": {
            "itineraryId": "it-1",
            "proposals": {"proposals": [proposal_dict("T1", second=[offer_dict("30,00 €")])]},
        }
    }
    more = {"proposals": [proposal_dict("T2")]}
    client, session, sleep = make_client(make_response(payload=initial), make_response(payload=more))

    proposals = client.fetch_proposals(
        "Paris-Lyon on 2025-06-01",
        {"schedule": {}},
        {"itineraryId": None, "pagination": "NEXT"},
        output_file=tmp_path / "output.txt",
    )

    assert [p.travel_id for p in proposals] == ["T1", "T2"]
    sleep.assert_called_once_with(5)
    first_call, second_call = session.post.call_args_list
    assert first_call.args[0] == "https://api.example.test/v1/itineraries"
    assert first_call.kwargs["headers"] == {"x-api-key": "k"}
    assert first_call.kwargs["timeout"] is None
    assert second_call.args[0] == "https://api.example.test/v1/itineraries/more"
    assert second_call.kwargs["json"] == {"itineraryId": "it-1", "pagination": "NEXT"}
    assert not (tmp_path / "output.txt").exists()


def test_more_template_is_not_mutated():
    template = {"itineraryId": None}
    client, session, _ = make_client(
        make_response(payload={"itineraryId": "it-9", "proposals": [proposal_dict("T1")]}),
        make_response(payload={"proposals": []}),
    )

    client.fetch_proposals("x", {}, template)

    assert template == {"itineraryId": None}


def test_no_itinerary_id_skips_more_request():
    client, session, sleep = make_client(make_response(payload={"proposals": [proposal_dict("T1")]}))

    proposals = client.fetch_proposals("x", {}, {})

    assert len(proposals) == 1
    assert session.post.call_count == 1
    sleep.assert_not_called()


def test_initial_http_error_raises_with_status_and_body():
    client, _, _ = make_client(make_response(status_code=403, text="blocked"))

    with pytest.raises(ItineraryFetchError) as excinfo:
        client.fetch_proposals("x", {}, {})

    assert excinfo.value.status_code == 403
    assert excinfo.value.body == "blocked"


def test_more_http_error_keeps_initial_proposals(caplog):
    client, _, _ = make_client(
        make_response(payload={"itineraryId": "it-1", "proposals": [proposal_dict("T1")]}),
        make_response(status_code=500, text="boom"),
    )

    proposals = client.fetch_proposals("Paris-Lyon on 2025-06-01", {}, {})

    assert [p.travel_id for p in proposals] == ["T1"]
    assert any("boom" in record.getMessage() for record in caplog.records)


def test_transport_error_is_wrapped():
    session = Mock()
    session.post.side_effect = requests.ConnectionError("unreachable")
    client = ItineraryClient({}, session=session)

    with pytest.raises(ItineraryFetchError):
        client.search({})


def test_invalid_json_is_wrapped():
    response = make_response()
    response.json.side_effect = ValueError("no json")
    client, _, _ = make_client(response)

    with pytest.raises(ItineraryFetchError):
        client.search({})


def test_empty_results_write_raw_response(tmp_path):
    initial = {"itineraryId": "it-1", "message": "Aucun résultat"}
    client, _, _ = make_client(make_response(payload=initial), make_response(payload={"proposals": []}))
    output = tmp_path / "output.txt"

    proposals = client.fetch_proposals("x", {}, {}, output_file=output)

    assert proposals == []
    assert json.loads(output.read_text(encoding="utf-8")) == initial
