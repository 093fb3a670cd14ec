from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
import time
from typing import Any, Callable, Dict, List, Mapping

import requests

from ..config.settings import DEFAULT_API_BASE_URL
from ..models.proposal import Proposal
from ..models.response import ItineraryResponse, parse_itinerary_response

LOGGER = logging.getLogger(__name__)


class ItineraryFetchError(RuntimeError):
    """HTTP or transport failure while talking to the itinerary API."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ItineraryClient:
    """Client for the SNCF Connect ``/itineraries`` endpoints."""

    def __init__(
        self,
        headers: Mapping[str, str],
        *,
        base_url: str = DEFAULT_API_BASE_URL,
        more_results_delay_seconds: float = 5.0,
        timeout: float | None = None,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.headers = dict(headers)
        self.base_url = base_url.rstrip("/")
        self.more_results_delay_seconds = more_results_delay_seconds
        self.timeout = timeout
        self.session = session or requests.Session()
        self._sleep = sleep

    def search(self, payload: Mapping[str, Any]) -> ItineraryResponse:
        return self._post("/itineraries", payload)

    def search_more(self, itinerary_id: str, more_payload_template: Mapping[str, Any]) -> ItineraryResponse:
        payload = copy.deepcopy(dict(more_payload_template))
        payload["itineraryId"] = itinerary_id
        return self._post("/itineraries/more", payload)

    def fetch_proposals(
        self,
        itinerary_name: str,
        payload: Mapping[str, Any],
        more_payload_template: Mapping[str, Any],
        *,
        output_file: str | Path | None = None,
    ) -> List[Proposal]:
        """Run the initial search and the "more results" follow-up for one itinerary.

        A failed initial search raises :class:`ItineraryFetchError`. A failed
        follow-up is logged and the initial proposals are still returned. When
        neither call yields a proposal, the raw initial body is written to
        ``output_file``.
        """

        LOGGER.info("Fetching initial itineraries for %s...", itinerary_name)
        initial = self.search(payload)
        LOGGER.info(
            "Found %d proposals from initial request for %s (%s response).",
            len(initial.proposals),
            itinerary_name,
            initial.shape,
        )

        more_proposals: List[Proposal] = []
        if initial.itinerary_id:
            self._sleep(self.more_results_delay_seconds)
            LOGGER.info("Fetching more itineraries for %s...", itinerary_name)
            try:
                more = self.search_more(initial.itinerary_id, more_payload_template)
            except ItineraryFetchError as exc:
                LOGGER.error(
                    "More itineraries failed for %s: %s | %s",
                    itinerary_name,
                    exc.status_code,
                    exc.body,
                )
            else:
                more_proposals = more.proposals
                LOGGER.info("Found %d more proposals for %s.", len(more_proposals), itinerary_name)

        proposals = [*initial.proposals, *more_proposals]
        if not proposals and output_file is not None:
            dump_response(initial.raw, output_file)
            LOGGER.info(
                "No proposals found for %s after both requests. API response saved to %s.",
                itinerary_name,
                output_file,
            )
        return proposals

    def _post(self, path: str, payload: Mapping[str, Any]) -> ItineraryResponse:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.post(url, headers=self.headers, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ItineraryFetchError(f"Request to {url} failed: {exc}") from exc

        if not response.ok:
            raise ItineraryFetchError(
                f"HTTP {response.status_code} from {url}",
                status_code=response.status_code,
                body=response.text,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise ItineraryFetchError(
                f"Invalid JSON from {url}",
                status_code=response.status_code,
                body=response.text,
            ) from exc
        return parse_itinerary_response(data)


def dump_response(data: Dict[str, Any], output_file: str | Path) -> None:
    """Write a raw API body to disk for offline inspection."""

    path = Path(output_file)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(data, handle, indent=2, ensure_ascii=False)
