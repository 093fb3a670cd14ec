from __future__ import annotations

import asyncio
import copy
from datetime import datetime, timezone
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping

from ..api.client import ItineraryClient, ItineraryFetchError
from ..config.settings import (
    AppConfig,
    ConfigError,
    Settings,
    load_app_config,
    load_json_template,
)
from ..models.events import OfferEvent
from ..notifier import email_notifier
from ..notifier.telegram import format_offer_message, send_offer_event
from ..tracker.cache import ItineraryCache
from ..tracker.diff import process_proposals

LOGGER = logging.getLogger(__name__)

DEFAULT_BATCH_DELAY_SECONDS = 10

Sleep = Callable[[float], Awaitable[Any]]


def build_itinerary_name(base_payload: Mapping[str, Any], date: str) -> str:
    journey = base_payload["mainJourney"]
    return f"{journey['origin']['label']}-{journey['destination']['label']} on {date}"


def payload_for_date(base_payload: Mapping[str, Any], date: str) -> Dict[str, Any]:
    """Copy ``base_payload`` with the outward date moved to ``date``, keeping its UTC time of day."""

    payload = copy.deepcopy(dict(base_payload))
    outward = payload["schedule"]["outward"]
    original = datetime.fromisoformat(str(outward["date"]).replace("Z", "+00:00"))
    if original.tzinfo is None:
        original = original.replace(tzinfo=timezone.utc)
    time_part = original.astimezone(timezone.utc).time().isoformat(timespec="milliseconds")
    outward["date"] = f"{date}T{time_part}Z"
    return payload


async def run_itinerary(
    itinerary_name: str,
    payload: Mapping[str, Any],
    more_payload: Mapping[str, Any],
    client: ItineraryClient,
    config: AppConfig,
    cache: ItineraryCache,
    settings: Settings,
) -> List[OfferEvent]:
    """Fetch, diff and notify a single itinerary/date."""

    try:
        proposals = await asyncio.to_thread(
            client.fetch_proposals,
            itinerary_name,
            payload,
            more_payload,
            output_file=settings.output_file,
        )
    except ItineraryFetchError as exc:
        LOGGER.error(
            "An error occurred while fetching the data for %s: %s | %s | %s",
            itinerary_name,
            exc,
            exc.status_code,
            exc.body,
        )
        return []
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("Search cycle crashed for %s: %s", itinerary_name, exc)
        return []

    if not proposals:
        # Empty answers leave the cached snapshot untouched.
        LOGGER.info("No proposals for %s; keeping previous snapshot", itinerary_name)
        return []

    events = process_proposals(itinerary_name, proposals, config, cache)
    for event in events:
        await _dispatch_event(event, settings)
    return events


async def run_batch(
    settings: Settings,
    cache: ItineraryCache,
    *,
    client: ItineraryClient | None = None,
    sleep: Sleep = asyncio.sleep,
) -> List[OfferEvent]:
    """Process every configured date once."""

    LOGGER.info("--- Starting new check cycle ---")
    all_events: List[OfferEvent] = []
    try:
        config = load_app_config(settings.config_file)
        base_payload = load_json_template(settings.payload_file)
        more_payload = load_json_template(settings.payload_more_file)
        if client is None:
            client = ItineraryClient(
                load_json_template(settings.headers_file),
                base_url=settings.api_base_url,
                more_results_delay_seconds=settings.more_results_delay_seconds,
                timeout=settings.api_timeout_seconds,
            )

        for date in config.dates_to_search:
            itinerary_name = build_itinerary_name(base_payload, date)
            payload = payload_for_date(base_payload, date)
            events = await run_itinerary(itinerary_name, payload, more_payload, client, config, cache, settings)
            all_events.extend(events)
            await sleep(config.seconds_between_each_request)
    except (ConfigError, OSError, KeyError, TypeError, ValueError) as exc:
        LOGGER.exception("Error during check cycle: %s", exc)
    return all_events


def read_batch_delay(settings: Settings) -> float:
    try:
        return load_app_config(settings.config_file).seconds_between_each_batch
    except (OSError, ValueError) as exc:
        LOGGER.error(
            "Failed to read config for batch delay, using default %s seconds: %s",
            DEFAULT_BATCH_DELAY_SECONDS,
            exc,
        )
        return DEFAULT_BATCH_DELAY_SECONDS


async def watch_loop(
    settings: Settings,
    *,
    cache: ItineraryCache | None = None,
    client: ItineraryClient | None = None,
    sleep: Sleep = asyncio.sleep,
    max_batches: int | None = None,
) -> None:
    """Run batches until the process is stopped (or ``max_batches`` is reached)."""

    cache = cache if cache is not None else ItineraryCache()
    completed = 0
    while max_batches is None or completed < max_batches:
        started = datetime.now()
        try:
            await run_batch(settings, cache, client=client, sleep=sleep)
        finally:
            elapsed = (datetime.now() - started).total_seconds()
            LOGGER.info("Batch took %.1fs", elapsed)
        completed += 1
        await sleep(read_batch_delay(settings))


async def _dispatch_event(event: OfferEvent, settings: Settings) -> None:
    LOGGER.info("%s\n%s", event.kind.value, format_offer_message(event))

    if settings.telegram_enabled:
        try:
            await asyncio.to_thread(
                send_offer_event,
                settings.telegram_bot_token,
                settings.telegram_chat_id,
                event,
            )
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("Telegram notification failed: %s", exc)
    else:
        LOGGER.warning("Telegram bot token or chat_id is not configured. Skipping Telegram notification.")

    if settings.email_enabled:
        try:
            await asyncio.to_thread(email_notifier.send_email_notification, event, settings)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Email notifier error: %s", exc)
