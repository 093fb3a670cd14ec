"""Polling loop."""

from .job import (
    DEFAULT_BATCH_DELAY_SECONDS,
    build_itinerary_name,
    payload_for_date,
    run_batch,
    run_itinerary,
    watch_loop,
)

__all__ = [
    "DEFAULT_BATCH_DELAY_SECONDS",
    "build_itinerary_name",
    "payload_for_date",
    "run_batch",
    "run_itinerary",
    "watch_loop",
]
