from __future__ import annotations

import asyncio
import logging
import sys

from .config import load_settings
from .scheduler import watch_loop

LOGGER = logging.getLogger(__name__)


def main() -> None:
    settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    if not settings.telegram_enabled:
        LOGGER.warning("TELEGRAM_BOT_TOKEN or TELEGRAM_CHAT_ID is not set; offers will only be logged")

    LOGGER.info("Script execution started.")
    try:
        asyncio.run(watch_loop(settings))
    except KeyboardInterrupt:
        LOGGER.info("Interrupted, exiting")
    except Exception:
        LOGGER.exception("The main execution loop crashed.")
        sys.exit(1)


if __name__ == "__main__":
    main()
