import asyncio
import logging
import os
import sys

from config import Settings
from errors import ReviewBotError
from pipeline import load_event, review_event
from utils.log_setup import setup_logging

logger = logging.getLogger("reviewbot")


async def run(settings: Settings, event_path: str) -> int:
    event = load_event(event_path)
    outcome = await review_event(event, settings)
    if outcome.skipped_reason:
        logger.info("Nothing reviewed: %s", outcome.skipped_reason)
    else:
        logger.info(
            "Reviewed %d files / %d hunks (%d failed); %d comments, review posted: %s",
            outcome.files_reviewed, outcome.hunks_reviewed, outcome.hunks_failed,
            len(outcome.comments), outcome.submitted,
        )
    return 0


def main() -> int:
    try:
        settings = Settings.from_env()
    except ReviewBotError as e:
        setup_logging()
        logger.error("Error: %s", e)
        return 1
    setup_logging(settings.log_level)
    try:
        return asyncio.run(run(settings, os.getenv("GITHUB_EVENT_PATH")))
    except Exception as e:
        logger.error("Error: %s", e, exc_info=not isinstance(e, ReviewBotError))
        return 1


if __name__ == "__main__":
    sys.exit(main())
