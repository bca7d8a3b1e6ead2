#!/usr/bin/env python
"""
Hacker News Job

1. Fetch https://hnrss.org/best
2. Skip stories already stored
3. Embellish the rest and run them through the smart filter
4. Store the relevant ones
5. Write <FEEDS_DIRPATH>/hackernews.feed.xml from the last week of stories

Usage:
    python scripts/hackernews.py

Exit codes:
    0 - Success
    1 - Failure
"""

import asyncio
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from linkstitcher import configure_logging
from linkstitcher.config import Settings
from linkstitcher.errors import ConfigError
from linkstitcher.services.completion import CompletionWorker, create_completion_service
from linkstitcher.services.extractors import build_extractors
from linkstitcher.services.pipeline import (
    HACKERNEWS_FILTER,
    create_http_client,
    create_store,
    run_hackernews_job,
)
from linkstitcher.services.smart_filter import SmartFilter

logger = logging.getLogger('hackernews')


async def run(settings: Settings) -> dict:
    store = create_store(settings)
    with CompletionWorker(create_completion_service(settings), settings.max_concurrency) as completion:
        smart_filter = SmartFilter(HACKERNEWS_FILTER, completion, settings.max_concurrency)
        async with create_http_client(settings) as client:
            extractors = build_extractors(client, settings.github_token, settings.max_summary_chars)
            return await run_hackernews_job(settings, store, client, extractors, smart_filter)


def main():
    """Main entry point for the hackernews job."""
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        configure_logging()
        logger.error(f"Configuration error: {e}")
        return 1

    configure_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("HACKERNEWS JOB STARTING")
    logger.info("=" * 60)

    try:
        result = asyncio.run(run(settings))
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except Exception as e:
        logger.error(f"JOB FAILED: {e}", exc_info=True)
        return 1

    logger.info("=" * 60)
    logger.info("JOB SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Stories Read:      {result['urls_read']}")
    logger.info(f"New Stories:       {result['new_previews']}")
    logger.info(f"Embellished:       {result['embellished']}")
    logger.info(f"Passed Filter:     {result['passed_filter']}")
    logger.info(f"Rejected:          {result['rejected_by_filter']}")
    logger.info(f"Stored:            {result['stored']}")
    logger.info(f"Feed Items:        {result['feed_items']}")
    logger.info(f"Duration:          {result['duration_seconds']:.1f}s")

    if result['errors']:
        logger.warning(f"Errors: {result['errors']}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
