#!/usr/bin/env python
"""
Bookmarks Job

For every URL in BOOKMARKED_URLS_FILEPATH: reuse or create its preview,
embellish it if needed, synthesize tags, mark it bookmarked and store it.
The URL file is cleared afterwards.

Usage:
    python scripts/bookmarks.py

Exit codes:
    0 - Success (tag synthesis failures are reported but not fatal)
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
from linkstitcher.services.pipeline import create_http_client, create_store, run_bookmarks_job

logger = logging.getLogger('bookmarks')


async def run(settings: Settings) -> dict:
    store = create_store(settings)
    with CompletionWorker(create_completion_service(settings), settings.max_concurrency) as completion:
        async with create_http_client(settings) as client:
            extractors = build_extractors(client, settings.github_token, settings.max_summary_chars)
            return await run_bookmarks_job(settings, store, extractors, completion)


def main():
    """Main entry point for the bookmarks job."""
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        configure_logging()
        logger.error(f"Configuration error: {e}")
        return 1

    configure_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("BOOKMARKS JOB STARTING")
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
    logger.info(f"URLs Read:         {result['urls_read']}")
    logger.info(f"New Previews:      {result['new_previews']}")
    logger.info(f"Embellished:       {result['embellished']}")
    logger.info(f"Bookmarked:        {result['bookmarked']}")
    logger.info(f"Duration:          {result['duration_seconds']:.1f}s")

    if result['errors']:
        logger.warning(f"Errors: {result['errors']}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
