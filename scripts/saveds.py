#!/usr/bin/env python
"""
Saved URLs Job

1. Read new URLs from SAVED_URLS_FILEPATH
2. Embellish them (arXiv / x.com / GitHub / web extraction)
3. Store them as saved previews
4. Write <FEEDS_DIRPATH>/saveds.feed.xml from the last week of saved previews
5. Clear the URL file

Usage:
    python scripts/saveds.py

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
from linkstitcher.services.extractors import build_extractors
from linkstitcher.services.pipeline import create_http_client, create_store, run_saveds_job

logger = logging.getLogger('saveds')


async def run(settings: Settings) -> dict:
    store = create_store(settings)
    async with create_http_client(settings) as client:
        extractors = build_extractors(client, settings.github_token, settings.max_summary_chars)
        return await run_saveds_job(settings, store, extractors)


def main():
    """Main entry point for the saveds job."""
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        configure_logging()
        logger.error(f"Configuration error: {e}")
        return 1

    configure_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("SAVEDS JOB STARTING")
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
    logger.info(f"Extraction Errors: {result['extraction_failures']}")
    logger.info(f"Stored:            {result['stored']}")
    logger.info(f"Feed Items:        {result['feed_items']}")
    logger.info(f"Duration:          {result['duration_seconds']:.1f}s")
    return 0


if __name__ == '__main__':
    sys.exit(main())
