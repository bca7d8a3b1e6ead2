#!/usr/bin/env python
"""
Embellish URLs without storing them

Usage:
    python scripts/embellish_url.py <url> [<url> ...]
"""

import argparse
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
from linkstitcher.models import Preview
from linkstitcher.services.embellish import embellish_preview
from linkstitcher.services.extractors import build_extractors
from linkstitcher.services.pipeline import create_http_client

logger = logging.getLogger('embellish_url')


def format_preview(preview: Preview) -> str:
    lines = [f"{name}: {value!r}" for name, value in preview.to_row().items()]
    return "\n".join(lines)


async def run(settings: Settings, urls: list[str]) -> None:
    async with create_http_client(settings) as client:
        extractors = build_extractors(client, settings.github_token, settings.max_summary_chars)
        for url in urls:
            preview = Preview.from_url(url)
            result = await embellish_preview(preview, extractors, settings.max_summary_chars)
            if not result.ok:
                print(result.error)
            print("-" * 48)
            print(format_preview(preview))


def main():
    parser = argparse.ArgumentParser(description='Embellish URLs and print the resulting previews')
    parser.add_argument('urls', nargs='+', help='URLs to embellish')
    args = parser.parse_args()

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        configure_logging()
        logger.error(f"Configuration error: {e}")
        return 1

    configure_logging(settings.log_level)
    asyncio.run(run(settings, args.urls))
    return 0


if __name__ == '__main__':
    sys.exit(main())
