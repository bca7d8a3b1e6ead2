#!/usr/bin/env python
"""
Print every stored URL with its tag list

Usage:
    python scripts/print_all_bookmarks.py
"""

import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from linkstitcher import configure_logging
from linkstitcher.config import Settings
from linkstitcher.errors import ConfigError, StoreError
from linkstitcher.services.pipeline import create_store

logger = logging.getLogger('print_all_bookmarks')


def main():
    try:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        store = create_store(settings)
        previews = store.all()
    except (ConfigError, StoreError) as e:
        configure_logging()
        logger.error(f"{e}")
        return 1

    for preview in previews:
        print(f"- {preview.url!r}: {preview.tag_list()!r}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
