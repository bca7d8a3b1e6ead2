"""
Pipeline Service - Job Orchestration

The three ingestion jobs behind the scripts:

1. saveds: URLs from the saved-URLs file -> embellish -> insert -> saveds feed
2. bookmarks: URLs from the bookmarked-URLs file -> embellish -> tag -> upsert
3. hackernews: best-of Hacker News RSS -> embellish -> smart filter -> insert
   -> hackernews feed

Each job returns a stats dict and logs job_start/job_complete events.
"""

import json
import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Optional

import httpx

from linkstitcher import __version__
from linkstitcher.config import RECENCY_CUTOFF_DAYS, Settings
from linkstitcher.database import create_db_engine, create_session_factory
from linkstitcher.errors import CompletionError, StoreError
from linkstitcher.models import Preview
from linkstitcher.services.completion import CompletionWorker
from linkstitcher.services.embellish import embellish_many, embellish_preview
from linkstitcher.services.extractors import ExtractionResult, Extractor
from linkstitcher.services.rss_channel import fetch_channel, into_previews, render_channel, write_channel
from linkstitcher.services.smart_filter import FilterConfig, FilterErrorPolicy, SmartFilter
from linkstitcher.services.source_classifier import SourceKind
from linkstitcher.services.store import PreviewStore
from linkstitcher.services.tag_synthesizer import bookmark_preview

logger = logging.getLogger(__name__)

# Saved URLs feed
SAVEDS_FEED_FILENAME = "saveds.feed.xml"
SAVEDS_FEED_TITLE = "linkstitcher/saveds"
SAVEDS_FEED_DESCRIPTION = "The linkstitcher feed for saved URLs."

# Hacker News feed
HACKERNEWS_CHANNEL_URL = "https://hnrss.org/best"
HACKERNEWS_SOURCE = "Hackernews: Customized"
HACKERNEWS_FEED_FILENAME = "hackernews.feed.xml"
HACKERNEWS_FEED_TITLE = "linkstitcher/hackernews"
HACKERNEWS_FEED_DESCRIPTION = "The linkstitcher feed for Hacker News"

HACKERNEWS_KEYWORDS = (
    "programming languages",
    "type theory",
    "type system",
    "haskell",
    "AI",
    "developer tools",
    "video game development",
    "functional programming",
    "dev tools",
    "rust",
    "purescript",
    "compilers",
    "developer experience",
    "category theory",
    "liquid haskell",
    "monad",
    "metaprogramming",
    "mac mini",
    "logic programming",
    "effect systems for purely functional programming langauges",
    "typescript",
    "ocaml",
    "compiler",
    "mcp",
    "prediction market",
    "homotopy",
)

HACKERNEWS_TOPICS = (
    "haskell",
    "functional",
    "google",
    "software",
    "korea",
    "japan",
    "singapore",
    "palantir",
    "math",
    "meta",
    "gwern",
    "type",
    "lang",
    "syntax",
    "semantics",
    "github",
)

HACKERNEWS_FILTER = FilterConfig(keywords=HACKERNEWS_KEYWORDS, topics=HACKERNEWS_TOPICS)

USER_AGENT = f"linkstitcher/{__version__}"


# ============================================================================
# Wiring
# ============================================================================

def create_store(settings: Settings) -> PreviewStore:
    """Open the previews database and make sure the table exists."""
    engine = create_db_engine(settings.database_url)
    store = PreviewStore(create_session_factory(engine))
    store.create_schema()
    return store


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Shared HTTP client for every extractor and feed fetch."""
    return httpx.AsyncClient(
        timeout=settings.http_timeout,
        headers={'User-Agent': USER_AGENT},
    )


# ============================================================================
# Helpers
# ============================================================================

def read_url_file(path: str) -> list[str]:
    """Non-empty lines of a URL file, first occurrence of each URL only."""
    urls = []
    for line in Path(path).read_text(encoding='utf-8').split("\n"):
        url = line.strip()
        if url and url not in urls:
            urls.append(url)
    return urls


def clear_url_file(path: str) -> None:
    Path(path).write_text("", encoding='utf-8')


def mark_embellished(previews: list[Preview], results: list[ExtractionResult]) -> int:
    """
    Set embellished on every preview whose extraction finished without error.

    Returns:
        Number of previews marked
    """
    marked = 0
    for preview, result in zip(previews, results):
        if result.ok:
            preview.embellished = True
            marked += 1
    return marked


def publish_feed(store: PreviewStore, feeds_dir: str, filename: str, title: str, description: str,
                 saved: Optional[bool] = None, source: Optional[str] = None) -> int:
    """
    Render the recent previews matching saved/source into feeds_dir/filename.

    Returns:
        Number of items in the feed
    """
    previews = store.recent(RECENCY_CUTOFF_DAYS, saved=saved, source=source)
    write_channel(os.path.join(feeds_dir, filename), render_channel(title, description, previews))
    return len(previews)


def _new_stats(job: str) -> dict:
    start_time = datetime.now(timezone.utc)
    logger.info(json.dumps({
        "event": "job_start",
        "job": job,
        "timestamp": start_time.isoformat(),
    }))
    return {
        'job': job,
        'start_time': start_time.isoformat(),
        'urls_read': 0,
        'new_previews': 0,
        'embellished': 0,
        'extraction_failures': 0,
        'stored': 0,
        'feed_items': 0,
        'errors': [],
    }


def _finish_stats(stats: dict, job_start: float) -> dict:
    stats['end_time'] = datetime.now(timezone.utc).isoformat()
    stats['duration_seconds'] = round(time.time() - job_start, 3)
    logger.info(json.dumps({
        "event": "job_complete",
        **stats
    }))
    return stats


# ============================================================================
# Jobs
# ============================================================================

async def run_saveds_job(
    settings: Settings,
    store: PreviewStore,
    extractors: Mapping[SourceKind, Extractor],
) -> dict:
    """
    Ingest the saved-URLs file and publish the saveds feed.

    Known URLs are skipped. The URL file is cleared once the feed is written.

    Returns:
        Stats dict with job results
    """
    settings.require("saved_urls_path")
    job_start = time.time()
    stats = _new_stats("saveds")

    urls = read_url_file(settings.saved_urls_path)
    stats['urls_read'] = len(urls)

    previews = []
    for url in urls:
        if store.exists(url):
            logger.debug(f"Skipping known URL {url}")
            continue
        preview = Preview.from_url(url)
        preview.saved = True
        previews.append(preview)
    stats['new_previews'] = len(previews)

    results = await embellish_many(previews, extractors, settings.max_summary_chars, settings.max_concurrency)
    stats['embellished'] = mark_embellished(previews, results)
    stats['extraction_failures'] = len(previews) - stats['embellished']

    stats['stored'] = store.insert_many(previews)

    stats['feed_items'] = publish_feed(
        store, settings.feeds_dir, SAVEDS_FEED_FILENAME, SAVEDS_FEED_TITLE, SAVEDS_FEED_DESCRIPTION,
        saved=True,
    )

    clear_url_file(settings.saved_urls_path)
    return _finish_stats(stats, job_start)


async def run_bookmarks_job(
    settings: Settings,
    store: PreviewStore,
    extractors: Mapping[SourceKind, Extractor],
    completion: CompletionWorker,
) -> dict:
    """
    Bookmark every URL in the bookmarked-URLs file.

    Stored previews are reused; ones not yet embellished are embellished
    first. A tag-synthesis failure is logged and the preview is still
    stored as bookmarked; a store failure is logged and the URL skipped.
    The URL file is cleared at the end.

    Returns:
        Stats dict with job results
    """
    settings.require("bookmarked_urls_path")
    job_start = time.time()
    stats = _new_stats("bookmarks")
    stats['bookmarked'] = 0

    urls = read_url_file(settings.bookmarked_urls_path)
    stats['urls_read'] = len(urls)

    for url in urls:
        preview = store.get(url)
        if preview is None:
            preview = Preview.from_url(url)
            stats['new_previews'] += 1

        if not preview.embellished:
            result = await embellish_preview(preview, extractors, settings.max_summary_chars)
            if result.ok:
                preview.embellished = True
                stats['embellished'] += 1
            else:
                stats['extraction_failures'] += 1

        try:
            await bookmark_preview(preview, completion)
        except CompletionError as e:
            logger.error(f"Tag synthesis failed for {url}: {e}")
            stats['errors'].append(f"Tags {url}: {e}")

        try:
            store.upsert(preview)
        except StoreError as e:
            logger.error(f"Failed to store bookmark {url}: {e}")
            stats['errors'].append(f"Store {url}: {e}")
            continue
        stats['bookmarked'] += 1
        stats['stored'] += 1

    clear_url_file(settings.bookmarked_urls_path)
    return _finish_stats(stats, job_start)


async def run_hackernews_job(
    settings: Settings,
    store: PreviewStore,
    client: httpx.AsyncClient,
    extractors: Mapping[SourceKind, Extractor],
    smart_filter: SmartFilter,
    channel_url: str = HACKERNEWS_CHANNEL_URL,
) -> dict:
    """
    Ingest relevant Hacker News stories and publish the hackernews feed.

    Only previews that pass the smart filter are stored; previews whose
    topic check failed are dropped.

    Returns:
        Stats dict with job results
    """
    job_start = time.time()
    stats = _new_stats("hackernews")

    channel = await fetch_channel(client, channel_url)
    seen = set()
    previews = []
    for preview in into_previews(channel, source=HACKERNEWS_SOURCE):
        stats['urls_read'] += 1
        if preview.url in seen or store.exists(preview.url):
            continue
        seen.add(preview.url)
        previews.append(preview)
    stats['new_previews'] = len(previews)

    results = await embellish_many(previews, extractors, settings.max_summary_chars, settings.max_concurrency)
    stats['embellished'] = mark_embellished(previews, results)
    stats['extraction_failures'] = len(previews) - stats['embellished']

    outcome = await smart_filter.filter_previews(previews, on_error=FilterErrorPolicy.EXCLUDE)
    stats['passed_filter'] = len(outcome.passed)
    stats['rejected_by_filter'] = len(outcome.rejected)
    for preview, error in outcome.errored:
        stats['errors'].append(f"Filter {preview.url}: {error}")

    stats['stored'] = store.insert_many(outcome.passed)

    stats['feed_items'] = publish_feed(
        store, settings.feeds_dir, HACKERNEWS_FEED_FILENAME, HACKERNEWS_FEED_TITLE, HACKERNEWS_FEED_DESCRIPTION,
        source=HACKERNEWS_SOURCE,
    )
    return _finish_stats(stats, job_start)
