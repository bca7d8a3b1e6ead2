"""
Integration tests for the ingestion jobs.

Jobs run against a real SQLite store and real feed files; extraction and
completion are stubbed, the Hacker News channel is served by
httpx.MockTransport.
"""

import asyncio
import os
import xml.etree.ElementTree as ET
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from linkstitcher.errors import CompletionError, StoreError
from linkstitcher.services.pipeline import (
    HACKERNEWS_CHANNEL_URL,
    HACKERNEWS_SOURCE,
    create_store,
    read_url_file,
    run_bookmarks_job,
    run_hackernews_job,
    run_saveds_job,
)
from linkstitcher.services.smart_filter import FilterConfig, SmartFilter
from tests.fixtures.sample_data import HACKERNEWS_RSS, StubExtractor, create_preview, stub_extractors


def feed_links(path):
    root = ET.parse(path).getroot()
    return [item.findtext("link") for item in root.findall("channel/item")]


@pytest.fixture
def job_store(settings):
    return create_store(settings)


class TestReadUrlFile:
    """Tests for read_url_file."""

    def test_skips_blank_lines_and_duplicates(self, tmp_path):
        path = tmp_path / "urls.txt"
        path.write_text("https://a.example\n\n  https://b.example  \nhttps://a.example\n")
        assert read_url_file(str(path)) == ["https://a.example", "https://b.example"]


class TestSavedsJob:
    """Saved URLs are embellished, stored and published."""

    def test_new_urls_stored_and_published(self, settings, job_store):
        with open(settings.saved_urls_path, "w") as f:
            f.write("https://example.com/one\nhttps://example.com/two\n")
        extractor = StubExtractor(fail_urls={"https://example.com/two"})

        stats = asyncio.run(run_saveds_job(settings, job_store, stub_extractors(extractor)))

        assert stats['urls_read'] == 2
        assert stats['stored'] == 2
        assert stats['extraction_failures'] == 1

        one = job_store.get("https://example.com/one")
        two = job_store.get("https://example.com/two")
        assert one.saved and two.saved
        assert one.embellished
        assert not two.embellished
        assert one.title == "Extracted Title"

        feed_path = os.path.join(settings.feeds_dir, "saveds.feed.xml")
        assert set(feed_links(feed_path)) == {"https://example.com/one", "https://example.com/two"}
        assert open(settings.saved_urls_path).read() == ""

    def test_known_urls_skipped(self, settings, job_store):
        job_store.insert(create_preview(url="https://example.com/known", title="Original"))
        with open(settings.saved_urls_path, "w") as f:
            f.write("https://example.com/known\n")
        extractor = StubExtractor()

        stats = asyncio.run(run_saveds_job(settings, job_store, stub_extractors(extractor)))

        assert stats['new_previews'] == 0
        assert extractor.calls == []
        assert job_store.get("https://example.com/known").title == "Original"


class TestBookmarksJob:
    """Bookmarked URLs are tagged and upserted."""

    def make_completion(self, response="haskell, laziness", side_effect=None):
        completion = MagicMock()
        completion.complete = AsyncMock(return_value=response, side_effect=side_effect)
        return completion

    def test_new_url_bookmarked_with_tags(self, settings, job_store):
        with open(settings.bookmarked_urls_path, "w") as f:
            f.write("https://example.com/bookmark\n")

        stats = asyncio.run(run_bookmarks_job(
            settings, job_store, stub_extractors(), self.make_completion(),
        ))

        stored = job_store.get("https://example.com/bookmark")
        assert stored.bookmarked
        assert stored.embellished
        assert stored.tags == "haskell, laziness"
        assert stats['bookmarked'] == 1
        assert open(settings.bookmarked_urls_path).read() == ""

    def test_embellished_preview_not_refetched(self, settings, job_store):
        job_store.insert(create_preview(url="https://example.com/done", embellished=True, saved=True))
        with open(settings.bookmarked_urls_path, "w") as f:
            f.write("https://example.com/done\n")
        extractor = StubExtractor()

        asyncio.run(run_bookmarks_job(settings, job_store, stub_extractors(extractor), self.make_completion()))

        assert extractor.calls == []
        stored = job_store.get("https://example.com/done")
        assert stored.bookmarked
        assert stored.saved

    def test_tag_failure_still_bookmarks(self, settings, job_store):
        with open(settings.bookmarked_urls_path, "w") as f:
            f.write("https://example.com/flaky\n")
        completion = self.make_completion(side_effect=CompletionError("gemini down"))

        stats = asyncio.run(run_bookmarks_job(settings, job_store, stub_extractors(), completion))

        stored = job_store.get("https://example.com/flaky")
        assert stored.bookmarked
        assert stored.tags is None
        assert len(stats['errors']) == 1

    def test_store_failure_skips_url(self, settings, job_store):
        with open(settings.bookmarked_urls_path, "w") as f:
            f.write("https://example.com/bad\nhttps://example.com/good\n")
        real_upsert = job_store.upsert

        def upsert(preview):
            if preview.url == "https://example.com/bad":
                raise StoreError("constraint violation")
            real_upsert(preview)

        with patch.object(job_store, 'upsert', side_effect=upsert):
            stats = asyncio.run(run_bookmarks_job(
                settings, job_store, stub_extractors(), self.make_completion(),
            ))

        assert job_store.get("https://example.com/bad") is None
        assert job_store.get("https://example.com/good").bookmarked
        assert stats['bookmarked'] == 1
        assert stats['stored'] == 1
        assert stats['errors'] == ["Store https://example.com/bad: constraint violation"]
        assert open(settings.bookmarked_urls_path).read() == ""


class TestHackernewsJob:
    """Hacker News stories are filtered before being stored."""

    def run_job(self, settings, store, mock_client, smart_filter, extractor=None):
        def handler(request):
            assert str(request.url) == HACKERNEWS_CHANNEL_URL
            return httpx.Response(200, text=HACKERNEWS_RSS, headers={'content-type': 'application/rss+xml'})

        async def go():
            async with mock_client(handler) as client:
                return await run_hackernews_job(
                    settings, store, client, stub_extractors(extractor or StubExtractor()), smart_filter,
                )
        return asyncio.run(go())

    def test_only_relevant_stories_stored(self, settings, job_store, mock_client):
        smart_filter = SmartFilter(FilterConfig(keywords=["haskell"]), completion=MagicMock())

        stats = self.run_job(settings, job_store, mock_client, smart_filter)

        assert stats['urls_read'] == 2
        assert stats['passed_filter'] == 1
        assert stats['stored'] == 1

        stored = job_store.get("https://example.com/haskell-laziness")
        assert stored.source == HACKERNEWS_SOURCE
        assert stored.summary.startswith(f"Source: {HACKERNEWS_SOURCE}\n\n")
        assert stored.embellished
        assert job_store.get("https://example.com/gardening") is None

        feed_path = os.path.join(settings.feeds_dir, "hackernews.feed.xml")
        assert feed_links(feed_path) == ["https://example.com/haskell-laziness"]

    def test_known_stories_skipped(self, settings, job_store, mock_client):
        job_store.insert(create_preview(url="https://example.com/haskell-laziness", source=HACKERNEWS_SOURCE))
        extractor = StubExtractor()
        smart_filter = SmartFilter(FilterConfig(), completion=MagicMock())

        stats = self.run_job(settings, job_store, mock_client, smart_filter, extractor)

        assert extractor.calls == ["https://example.com/gardening"]
        assert stats['stored'] == 1

    def test_topic_errors_excluded(self, settings, job_store, mock_client):
        completion = MagicMock()
        completion.complete = AsyncMock(side_effect=CompletionError("quota"))
        smart_filter = SmartFilter(FilterConfig(topics=["software"]), completion)

        stats = self.run_job(settings, job_store, mock_client, smart_filter)

        assert stats['stored'] == 0
        assert len(stats['errors']) == 2
        assert job_store.all() == []
