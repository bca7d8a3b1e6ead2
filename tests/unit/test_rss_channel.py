"""
Unit tests for feed ingestion and rendering.
"""

import xml.etree.ElementTree as ET
from datetime import date

import feedparser

from linkstitcher.config import REPOSITORY_URL
from linkstitcher.models import Preview
from linkstitcher.services.rss_channel import into_previews, render_channel, write_channel
from tests.fixtures.sample_data import HACKERNEWS_RSS


class TestIntoPreviews:
    """Tests for into_previews function."""

    def test_entries_with_links_converted(self):
        previews = into_previews(feedparser.parse(HACKERNEWS_RSS))
        assert [p.url for p in previews] == [
            "https://example.com/haskell-laziness",
            "https://example.com/gardening",
        ]
        assert all(p.source == "Hacker News: Best" for p in previews)

    def test_explicit_source_label(self):
        previews = into_previews(feedparser.parse(HACKERNEWS_RSS), source="Hackernews: Customized")
        assert [p.source for p in previews] == ["Hackernews: Customized", "Hackernews: Customized"]

    def test_empty_channel(self):
        assert into_previews(feedparser.parse("<rss version='2.0'><channel><title>x</title></channel></rss>")) == []


class TestRenderChannel:
    """Tests for render_channel function."""

    def test_channel_metadata(self):
        root = ET.fromstring(render_channel("linkstitcher/saveds", "Saved things", []))
        channel = root.find("channel")
        assert root.get("version") == "2.0"
        assert channel.findtext("title") == "linkstitcher/saveds"
        assert channel.findtext("link") == REPOSITORY_URL
        assert channel.findtext("description") == "Saved things"
        assert channel.find("image/url").text == "https://www.rybl.net/favicon.ico"
        assert channel.findall("item") == []

    def test_items(self):
        previews = [
            Preview(url="https://example.com/a", added_date=date(2024, 1, 5), title="A", summary="Source: X\n\nAbout A"),
            Preview(url="https://example.com/b", added_date=date(2024, 1, 6)),
        ]
        items = ET.fromstring(render_channel("t", "d", previews)).findall("channel/item")

        assert len(items) == 2
        assert items[0].findtext("link") == "https://example.com/a"
        assert items[0].findtext("title") == "A"
        assert items[0].findtext("description") == "Source: X\n\nAbout A"
        assert items[0].findtext("pubDate") == "2024-01-05"
        assert items[1].find("title") is None
        assert items[1].find("description") is None

    def test_markup_is_escaped(self):
        previews = [Preview(url="https://example.com/?a=1&b=2", title="<b>bold</b> & co")]
        item = ET.fromstring(render_channel("t", "d", previews)).find("channel/item")
        assert item.findtext("link") == "https://example.com/?a=1&b=2"
        assert item.findtext("title") == "<b>bold</b> & co"

    def test_rendered_feed_parses_back(self):
        previews = [Preview(url="https://example.com/a", title="A", summary="About A")]
        parsed = feedparser.parse(render_channel("t", "d", previews))
        assert parsed.entries[0].link == "https://example.com/a"


class TestWriteChannel:
    """Tests for write_channel function."""

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "site" / "nested" / "feed.xml"
        write_channel(str(path), "<rss/>")
        assert path.read_text() == "<rss/>"
