"""
Contract tests for the preview store

Verify dedup, identity-field preservation and recency queries against a
real SQLite database.
"""
import pytest

from linkstitcher.errors import StoreError
from tests.fixtures.sample_data import create_preview


class TestUpsert:
    """Insert-or-update keyed by URL"""

    def test_inserts_when_absent(self, store):
        preview = create_preview(url="https://example.com/a")
        store.upsert(preview)
        assert store.get("https://example.com/a") == preview

    def test_upsert_twice_is_idempotent(self, store):
        preview = create_preview(url="https://example.com/a", tags="x, y")
        store.upsert(preview)
        store.upsert(preview)
        assert len(store.all()) == 1
        assert store.get(preview.url) == preview

    def test_updates_mutable_fields(self, store):
        store.upsert(create_preview(url="https://example.com/a"))

        changed = create_preview(
            url="https://example.com/a",
            source="ArXiv",
            title="New title",
            published_date="2024-01-01",
            tags="t1, t2",
            summary="New summary",
            embellished=True,
            bookmarked=True,
        )
        store.upsert(changed)

        stored = store.get("https://example.com/a")
        assert stored.source == "ArXiv"
        assert stored.title == "New title"
        assert stored.published_date == "2024-01-01"
        assert stored.tags == "t1, t2"
        assert stored.summary == "New summary"
        assert stored.embellished
        assert stored.bookmarked

    def test_identity_fields_preserved(self, store):
        original = create_preview(url="https://example.com/a", days_old=3, saved=True)
        store.upsert(original)

        store.upsert(create_preview(url="https://example.com/a", days_old=0, saved=False, title="Other"))

        stored = store.get("https://example.com/a")
        assert stored.added_date == original.added_date
        assert stored.saved is True
        assert stored.title == "Other"


class TestInsert:
    """Plain inserts"""

    def test_duplicate_url_rejected(self, store):
        store.insert(create_preview(url="https://example.com/a"))
        with pytest.raises(StoreError, match="already stored"):
            store.insert(create_preview(url="https://example.com/a", title="Again"))
        assert store.get("https://example.com/a").title == "Test Article Title"

    def test_insert_many_skips_failures(self, store):
        store.insert(create_preview(url="https://example.com/known"))
        previews = [
            create_preview(url="https://example.com/new-1"),
            create_preview(url="https://example.com/known"),
            create_preview(url="https://example.com/new-2"),
        ]
        assert store.insert_many(previews) == 2
        assert len(store.all()) == 3


class TestQueries:
    """Lookups and recency queries"""

    def test_exists(self, store):
        store.insert(create_preview(url="https://example.com/a"))
        assert store.exists("https://example.com/a")
        assert not store.exists("https://example.com/b")

    def test_get_missing(self, store):
        assert store.get("https://example.com/missing") is None

    def test_all_ordered_by_url(self, store):
        for url in ["https://example.com/c", "https://example.com/a", "https://example.com/b"]:
            store.insert(create_preview(url=url))
        assert [p.url for p in store.all()] == [
            "https://example.com/a",
            "https://example.com/b",
            "https://example.com/c",
        ]

    def test_recent_cutoff_is_exclusive(self, store):
        store.insert(create_preview(url="https://example.com/today", days_old=0))
        store.insert(create_preview(url="https://example.com/six", days_old=6))
        store.insert(create_preview(url="https://example.com/seven", days_old=7))
        store.insert(create_preview(url="https://example.com/old", days_old=30))

        urls = {p.url for p in store.recent(7)}
        assert urls == {"https://example.com/today", "https://example.com/six"}

    def test_recent_newest_first(self, store):
        store.insert(create_preview(url="https://example.com/older", days_old=2))
        store.insert(create_preview(url="https://example.com/newer", days_old=1))
        assert [p.url for p in store.recent(7)] == ["https://example.com/newer", "https://example.com/older"]

    def test_recent_filters(self, store):
        store.insert(create_preview(url="https://example.com/saved", saved=True))
        store.insert(create_preview(url="https://example.com/hn", source="Hackernews: Customized"))
        store.insert(create_preview(url="https://example.com/other", source="Elsewhere"))

        assert [p.url for p in store.recent(7, saved=True)] == ["https://example.com/saved"]
        assert [p.url for p in store.recent(7, source="Hackernews: Customized")] == ["https://example.com/hn"]
        assert len(store.recent(7, saved=False)) == 2
