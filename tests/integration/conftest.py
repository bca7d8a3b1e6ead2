"""
Pytest configuration for integration tests

Provides settings pointing at per-test files and an HTTP client factory
"""
import httpx
import pytest

from linkstitcher.config import Settings


@pytest.fixture
def settings(tmp_path):
    """Settings whose URL files and feeds directory live under tmp_path."""
    saved = tmp_path / "saved_urls.txt"
    bookmarked = tmp_path / "bookmarked_urls.txt"
    saved.write_text("")
    bookmarked.write_text("")
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'previews.db'}",
        saved_urls_path=str(saved),
        bookmarked_urls_path=str(bookmarked),
        feeds_dir=str(tmp_path / "site"),
        max_concurrency=2,
        max_summary_chars=80,
    )


@pytest.fixture
def mock_client():
    """Build an AsyncClient whose requests are answered by handler."""
    def factory(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return factory
