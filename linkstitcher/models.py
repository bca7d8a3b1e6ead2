"""
Preview data model for linkstitcher

A Preview is the normalized record describing one ingested URL. The
in-memory Preview dataclass is mutated by the embellishment pipeline and
persisted through the PreviewRecord table (one row per URL).
"""
from dataclasses import dataclass, field, fields
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Column, String, Text, Date, Boolean, Index
from sqlalchemy.orm import Mapped

from linkstitcher.database import Base
from linkstitcher.errors import FeedEntryError


def utc_today() -> date:
    """Today's date in UTC, used for added_date."""
    return datetime.now(timezone.utc).date()


def split_tags(tags: Optional[str]) -> Optional[list[str]]:
    """Split a comma-separated tag string into trimmed, non-empty tokens."""
    if tags is None:
        return None
    return [tag.strip() for tag in tags.split(',') if tag.strip()]


def join_tags(tags: list[str]) -> Optional[str]:
    """
    Encode a tag list as a comma-separated string.

    Blank tokens are dropped; an empty list is encoded as None, never "".
    """
    cleaned = [tag.strip() for tag in tags if tag and tag.strip()]
    if not cleaned:
        return None
    return ', '.join(cleaned)


# ============================================================================
# Domain Record
# ============================================================================

@dataclass
class Preview:
    """
    Normalized record describing one ingested URL

    Lifecycle: created from a bare URL or a feed entry, mutated in place by
    extract → normalize → tag synthesis, then persisted keyed by url.
    """
    url: str
    added_date: date = field(default_factory=utc_today)
    saved: bool = False
    embellished: bool = False
    bookmarked: bool = False
    source: Optional[str] = None
    title: Optional[str] = None
    published_date: Optional[str] = None
    tags: Optional[str] = None
    summary: Optional[str] = None

    @classmethod
    def from_url(cls, url: str) -> "Preview":
        """Create an empty preview for a bare URL."""
        return cls(url=url)

    @classmethod
    def from_feed_entry(cls, source: str, entry) -> "Preview":
        """
        Create a preview pre-populated from a syndication feed entry.

        Args:
            source: Provenance label, usually the feed title
            entry: feedparser entry (dict-like)

        Returns:
            Preview with title/summary/tags/published_date from the entry

        Raises:
            FeedEntryError: if the entry has no link
        """
        url = (entry.get('link') or '').strip()
        if not url:
            raise FeedEntryError(
                f"Feed entry has no link: {entry.get('title') or entry.get('id') or '<untitled>'}"
            )

        categories = [tag.get('term') or '' for tag in entry.get('tags') or []]

        return cls(
            url=url,
            source=source,
            title=entry.get('title'),
            published_date=entry.get('published'),
            tags=join_tags(categories),
            summary=entry.get('description') or entry.get('summary'),
        )

    def tag_list(self) -> Optional[list[str]]:
        """Tags as a list of trimmed strings, or None when unset."""
        return split_tags(self.tags)

    def to_row(self) -> dict:
        """Column values for the previews table."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


# ============================================================================
# Table Model
# ============================================================================

class PreviewRecord(Base):
    """
    Persisted preview, one row per URL

    url, added_date and saved are identity fields: they are written on
    insert and never touched by updates.
    """
    __tablename__ = "previews"

    # Primary Key
    url: Mapped[str] = Column(Text, primary_key=True)

    # Identity Fields
    added_date: Mapped[date] = Column(Date, nullable=False, default=utc_today)
    saved: Mapped[bool] = Column(Boolean, nullable=False, default=False)

    # Lifecycle Flags
    embellished: Mapped[bool] = Column(Boolean, nullable=False, default=False)
    bookmarked: Mapped[bool] = Column(Boolean, nullable=False, default=False)

    # Enrichment Fields
    source: Mapped[Optional[str]] = Column(String(200), nullable=True)
    title: Mapped[Optional[str]] = Column(Text, nullable=True)
    published_date: Mapped[Optional[str]] = Column(String(100), nullable=True)
    tags: Mapped[Optional[str]] = Column(Text, nullable=True)
    summary: Mapped[Optional[str]] = Column(Text, nullable=True)

    # Indexes
    __table_args__ = (
        Index("ix_previews_added_date", "added_date"),
        Index("ix_previews_source", "source"),
    )

    # Fields an update is allowed to change
    MUTABLE_FIELDS = (
        "source",
        "title",
        "published_date",
        "tags",
        "summary",
        "embellished",
        "bookmarked",
    )

    def to_preview(self) -> Preview:
        """Convert the row into a detached Preview record."""
        return Preview(
            url=self.url,
            added_date=self.added_date,
            saved=self.saved,
            embellished=self.embellished,
            bookmarked=self.bookmarked,
            source=self.source,
            title=self.title,
            published_date=self.published_date,
            tags=self.tags,
            summary=self.summary,
        )
