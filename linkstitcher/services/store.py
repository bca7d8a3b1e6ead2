"""
Preview Store

Dedup-aware persistence of previews keyed by URL. Every operation opens
its own session and transaction; a store-wide lock serializes access so
concurrent jobs never interleave writes on a SQLite file.
"""

import logging
import threading
from datetime import timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from linkstitcher.database import Base
from linkstitcher.errors import StoreError
from linkstitcher.models import Preview, PreviewRecord, utc_today

logger = logging.getLogger(__name__)


class PreviewStore:
    """
    Previews persisted in the `previews` table

    Args:
        session_factory: sessionmaker bound to the previews database
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self._lock = threading.Lock()

    def create_schema(self) -> None:
        """Create the previews table if it does not exist."""
        session = self.session_factory()
        try:
            Base.metadata.create_all(bind=session.get_bind())
        finally:
            session.close()

    def upsert(self, preview: Preview) -> None:
        """
        Insert a preview, or update an existing row with the same URL.

        Updates touch only source, title, published_date, tags, summary,
        embellished and bookmarked; url, added_date and saved keep their
        stored values.

        Raises:
            StoreError: on any database failure
        """
        with self._lock:
            session = self.session_factory()
            try:
                record = session.get(PreviewRecord, preview.url)
                if record is None:
                    session.add(PreviewRecord(**preview.to_row()))
                    logger.debug(f"Inserted {preview.url}")
                else:
                    for name in PreviewRecord.MUTABLE_FIELDS:
                        setattr(record, name, getattr(preview, name))
                    logger.debug(f"Updated {preview.url}")
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise StoreError(f"Failed to upsert {preview.url}: {e}") from e
            finally:
                session.close()

    def insert(self, preview: Preview) -> None:
        """
        Insert a new preview.

        Raises:
            StoreError: if the URL is already stored, or on any database failure
        """
        with self._lock:
            session = self.session_factory()
            try:
                session.add(PreviewRecord(**preview.to_row()))
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise StoreError(f"Preview already stored: {preview.url}") from e
            except SQLAlchemyError as e:
                session.rollback()
                raise StoreError(f"Failed to insert {preview.url}: {e}") from e
            finally:
                session.close()

    def insert_many(self, previews: list[Preview]) -> int:
        """
        Insert previews one by one, logging and skipping failures.

        Returns:
            Number of previews inserted
        """
        inserted = 0
        for preview in previews:
            try:
                self.insert(preview)
                inserted += 1
            except StoreError as e:
                logger.warning(str(e))
        logger.info(f"Inserted {inserted}/{len(previews)} previews")
        return inserted

    def _query(self, statement) -> list[Preview]:
        with self._lock:
            session = self.session_factory()
            try:
                return [record.to_preview() for record in session.scalars(statement)]
            except SQLAlchemyError as e:
                raise StoreError(f"Query failed: {e}") from e
            finally:
                session.close()

    def get(self, url: str) -> Optional[Preview]:
        """The stored preview for url, or None."""
        previews = self._query(select(PreviewRecord).where(PreviewRecord.url == url))
        return previews[0] if previews else None

    def exists(self, url: str) -> bool:
        return self.get(url) is not None

    def all(self) -> list[Preview]:
        """Every stored preview, ordered by URL."""
        return self._query(select(PreviewRecord).order_by(PreviewRecord.url))

    def recent(self, days: int, saved: Optional[bool] = None, source: Optional[str] = None) -> list[Preview]:
        """
        Previews added strictly after (today - days), newest first.

        Args:
            days: Recency window
            saved: Only previews with this saved flag, when given
            source: Only previews from this source, when given
        """
        cutoff = utc_today() - timedelta(days=days)
        statement = select(PreviewRecord).where(PreviewRecord.added_date > cutoff)
        if saved is not None:
            statement = statement.where(PreviewRecord.saved == saved)
        if source is not None:
            statement = statement.where(PreviewRecord.source == source)
        statement = statement.order_by(PreviewRecord.added_date.desc(), PreviewRecord.url)
        return self._query(statement)
