"""
Database configuration and session management for linkstitcher
"""
import logging
import os
import time

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from linkstitcher.errors import ConfigError

logger = logging.getLogger(__name__)

# Create declarative base for all models
Base = declarative_base()

DEFAULT_DATABASE_URL = "sqlite:///linkstitcher.db"


def _sanitize(database_url: str) -> str:
    """Hide the password portion of a database URL for logging."""
    if '@' in database_url:
        parts = database_url.split('@')
        return parts[0].split(':')[0] + ':***@' + parts[1]
    return database_url[:30] + ("..." if len(database_url) > 30 else "")


def create_db_engine(database_url=None):
    """
    Create SQLAlchemy engine for the previews database

    SQLite (the default) is shared across threads by the store lock;
    server databases get connection pooling.

    Args:
        database_url: Optional database URL override (falls back to DATABASE_URL)

    Returns:
        SQLAlchemy engine instance
    """
    if database_url is None:
        database_url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

    if not database_url:
        raise ConfigError("DATABASE_URL environment variable not set")

    logger.info(f"Connecting to: {_sanitize(database_url)}")
    engine_start = time.time()

    echo = os.getenv("LINKSTITCHER_SQL_ECHO", "False") == "True"
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=echo,
        )
    else:
        engine = create_engine(
            database_url,
            pool_size=5,               # Base connection pool size
            max_overflow=10,           # Max additional connections
            pool_pre_ping=True,        # Verify connections before use
            pool_recycle=3600,         # Recycle connections after 1 hour
            echo=echo,
        )

    logger.debug(f"Engine created in {time.time() - engine_start:.1f}s")
    return engine


def create_session_factory(engine):
    """
    Build the session factory used by the preview store.

    expire_on_commit is off so rows can be converted to Preview records
    after the transaction has been committed.
    """
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
