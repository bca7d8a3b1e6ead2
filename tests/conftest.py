"""
Root pytest configuration for linkstitcher tests

Adds project root to Python path and provides common fixtures
"""
import sys
import os

import pytest
from dotenv import load_dotenv

# Add project root to Python path so tests can import linkstitcher
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

# Load environment variables
load_dotenv()


@pytest.fixture(scope="function")
def store(tmp_path):
    """
    Provides a PreviewStore backed by a fresh SQLite file.

    Each test gets its own database, so no cleanup is needed.
    """
    from linkstitcher.database import create_db_engine, create_session_factory
    from linkstitcher.services.store import PreviewStore

    engine = create_db_engine(f"sqlite:///{tmp_path / 'previews.db'}")
    preview_store = PreviewStore(create_session_factory(engine))
    preview_store.create_schema()
    try:
        yield preview_store
    finally:
        engine.dispose()
