"""
linkstitcher - preview enrichment pipeline

Turns bookmarked, saved and syndicated URLs into enriched previews and
publishes them as RSS feeds.
"""
import logging
import sys

__version__ = "0.1.0"

# Silence verbose SQLAlchemy logging
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)


def configure_logging(level: str = "INFO") -> None:
    """Log to stdout in the format every script shares."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )
