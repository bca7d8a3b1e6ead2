"""
RSS Channel Service

Reads remote RSS channels into previews (feedparser) and renders stored
previews back out as RSS 2.0 feeds (Jinja2).
"""

import logging
import os
from pathlib import Path
from typing import Optional

import feedparser
import httpx
from jinja2 import Environment, FileSystemLoader, select_autoescape

from linkstitcher.config import FEED_IMAGE_URL, REPOSITORY_URL
from linkstitcher.errors import FeedEntryError
from linkstitcher.models import Preview

logger = logging.getLogger(__name__)

FEED_IMAGE_TITLE = "rybla/linkstitcher"


async def fetch_channel(client: httpx.AsyncClient, url: str) -> feedparser.FeedParserDict:
    """
    Fetch and parse a remote RSS channel.

    Raises:
        httpx.HTTPError: on network failure or non-2xx status
    """
    response = await client.get(url, follow_redirects=True)
    response.raise_for_status()

    channel = feedparser.parse(response.content)
    if channel.get('bozo'):
        # feedparser usually recovers partial data
        logger.warning(f"RSS parsing issue for {url}: {channel.get('bozo_exception')}")

    logger.info(f"Fetched {len(channel.get('entries', []))} entries from {url}")
    return channel


def into_previews(channel, source: Optional[str] = None) -> list[Preview]:
    """
    Convert channel entries into previews.

    Entries without a link are logged and skipped.

    Args:
        channel: Parsed feed from fetch_channel
        source: Source label for every preview (defaults to the channel title)
    """
    if source is None:
        source = channel.get('feed', {}).get('title', '')
    previews = []
    for entry in channel.get('entries', []):
        try:
            previews.append(Preview.from_feed_entry(source, entry))
        except FeedEntryError as e:
            logger.warning(str(e))
    return previews


def get_template_env() -> Environment:
    """Get Jinja2 environment for feed templates."""
    template_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'templates')
    return Environment(
        loader=FileSystemLoader(template_dir),
        autoescape=select_autoescape(['html', 'xml'])
    )


def render_channel(title: str, description: str, previews: list[Preview]) -> str:
    """
    Render previews as an RSS 2.0 channel.

    Args:
        title: Channel title
        description: Channel description
        previews: Items, in feed order

    Returns:
        RSS XML document
    """
    env = get_template_env()
    template = env.get_template('feed/channel.xml')
    return template.render(
        title=title,
        description=description,
        link=REPOSITORY_URL,
        image_url=FEED_IMAGE_URL,
        image_title=FEED_IMAGE_TITLE,
        previews=previews,
    )


def write_channel(path: str, xml: str) -> None:
    """Write a rendered channel to path, creating parent directories."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(xml, encoding='utf-8')
    logger.info(f"Wrote feed {target}")
