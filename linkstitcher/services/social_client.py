"""
Social Post Client

Resolves x.com post URLs through the public oEmbed endpoint and strips
the embed markup down to the post text.
"""

import logging
from dataclasses import dataclass

import httpx
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

OEMBED_URL = "https://publish.twitter.com/oembed"


@dataclass
class SocialPost:
    """oEmbed response for one post, with the embed markup converted to text."""
    url: str
    author_name: str
    author_url: str
    html: str
    text: str


def html_to_text(html: str) -> str:
    """Plain text of an HTML fragment, text nodes joined by spaces."""
    soup = BeautifulSoup(html, 'html.parser')
    for tag in soup(['script', 'style']):
        tag.decompose()
    return soup.get_text(separator=' ', strip=True)


class SocialClient:
    """oEmbed lookups for social posts."""

    def __init__(self, client: httpx.AsyncClient, oembed_url: str = OEMBED_URL):
        self.client = client
        self.oembed_url = oembed_url

    async def fetch_post(self, url: str) -> SocialPost:
        """
        Fetch the oEmbed record for a post URL.

        Raises:
            httpx.HTTPError: on network failure or non-2xx status
        """
        response = await self.client.get(self.oembed_url, params={'url': url})
        response.raise_for_status()
        data = response.json()

        html = data.get('html') or ''
        post = SocialPost(
            url=data.get('url') or url,
            author_name=data.get('author_name') or '',
            author_url=data.get('author_url') or '',
            html=html,
            text=html_to_text(html),
        )
        logger.debug(f"Fetched post by {post.author_name or 'unknown'}: {len(post.text)} chars")
        return post
