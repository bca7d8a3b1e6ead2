"""
Content Fetcher Service

Fetches a generic web document and extracts its readable text.

Dispatch is on the response content-type:
- text/pdf: text extracted with PyMuPDF
- text/html: main body extracted with readability-lxml
- anything else: logged and left without content
"""

import asyncio
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from typing import Optional

import httpx
import pymupdf
from bs4 import BeautifulSoup
from readability import Document

from linkstitcher.errors import ExtractionError

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "text/pdf"
HTML_CONTENT_TYPE = "text/html"

# Meta tags carrying a publication time (checked in order)
PUBLISHED_TIME_META = [
    ('property', 'article:published_time'),
    ('name', 'article:published_time'),
    ('property', 'og:published_time'),
    ('name', 'pubdate'),
    ('name', 'publishdate'),
    ('name', 'date'),
    ('itemprop', 'datePublished'),
]


@dataclass
class FetchedDocument:
    """What could be recovered from one document fetch."""
    url: str
    content_type: str
    title: Optional[str] = None
    published_time: Optional[str] = None
    content: Optional[str] = None


def _clean_text(text: str) -> str:
    """Collapse runs of blank lines and trailing whitespace."""
    text = re.sub(r'[ \t]+\n', '\n', text)
    text = re.sub(r'\n\s*\n+', '\n\n', text)
    return text.strip()


def pdf_text(path: str) -> str:
    """Text of every page of the PDF at path, in page order."""
    with pymupdf.open(path) as doc:
        return _clean_text("\n".join(page.get_text() for page in doc))


def published_time_from_html(html: str) -> Optional[str]:
    """Publication time advertised by the page's meta tags or <time> element."""
    soup = BeautifulSoup(html, 'html.parser')
    for attr, value in PUBLISHED_TIME_META:
        tag = soup.find('meta', attrs={attr: value})
        if tag and tag.get('content'):
            return tag['content'].strip()

    time_tag = soup.find('time', attrs={'datetime': True})
    if time_tag:
        return time_tag['datetime'].strip()
    return None


def readable_document(html: str, url: str) -> tuple[str, str]:
    """
    Run readability over a page.

    Returns:
        (title, main-body text)
    """
    doc = Document(html, url=url)
    title = doc.title()
    soup = BeautifulSoup(doc.summary(), 'html.parser')
    for tag in soup(['script', 'style']):
        tag.decompose()
    return title, _clean_text(soup.get_text(separator='\n', strip=True))


class ContentFetcher:
    """Fetch-and-extract for documents that no specialised client handles."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def fetch(self, url: str) -> FetchedDocument:
        """
        Fetch a document and extract whatever the content-type allows.

        Args:
            url: Document URL

        Returns:
            FetchedDocument; content is None for unparseable HTML and
            unrecognized content types

        Raises:
            ExtractionError: if the response has no content-type header
            httpx.HTTPError: on network failure or non-2xx status
        """
        response = await self.client.get(url, follow_redirects=True)
        response.raise_for_status()

        content_type = response.headers.get('content-type')
        if not content_type:
            raise ExtractionError("Response has no content-type", url=url)

        document = FetchedDocument(url=url, content_type=content_type)

        if content_type == PDF_CONTENT_TYPE:
            document.content = await asyncio.to_thread(self._pdf_content, response.content)
            logger.info(f"Extracted {len(document.content)} chars of PDF text from {url}")

        elif content_type.startswith(HTML_CONTENT_TYPE):
            html = response.text
            try:
                title, content = await asyncio.to_thread(readable_document, html, url)
            except Exception as e:
                logger.warning(f"Readability could not parse {url}: {e}")
                document.title = url
                return document

            document.title = title or url
            document.content = content or None
            document.published_time = published_time_from_html(html)

        else:
            logger.info(f"Unrecognized content-type {content_type!r} for {url}")

        return document

    @staticmethod
    def _pdf_content(body: bytes) -> str:
        fd, path = tempfile.mkstemp(suffix=".pdf")
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(body)
            return pdf_text(path)
        finally:
            os.unlink(path)
