"""
Content Extractors

One extractor per SourceKind. Each extractor fills whatever Preview fields
its source provides and returns the full text it recovered (or None).
Failures are raised to the caller; embellish_preview catches them.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

from linkstitcher.errors import ExtractionError
from linkstitcher.models import Preview, join_tags
from linkstitcher.services.arxiv_client import ArxivClient
from linkstitcher.services.content_fetcher import ContentFetcher
from linkstitcher.services.github_client import GithubClient
from linkstitcher.services.social_client import SocialClient
from linkstitcher.services.source_classifier import SourceKind, paper_id_from_url

logger = logging.getLogger(__name__)

ARXIV_SOURCE = "ArXiv"


@dataclass
class ExtractionResult:
    """Outcome of one extraction: recovered text, or the error that stopped it."""
    content: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Extractor(Protocol):
    async def extract(self, preview: Preview) -> ExtractionResult:
        ...


def truncate(text: str, max_chars: int) -> str:
    """First max_chars code points of text, no ellipsis."""
    return text[:max_chars]


class PaperExtractor:
    """arXiv papers: metadata and abstract from the arXiv API."""

    def __init__(self, arxiv: ArxivClient):
        self.arxiv = arxiv

    async def extract(self, preview: Preview) -> ExtractionResult:
        paper_id = paper_id_from_url(preview.url)
        if paper_id is None:
            raise ExtractionError("Not an arXiv paper URL", url=preview.url)

        try:
            paper = await self.arxiv.fetch_by_id(paper_id)
        except ExtractionError as e:
            e.url = e.url or preview.url
            raise

        preview.title = paper.title
        preview.published_date = paper.published
        if preview.source is None:
            preview.source = ARXIV_SOURCE
        preview.tags = join_tags(paper.category_names)
        preview.summary = paper.summary
        return ExtractionResult(content=paper.summary)


class SocialPostExtractor:
    """x.com posts: text of the oEmbed markup."""

    def __init__(self, social: SocialClient, max_summary_chars: int):
        self.social = social
        self.max_summary_chars = max_summary_chars

    async def extract(self, preview: Preview) -> ExtractionResult:
        post = await self.social.fetch_post(preview.url)
        preview.summary = truncate(post.text, self.max_summary_chars)
        return ExtractionResult(content=post.text)


class RepositoryExtractor:
    """GitHub repositories: README text."""

    def __init__(self, github: GithubClient, max_summary_chars: int):
        self.github = github
        self.max_summary_chars = max_summary_chars

    async def extract(self, preview: Preview) -> ExtractionResult:
        info = await self.github.fetch_repo_info(preview.url)
        if info.readme is not None:
            preview.summary = truncate(info.readme, self.max_summary_chars)
        return ExtractionResult(content=info.readme)


class DocumentExtractor:
    """Everything else: fetch the URL and extract by content-type."""

    def __init__(self, fetcher: ContentFetcher):
        self.fetcher = fetcher

    async def extract(self, preview: Preview) -> ExtractionResult:
        document = await self.fetcher.fetch(preview.url)
        if document.title is not None:
            preview.title = document.title
        if document.published_time:
            preview.published_date = document.published_time
        return ExtractionResult(content=document.content)


def build_extractors(
    client: httpx.AsyncClient,
    github_token: Optional[str] = None,
    max_summary_chars: int = 600,
) -> dict[SourceKind, Extractor]:
    """
    Wire one extractor per SourceKind around a shared HTTP client.

    Args:
        client: Shared async HTTP client
        github_token: Optional GitHub personal access token
        max_summary_chars: Summary budget for truncated summaries

    Returns:
        Mapping from SourceKind to its extractor
    """
    return {
        SourceKind.PAPER: PaperExtractor(ArxivClient(client)),
        SourceKind.SOCIAL_POST: SocialPostExtractor(SocialClient(client), max_summary_chars),
        SourceKind.REPOSITORY: RepositoryExtractor(GithubClient(client, token=github_token), max_summary_chars),
        SourceKind.GENERIC_DOCUMENT: DocumentExtractor(ContentFetcher(client)),
    }
