"""
Source Classifier

Decides which extraction strategy applies to a URL. Pure string matching,
no I/O. Rules are evaluated in order and the first match wins:

1. arXiv PDF / abstract / HTML paths   -> PAPER (with the paper id)
2. x.com posts                         -> SOCIAL_POST
3. github.com repositories             -> REPOSITORY
4. anything else                       -> GENERIC_DOCUMENT
"""

import enum
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from linkstitcher.errors import ExtractionError


class SourceKind(enum.Enum):
    """Classification bucket driving the extraction strategy"""
    PAPER = "paper"
    SOCIAL_POST = "social_post"
    REPOSITORY = "repository"
    GENERIC_DOCUMENT = "generic_document"


@dataclass(frozen=True)
class Classification:
    """Result of classifying a URL; paper_id is set only for PAPER."""
    kind: SourceKind
    paper_id: Optional[str] = None


# (prefix, strip .pdf suffix)
ARXIV_PREFIXES = (
    ("https://arxiv.org/pdf/", True),
    ("https://arxiv.org/abs/", False),
    ("https://arxiv.org/html/", False),
)
SOCIAL_PREFIXES = ("https://x.com/",)
REPOSITORY_PREFIXES = ("https://github.com",)


def paper_id_from_url(url: str) -> Optional[str]:
    """
    Extract an arXiv id from a paper URL.

    Examples:
        https://arxiv.org/pdf/2401.00001.pdf -> 2401.00001
        https://arxiv.org/abs/2401.00001v2   -> 2401.00001v2

    Returns:
        The id, or None when the URL is not an arXiv paper URL
    """
    for prefix, strip_pdf in ARXIV_PREFIXES:
        if url.startswith(prefix):
            paper_id = url[len(prefix):]
            if strip_pdf and paper_id.endswith(".pdf"):
                paper_id = paper_id[:-len(".pdf")]
            return paper_id
    return None


def classify(url: str) -> Classification:
    """
    Classify a URL into a SourceKind.

    Total: every URL gets a kind, GENERIC_DOCUMENT being the fallback.
    """
    paper_id = paper_id_from_url(url)
    if paper_id is not None:
        return Classification(SourceKind.PAPER, paper_id=paper_id)

    if url.startswith(SOCIAL_PREFIXES):
        return Classification(SourceKind.SOCIAL_POST)

    if url.startswith(REPOSITORY_PREFIXES):
        return Classification(SourceKind.REPOSITORY)

    return Classification(SourceKind.GENERIC_DOCUMENT)


def repository_coordinates(url: str) -> tuple[str, str]:
    """
    Extract (owner, name) from the first two path segments of a repository URL.

    Raises:
        ExtractionError: if the URL has no owner or no repository segment
    """
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise ExtractionError(f"Invalid URL: {e}", url=url) from e

    segments = parsed.path.split('/')[1:]
    owner = segments[0] if len(segments) > 0 else ''
    name = segments[1] if len(segments) > 1 else ''
    if not owner:
        raise ExtractionError("Invalid URL: missing owner", url=url)
    if not name:
        raise ExtractionError("Invalid URL: missing repo name", url=url)
    return owner, name
