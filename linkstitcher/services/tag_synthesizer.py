"""
Tag Synthesizer

Bookmarking step: asks the completion service for categorization tags
when a preview has none, then marks the preview bookmarked.
"""

import logging

from linkstitcher.models import Preview
from linkstitcher.services.completion import CompletionWorker

logger = logging.getLogger(__name__)

TAGS_PROMPT = (
    "Consider the following content:\n\n"
    "Title: {title}\n\n"
    "Text:\n\n"
    "{summary}...\n\n"
    "Write a comma-separated list of categorizational tags for the above content. "
    "Respond ONLY with the comma-separated list"
)


def build_tags_prompt(title: str, summary: str) -> str:
    return TAGS_PROMPT.format(title=title, summary=summary)


async def bookmark_preview(preview: Preview, completion: CompletionWorker) -> Preview:
    """
    Bookmark a preview, synthesizing tags first when it has none.

    Tags are requested only when tags are unset and both title and summary
    are known. The raw response is stored as-is. The preview is marked
    bookmarked even when the completion call fails.

    Args:
        preview: An already embellished preview (mutated in place)
        completion: Worker running the completion service

    Returns:
        The same preview

    Raises:
        CompletionError: if tag synthesis failed (after bookmarking)
    """
    logger.info(f"bookmark_preview({preview.url})")

    try:
        if preview.tags is None and preview.title is not None and preview.summary is not None:
            response = await completion.complete(build_tags_prompt(preview.title, preview.summary))
            preview.tags = response
            logger.debug(f"Synthesized tags for {preview.url}: {response.strip()[:80]}")
    finally:
        preview.bookmarked = True

    return preview
