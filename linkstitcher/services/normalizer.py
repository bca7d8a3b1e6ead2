"""
Preview Normalizer

Final pass over an extracted preview: fill the summary from the best
available material and label it with its source.
"""

from typing import Optional

from linkstitcher.models import Preview


def source_header(source: str) -> str:
    return f"Source: {source}\n\n"


def normalize_preview(preview: Preview, content: Optional[str], max_summary_chars: int) -> Preview:
    """
    Apply the summary fallback chain, in order:

    1. no summary but content -> first max_summary_chars characters of content
    2. still no summary but a title -> "Title: <title>"
    3. summary and source -> prefix "Source: <source>" once

    Running it twice leaves the preview unchanged.

    Args:
        preview: Preview to normalize (mutated in place)
        content: Full text recovered by extraction, if any
        max_summary_chars: Summary budget, in characters

    Returns:
        The same preview
    """
    if preview.summary is None and content is not None:
        preview.summary = content[:max_summary_chars]

    if preview.summary is None and preview.title is not None:
        preview.summary = f"Title: {preview.title}"

    if preview.summary is not None and preview.source is not None:
        header = source_header(preview.source)
        if not preview.summary.startswith(header):
            preview.summary = header + preview.summary

    return preview
