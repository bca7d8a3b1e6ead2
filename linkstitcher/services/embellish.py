"""
Preview Embellishment

classify -> extract -> normalize for one URL, and a bounded-concurrency
driver for many. Extraction failures are logged and never abort a URL:
the normalizer still runs with whatever fields were populated.
"""

import asyncio
import logging
import time
from typing import Mapping

from linkstitcher.models import Preview
from linkstitcher.services.extractors import ExtractionResult, Extractor
from linkstitcher.services.normalizer import normalize_preview
from linkstitcher.services.source_classifier import SourceKind, classify

logger = logging.getLogger(__name__)


async def embellish_preview(
    preview: Preview,
    extractors: Mapping[SourceKind, Extractor],
    max_summary_chars: int = 600,
) -> ExtractionResult:
    """
    Enrich one preview in place.

    Does not set preview.embellished; callers decide that from the result.

    Args:
        preview: Preview to enrich
        extractors: Extractor per SourceKind (see build_extractors)
        max_summary_chars: Summary budget, in characters

    Returns:
        ExtractionResult with the recovered content, or the error message
        when extraction failed
    """
    logger.info(f"embellish_preview({preview.url})")
    start_time = time.time()

    classification = classify(preview.url)
    extractor = extractors[classification.kind]

    try:
        result = await extractor.extract(preview)
    except Exception as e:
        logger.error(f"Failed to extract {classification.kind.value} {preview.url}: {e}")
        result = ExtractionResult(error=str(e) or type(e).__name__)

    normalize_preview(preview, result.content, max_summary_chars)

    logger.debug(f"Embellished {preview.url} in {time.time() - start_time:.1f}s")
    return result


async def embellish_many(
    previews: list[Preview],
    extractors: Mapping[SourceKind, Extractor],
    max_summary_chars: int = 600,
    max_concurrency: int = 4,
) -> list[ExtractionResult]:
    """
    Embellish previews concurrently, at most max_concurrency at a time.

    Returns:
        One ExtractionResult per preview, in input order
    """
    semaphore = asyncio.Semaphore(max_concurrency)

    async def bounded(preview: Preview) -> ExtractionResult:
        async with semaphore:
            return await embellish_preview(preview, extractors, max_summary_chars)

    results = await asyncio.gather(*(bounded(preview) for preview in previews))

    failures = sum(1 for result in results if not result.ok)
    logger.info(f"Embellished {len(previews)} previews ({failures} extraction failures)")
    return list(results)
