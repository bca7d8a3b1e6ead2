"""
Preview Enrichment Services

This package contains the services behind the ingestion jobs:
- source_classifier: Decide the extraction strategy for a URL
- extractors: Per-kind content extraction (arXiv, x.com, GitHub, web documents)
- normalizer: Summary fallback chain and source labelling
- embellish: classify -> extract -> normalize, for one or many previews
- tag_synthesizer: Bookmarking with AI-generated tags
- smart_filter: Keyword and AI topic relevance gate
- store: Dedup-aware preview persistence
- rss_channel: RSS ingestion and feed rendering
- pipeline: Orchestrate the saveds, bookmarks and hackernews jobs
"""

from linkstitcher.services.source_classifier import SourceKind, Classification, classify
from linkstitcher.services.extractors import ExtractionResult, build_extractors
from linkstitcher.services.normalizer import normalize_preview
from linkstitcher.services.embellish import embellish_preview, embellish_many
from linkstitcher.services.tag_synthesizer import bookmark_preview
from linkstitcher.services.smart_filter import SmartFilter, FilterConfig, FilterErrorPolicy, FilterOutcome
from linkstitcher.services.store import PreviewStore

__all__ = [
    'SourceKind',
    'Classification',
    'classify',
    'ExtractionResult',
    'build_extractors',
    'normalize_preview',
    'embellish_preview',
    'embellish_many',
    'bookmark_preview',
    'SmartFilter',
    'FilterConfig',
    'FilterErrorPolicy',
    'FilterOutcome',
    'PreviewStore',
]
