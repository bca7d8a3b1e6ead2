"""
Exception hierarchy for linkstitcher.

Extraction errors are local to one URL and never abort a pipeline run.
Completion and store errors propagate to the caller, which decides whether
to skip, include or abort. Configuration errors are fatal at startup.
"""


class LinkstitcherError(Exception):
    """Base class for every error raised by linkstitcher."""


class ConfigError(LinkstitcherError):
    """Missing or invalid startup configuration (credentials, database)."""


class ExtractionError(LinkstitcherError):
    """A content extractor could not obtain content for a URL."""

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.url = url


class CompletionError(LinkstitcherError):
    """The text-completion service failed or reported an error."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class StoreError(LinkstitcherError):
    """A read or write against the preview store failed."""


class FeedEntryError(LinkstitcherError):
    """A syndication feed entry could not be turned into a Preview."""
