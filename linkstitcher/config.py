"""
Runtime configuration for linkstitcher

Settings are read from environment variables (loaded from .env by the
entry points via python-dotenv) into an explicit Settings value that is
passed to the components that need it.
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from linkstitcher.errors import ConfigError

logger = logging.getLogger(__name__)

# Configuration
REPOSITORY_URL = "https://github.com/rybla/linkstitcher"
FEED_IMAGE_URL = "https://www.rybl.net/favicon.ico"
RECENCY_CUTOFF_DAYS = 7

COMPLETION_PROVIDERS = ("gemini_cli", "anthropic")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """
    Process-wide settings, built once at startup

    Attributes:
        database_url: SQLAlchemy URL of the previews database
        github_token: Personal access token for the GitHub README API
        bookmarked_urls_path: Newline-separated file of URLs to bookmark
        saved_urls_path: Newline-separated file of URLs to save
        feeds_dir: Directory the RSS feed files are written to
        completion_provider: "gemini_cli" or "anthropic"
        completion_model: Model identifier for the Anthropic provider
        gemini_command: Executable used by the gemini_cli provider
        max_concurrency: Cap on in-flight external calls across URLs
        http_timeout: Per-request HTTP timeout (seconds)
        completion_timeout: Per-call completion timeout (seconds)
        max_summary_chars: Summary budget, in characters
        log_level: Logging level name
    """
    database_url: str = "sqlite:///linkstitcher.db"
    github_token: Optional[str] = None
    bookmarked_urls_path: Optional[str] = None
    saved_urls_path: Optional[str] = None
    feeds_dir: str = "site"
    completion_provider: str = "gemini_cli"
    completion_model: str = "claude-sonnet-4-5"
    gemini_command: str = "gemini"
    max_concurrency: int = 4
    http_timeout: float = 30.0
    completion_timeout: float = 120.0
    max_summary_chars: int = 600
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the environment.

        Raises:
            ConfigError: on malformed numeric values or an unknown provider
        """
        provider = os.environ.get("LINKSTITCHER_COMPLETION_PROVIDER", "gemini_cli").strip().lower()
        if provider not in COMPLETION_PROVIDERS:
            raise ConfigError(
                f"LINKSTITCHER_COMPLETION_PROVIDER must be one of {', '.join(COMPLETION_PROVIDERS)}, got {provider!r}"
            )

        settings = cls(
            database_url=os.environ.get("DATABASE_URL") or cls.database_url,
            github_token=os.environ.get("GITHUB_PERSONAL_ACCESS_TOKEN") or None,
            bookmarked_urls_path=os.environ.get("BOOKMARKED_URLS_FILEPATH") or None,
            saved_urls_path=os.environ.get("SAVED_URLS_FILEPATH") or None,
            feeds_dir=os.environ.get("FEEDS_DIRPATH") or cls.feeds_dir,
            completion_provider=provider,
            completion_model=os.environ.get("LINKSTITCHER_COMPLETION_MODEL") or cls.completion_model,
            gemini_command=os.environ.get("LINKSTITCHER_GEMINI_COMMAND") or cls.gemini_command,
            max_concurrency=_env_int("LINKSTITCHER_MAX_CONCURRENCY", cls.max_concurrency),
            http_timeout=_env_float("LINKSTITCHER_HTTP_TIMEOUT", cls.http_timeout),
            completion_timeout=_env_float("LINKSTITCHER_COMPLETION_TIMEOUT", cls.completion_timeout),
            max_summary_chars=_env_int("LINKSTITCHER_MAX_SUMMARY_CHARS", cls.max_summary_chars),
            log_level=os.environ.get("LINKSTITCHER_LOG_LEVEL", cls.log_level),
        )

        if settings.max_concurrency < 1:
            raise ConfigError("LINKSTITCHER_MAX_CONCURRENCY must be at least 1")
        if settings.max_summary_chars < 1:
            raise ConfigError("LINKSTITCHER_MAX_SUMMARY_CHARS must be at least 1")

        return settings

    def require(self, *names: str) -> None:
        """
        Fail fast when settings a job depends on are missing.

        Raises:
            ConfigError: naming the first unset attribute
        """
        for name in names:
            if not getattr(self, name):
                env_name = _ENV_NAMES.get(name, name.upper())
                raise ConfigError(f"This environment variable must be set: {env_name}")


_ENV_NAMES = {
    "database_url": "DATABASE_URL",
    "github_token": "GITHUB_PERSONAL_ACCESS_TOKEN",
    "bookmarked_urls_path": "BOOKMARKED_URLS_FILEPATH",
    "saved_urls_path": "SAVED_URLS_FILEPATH",
    "feeds_dir": "FEEDS_DIRPATH",
}
