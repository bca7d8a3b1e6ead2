"""
Smart Filter

Two-phase relevance gate for previews:

Phase 1 (keywords): at least one keyword must occur, case-sensitively,
in the summary. Skipped when no keywords are configured.

Phase 2 (topics): one completion call asks whether the summary relates to
any configured topic; the preview passes when the answer contains "yes"
or "Yes". Skipped when no topics are configured.

A preview without a summary never passes.
"""

import asyncio
import enum
import logging
from dataclasses import dataclass, field

from linkstitcher.errors import CompletionError
from linkstitcher.models import Preview
from linkstitcher.services.completion import CompletionWorker

logger = logging.getLogger(__name__)

TOPICS_PROMPT = (
    "Your task is to decide if the following passage is related to any of the "
    "following topics: {topics}. The passage is as follows.\n\n{passage}\n\n"
)


def indent(text: str, prefix: str = "    ") -> str:
    """Prefix every line of text, blank lines included."""
    return "\n".join(f"{prefix}{line}" for line in text.split("\n"))


def build_topics_prompt(topics: list[str], summary: str) -> str:
    return TOPICS_PROMPT.format(topics=", ".join(topics), passage=indent(summary))


@dataclass(frozen=True)
class FilterConfig:
    keywords: tuple[str, ...] = ()
    topics: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "keywords", tuple(self.keywords))
        object.__setattr__(self, "topics", tuple(self.topics))


class FilterErrorPolicy(enum.Enum):
    """What filter_previews does with a preview whose topic check failed"""
    EXCLUDE = "exclude"
    INCLUDE = "include"
    RAISE = "raise"


@dataclass
class FilterOutcome:
    """
    Result of filtering a batch

    Attributes:
        passed: Previews that passed both phases (plus errored ones under INCLUDE)
        rejected: Previews that cleanly failed a phase
        errored: (preview, error) pairs whose topic check raised
    """
    passed: list[Preview] = field(default_factory=list)
    rejected: list[Preview] = field(default_factory=list)
    errored: list[tuple[Preview, CompletionError]] = field(default_factory=list)


class SmartFilter:
    def __init__(self, config: FilterConfig, completion: CompletionWorker, max_concurrency: int = 4):
        self.config = config
        self.completion = completion
        self.max_concurrency = max_concurrency

    def matches_keywords(self, summary: str) -> bool:
        if not self.config.keywords:
            return True
        return any(keyword in summary for keyword in self.config.keywords)

    async def matches_topics(self, summary: str) -> bool:
        if not self.config.topics:
            return True
        response = await self.completion.complete(build_topics_prompt(list(self.config.topics), summary))
        return "yes" in response or "Yes" in response

    async def check(self, preview: Preview) -> bool:
        """
        Decide whether a preview is relevant.

        Raises:
            CompletionError: if the topic check could not be made
        """
        summary = preview.summary
        if summary is None:
            return False

        if not self.matches_keywords(summary):
            return False

        return await self.matches_topics(summary)

    async def checked(self, preview: Preview) -> tuple[bool, Preview]:
        """check(), returning the preview alongside the verdict."""
        return await self.check(preview), preview

    async def filter_previews(
        self,
        previews: list[Preview],
        on_error: FilterErrorPolicy = FilterErrorPolicy.EXCLUDE,
    ) -> FilterOutcome:
        """
        Check many previews concurrently and partition them.

        Args:
            previews: Previews to check
            on_error: Policy for previews whose topic check raised

        Returns:
            FilterOutcome, each list in input order

        Raises:
            CompletionError: the first topic-check failure, under RAISE
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded(preview: Preview):
            async with semaphore:
                try:
                    return await self.checked(preview)
                except CompletionError as e:
                    logger.error(f"Topic check failed for {preview.url}: {e}")
                    return e, preview

        results = await asyncio.gather(*(bounded(preview) for preview in previews))

        outcome = FilterOutcome()
        for verdict, preview in results:
            if isinstance(verdict, CompletionError):
                if on_error is FilterErrorPolicy.RAISE:
                    raise verdict
                outcome.errored.append((preview, verdict))
                if on_error is FilterErrorPolicy.INCLUDE:
                    outcome.passed.append(preview)
            elif verdict:
                outcome.passed.append(preview)
            else:
                outcome.rejected.append(preview)

        logger.info(
            f"Smart filter: {len(outcome.passed)} passed, {len(outcome.rejected)} rejected, "
            f"{len(outcome.errored)} errored"
        )
        return outcome
