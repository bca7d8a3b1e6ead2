"""
Text Completion Service

Sends a single prompt to an external text-completion service and returns
the raw response text. Two providers are supported:
- gemini_cli: runs the `gemini` command line tool as a subprocess
- anthropic: calls the Anthropic Messages API

Both calls are blocking. Async callers go through CompletionWorker, which
runs them on a dedicated thread pool so the event loop keeps serving
other I/O.
"""

import asyncio
import logging
import os
import subprocess
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Protocol

from anthropic import Anthropic

from linkstitcher.errors import CompletionError, ConfigError

logger = logging.getLogger(__name__)

# Configuration
GEMINI_COMMAND = "gemini"
MAX_TOKENS = 1024
TEMPERATURE = 0


class CompletionService(Protocol):
    """Anything that turns a prompt into raw response text."""

    def complete(self, prompt: str) -> str:
        ...


def _stderr_reports_error(stderr: str) -> bool:
    return "Error" in stderr or "error" in stderr


class GeminiCliCompletion:
    """
    Completion via the Gemini CLI (`gemini -p <prompt>`).

    A non-zero exit status, or any "error"/"Error" on stderr, is a failure.
    """

    def __init__(self, command: str = GEMINI_COMMAND, timeout: Optional[float] = 120.0):
        self.command = command
        self.timeout = timeout

    def complete(self, prompt: str) -> str:
        start_time = time.time()
        try:
            result = subprocess.run(
                [self.command, "-p", prompt],
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise CompletionError(f"Gemini CLI not found: {self.command}") from e
        except subprocess.TimeoutExpired as e:
            raise CompletionError(f"Gemini CLI timed out after {self.timeout}s") from e
        except OSError as e:
            raise CompletionError(f"Gemini CLI could not be started: {e}") from e

        latency_ms = int((time.time() - start_time) * 1000)
        stderr = result.stderr or ""

        if result.returncode != 0:
            raise CompletionError(f"Gemini CLI exited with status {result.returncode}", stderr=stderr)
        if _stderr_reports_error(stderr):
            raise CompletionError("Gemini CLI error", stderr=stderr)

        logger.debug(f"Gemini CLI responded in {latency_ms}ms ({len(result.stdout)} chars)")
        return result.stdout


class AnthropicCompletion:
    """Completion via the Anthropic Messages API."""

    def __init__(self, model: str = "claude-sonnet-4-5", timeout: Optional[float] = 120.0, client: Optional[Anthropic] = None):
        self.model = model
        if client is None:
            api_key = os.environ.get('ANTHROPIC_API_KEY')
            if not api_key:
                raise ConfigError("ANTHROPIC_API_KEY environment variable not set")
            client = Anthropic(api_key=api_key, timeout=timeout)
        self.client = client

    def complete(self, prompt: str) -> str:
        start_time = time.time()
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=MAX_TOKENS,
                temperature=TEMPERATURE,
                messages=[
                    {"role": "user", "content": prompt}
                ],
            )
        except Exception as e:
            raise CompletionError(f"Anthropic API error: {e}") from e

        latency_ms = int((time.time() - start_time) * 1000)
        text = "".join(
            block.text for block in response.content if getattr(block, "type", "text") == "text"
        )
        logger.debug(
            f"Anthropic responded in {latency_ms}ms "
            f"({response.usage.input_tokens}+{response.usage.output_tokens} tokens)"
        )
        return text


def create_completion_service(settings) -> CompletionService:
    """
    Build the completion service selected by settings.completion_provider.

    Raises:
        ConfigError: for an unknown provider or missing credentials
    """
    provider = settings.completion_provider
    if provider == "gemini_cli":
        return GeminiCliCompletion(command=settings.gemini_command, timeout=settings.completion_timeout)
    if provider == "anthropic":
        return AnthropicCompletion(model=settings.completion_model, timeout=settings.completion_timeout)
    raise ConfigError(f"Unknown completion provider: {provider}")


class CompletionWorker:
    """
    Runs blocking completion calls on a dedicated thread pool.

    The pool size bounds the number of completion calls in flight.
    Usable as a context manager; shutdown() waits for running calls.
    """

    def __init__(self, service: CompletionService, max_workers: int = 4):
        self.service = service
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="completion")

    async def complete(self, prompt: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.service.complete, prompt)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.shutdown()
