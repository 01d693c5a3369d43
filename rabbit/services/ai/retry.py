"""
Retry Policy for provider calls.

One exponential-backoff policy shared by every provider, applied by the
router around each adapter invocation. Only failures that might succeed on
a second try against the same provider are retried; everything else is
handed straight back to the router's fallback logic.
"""

import asyncio
import random
from collections.abc import Awaitable, Callable, Collection
from dataclasses import dataclass, field
from typing import Any, TypeVar

import structlog

from rabbit.core.config import Settings
from rabbit.services.ai.errors import ErrorKind, ProviderError

logger = structlog.get_logger()

T = TypeVar("T")

# Outages may clear up; unclassified failures get one more chance
RETRYABLE_KINDS = frozenset({ErrorKind.SERVICE_UNAVAILABLE, ErrorKind.UNKNOWN})


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 2
    backoff_base: float = 2.0
    backoff_max: float = 10.0
    jitter: float = 0.1
    retry_on: Collection[ErrorKind] = field(default=RETRYABLE_KINDS)

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.ai_retry_max_attempts,
            backoff_base=settings.ai_retry_backoff_base,
            backoff_max=settings.ai_retry_backoff_max,
        )

    def delay_for(self, attempt: int, error: ProviderError | None = None) -> float:
        """Backoff before the attempt following `attempt` (1-based)."""
        if error is not None and error.retry_after:
            delay = min(error.retry_after, self.backoff_max)
        else:
            delay = min(self.backoff_base * (2 ** (attempt - 1)), self.backoff_max)
        return max(0.0, delay * (1 + random.uniform(-self.jitter, self.jitter)))

    def should_retry(self, error: ProviderError, attempt: int) -> bool:
        return attempt < self.max_attempts and error.kind in self.retry_on

    async def run(
        self,
        func: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Call `func`, retrying retryable ProviderErrors with backoff.

        Raises:
            ProviderError: the last failure once retries are used up or the
                failure is not retryable.
        """
        attempt = 1
        while True:
            try:
                return await func(*args, **kwargs)
            except ProviderError as e:
                if not self.should_retry(e, attempt):
                    raise
                delay = self.delay_for(attempt, e)
                logger.warning(
                    "ai_retry_scheduled",
                    provider=e.provider,
                    kind=e.kind.value,
                    attempt=attempt,
                    delay=round(delay, 2),
                )
                await asyncio.sleep(delay)
                attempt += 1
