"""Bounded retry with exponential backoff for upstream calls."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

from verdict.errors import UpstreamQuotaError

logger = logging.getLogger("verdict.pipeline")

T = TypeVar("T")


def retry_unless_quota(exc: BaseException) -> bool:
    """Default predicate: quota exhaustion is terminal, anything else is retried."""

    return not isinstance(exc, UpstreamQuotaError)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry an async operation up to ``max_attempts`` times.

    The delay before attempt ``n + 1`` is ``base_delay * 2 ** n``; there is no
    sleep after the final attempt. The last error is re-raised unchanged.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    is_retryable: Callable[[BaseException], bool] = retry_unless_quota
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, repr=False)

    def delay_for(self, attempt: int) -> float:
        return self.base_delay * (2 ** attempt)

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        attempts = max(1, self.max_attempts)
        for attempt in range(attempts):
            try:
                return await operation()
            except Exception as exc:
                if not self.is_retryable(exc) or attempt + 1 >= attempts:
                    raise
                delay = self.delay_for(attempt)
                logger.info(
                    "Retry attempt %s failed (%s), waiting %.2fs",
                    attempt + 1,
                    exc,
                    delay,
                )
                await self.sleep(delay)

        raise RuntimeError("RetryPolicy.run exhausted without result")  # pragma: no cover


__all__ = ["RetryPolicy", "retry_unless_quota"]
