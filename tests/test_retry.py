"""RetryPolicy attempts, backoff and the quota short-circuit."""

from __future__ import annotations

import asyncio

import pytest

from verdict.errors import UpstreamQuotaError, UpstreamTransientError
from verdict.services import RetryPolicy


class FlakyOperation:
    def __init__(self, failures: list[Exception], result: str = "ok") -> None:
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


def _policy(delays: list[float], **kwargs) -> RetryPolicy:
    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    return RetryPolicy(sleep=fake_sleep, **kwargs)


def test_succeeds_after_transient_failures() -> None:
    delays: list[float] = []
    operation = FlakyOperation([UpstreamTransientError(), UpstreamTransientError()])

    result = asyncio.run(_policy(delays, base_delay=1.0).run(operation))

    assert result == "ok"
    assert operation.calls == 3
    assert delays == [1.0, 2.0]


def test_gives_up_after_max_attempts_without_trailing_sleep() -> None:
    delays: list[float] = []
    operation = FlakyOperation([UpstreamTransientError("boom")] * 5)

    with pytest.raises(UpstreamTransientError, match="boom"):
        asyncio.run(_policy(delays, max_attempts=3, base_delay=0.5).run(operation))

    assert operation.calls == 3
    assert delays == [0.5, 1.0]


def test_quota_error_is_not_retried() -> None:
    delays: list[float] = []
    operation = FlakyOperation([UpstreamQuotaError()])

    with pytest.raises(UpstreamQuotaError):
        asyncio.run(_policy(delays).run(operation))

    assert operation.calls == 1
    assert delays == []


def test_custom_predicate() -> None:
    delays: list[float] = []
    operation = FlakyOperation([ValueError("bad input")])
    policy = _policy(delays, is_retryable=lambda exc: not isinstance(exc, ValueError))

    with pytest.raises(ValueError):
        asyncio.run(policy.run(operation))

    assert operation.calls == 1


def test_delay_for_doubles() -> None:
    policy = RetryPolicy(base_delay=1.0)

    assert [policy.delay_for(n) for n in range(4)] == [1.0, 2.0, 4.0, 8.0]
