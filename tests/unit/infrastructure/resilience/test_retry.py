from __future__ import annotations

import pytest

from tourcheck_api.infrastructure.resilience.retry import RetryPolicy, retry_async


class Transient(Exception):
    pass


@pytest.mark.asyncio
async def test_retries_until_success() -> None:
    attempts = 0

    async def flaky() -> str:
        nonlocal attempts
        attempts += 1
        if attempts < 3:
            raise Transient()
        return "ok"

    result = await retry_async(
        flaky,
        policy=RetryPolicy(total=2, base=0.0, jitter=False),
        retry_on=lambda exc: isinstance(exc, Transient),
    )

    assert result == "ok"
    assert attempts == 3


@pytest.mark.asyncio
async def test_zero_budget_makes_single_attempt() -> None:
    attempts = 0

    async def failing() -> None:
        nonlocal attempts
        attempts += 1
        raise Transient()

    with pytest.raises(Transient):
        await retry_async(failing, policy=RetryPolicy(total=0), retry_on=lambda exc: True)

    assert attempts == 1


@pytest.mark.asyncio
async def test_non_retryable_error_propagates_immediately() -> None:
    attempts = 0

    async def failing() -> None:
        nonlocal attempts
        attempts += 1
        raise ValueError("bad")

    with pytest.raises(ValueError):
        await retry_async(
            failing,
            policy=RetryPolicy(total=5, base=0.0, jitter=False),
            retry_on=lambda exc: isinstance(exc, Transient),
        )

    assert attempts == 1
