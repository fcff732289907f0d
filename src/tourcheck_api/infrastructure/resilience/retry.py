# src/tourcheck_api/infrastructure/resilience/retry.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Retry utilities (async) with jittered exponential backoff."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry attempts."""

    total: int  # retries after the first attempt; 0 disables retrying
    base: float = 0.2
    cap: float = 2.0
    jitter: bool = True


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
    retry_on: Callable[[Exception], bool],
) -> T:
    """Retry an async function with backoff until success or budget exhausted.

    Args:
        fn: Zero-arg async function to execute.
        policy: RetryPolicy defining count/backoff.
        retry_on: Predicate that returns True when the raised error is retryable.

    Returns:
        The return value of ``fn`` if successful.

    Raises:
        Exception: The last error once retries are exhausted or the error is
            not retryable.
    """
    attempt = 0
    while True:
        try:
            return await fn()
        except Exception as exc:  # noqa: BLE001
            if attempt >= policy.total or not retry_on(exc):
                raise
        backoff = min(policy.cap, policy.base * (2**attempt))
        if policy.jitter:
            backoff = random.uniform(0, backoff)  # noqa: S311
        await asyncio.sleep(backoff)
        attempt += 1
