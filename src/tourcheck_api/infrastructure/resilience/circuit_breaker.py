# src/tourcheck_api/infrastructure/resilience/circuit_breaker.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Minimal async circuit breaker (in-memory).

State machine:
    - CLOSED -> count failures; when threshold reached, go OPEN.
    - OPEN   -> fail-fast until recovery timeout expires; then HALF-OPEN.
    - HALF-OPEN -> allow limited calls; on success -> CLOSED; on failure -> OPEN.

This is process-local. A fresh breaker is created per client instance.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field


class CircuitOpenError(RuntimeError):
    """Raised when the breaker rejects a call without attempting it."""


@dataclass
class CircuitBreaker:
    """Simple circuit breaker suitable for HTTP client protection."""

    failure_threshold: int = 5
    recovery_timeout_s: float = 30.0
    half_open_max_calls: int = 1

    _state: str = "CLOSED"  # CLOSED|OPEN|HALF_OPEN
    _failures: int = 0
    _opened_at: float = 0.0
    _half_open_calls: int = 0
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def state(self) -> str:
        """Current breaker state name."""
        return self._state

    @asynccontextmanager
    async def guard(self, key: str) -> AsyncIterator[None]:
        """Guard an async call with the breaker.

        Args:
            key: Logical call name, used in the rejection message.

        Raises:
            CircuitOpenError: If the breaker is open or the half-open trial call
                budget is spent.
        """
        async with self._lock:
            now = time.monotonic()
            if self._state == "OPEN":
                if now - self._opened_at >= self.recovery_timeout_s:
                    self._state = "HALF_OPEN"
                    self._half_open_calls = 0
                else:
                    raise CircuitOpenError(f"circuit_open:{key}")
            if self._state == "HALF_OPEN":
                if self._half_open_calls >= self.half_open_max_calls:
                    raise CircuitOpenError(f"circuit_half_open_limit:{key}")
                self._half_open_calls += 1

        try:
            yield
        except Exception:
            async with self._lock:
                if self._state == "HALF_OPEN":
                    self._state = "OPEN"
                    self._opened_at = time.monotonic()
                else:
                    self._failures += 1
                    if self._failures >= self.failure_threshold:
                        self._state = "OPEN"
                        self._opened_at = time.monotonic()
            raise
        else:
            async with self._lock:
                self._state = "CLOSED"
                self._failures = 0
