# src/tourcheck_api/application/interfaces/telemetry_port.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Application Interface: Telemetry Port.

Synopsis:
    Counters emitted by the leg report pipeline. Implementations live in
    infrastructure (Prometheus); use cases default to the no-op variant.

Layer:
    application/interfaces
"""

from __future__ import annotations

from typing import Protocol


class TelemetryPort(Protocol):
    """Pipeline counters."""

    def record_verdict(self, status: str, source: str | None) -> None:
        """Count one automated verdict.

        Args:
            status: Derived report status.
            source: Matching strategy family, or ``None`` when unmatched.
        """

    def record_audit_failure(self, entity_type: str) -> None:
        """Count one audit write that failed and was skipped."""


class NullTelemetry:
    """Telemetry that records nothing."""

    def record_verdict(self, status: str, source: str | None) -> None:
        return None

    def record_audit_failure(self, entity_type: str) -> None:
        return None
