# src/tourcheck_api/infrastructure/observability/metrics.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Prometheus metrics for the flight directory and the leg report pipeline.

Collectors (names are part of the public contract and must remain stable):

* ``tourcheck_flight_directory_latency_seconds`` (Histogram)
* ``tourcheck_flight_directory_errors_total`` (Counter)
* ``tourcheck_leg_report_verdicts_total`` (Counter)
* ``tourcheck_audit_failures_total`` (Counter)

All collectors are created against the *current* default registry
(:data:`prometheus_client.REGISTRY`). If a collector with the same name
already exists there, the existing instance is reused instead of registering
a duplicate, which keeps module re-imports in tests safe.
"""

from __future__ import annotations

from collections.abc import Generator, Sequence
from contextlib import contextmanager, suppress
from dataclasses import dataclass, field
from time import perf_counter

import prometheus_client as prom
from prometheus_client import Counter, Histogram
from prometheus_client.registry import CollectorRegistry


def _get_or_create_histogram(
    name: str,
    doc: str,
    labelnames: Sequence[str] | None = None,
) -> Histogram:
    """Return a histogram bound to the current default registry.

    Args:
        name: Metric name.
        doc: Human-readable metric description.
        labelnames: Optional iterable of label names.

    Returns:
        A :class:`Histogram` bound to the current :data:`prom.REGISTRY`.
    """
    registry: CollectorRegistry = prom.REGISTRY
    mapping = getattr(registry, "_names_to_collectors", {})
    existing = mapping.get(name)
    if isinstance(existing, Histogram):
        return existing

    labels = tuple(labelnames) if labelnames is not None else ()
    try:
        return Histogram(name, doc, labels, registry=registry)
    except ValueError as exc:
        if "Duplicated timeseries" in str(exc):
            again = getattr(registry, "_names_to_collectors", {}).get(name)
            if isinstance(again, Histogram):
                return again
        raise


def _get_or_create_counter(
    name: str,
    doc: str,
    labelnames: Sequence[str] | None = None,
) -> Counter:
    """Return a counter bound to the current default registry.

    Mirrors :func:`_get_or_create_histogram` for :class:`Counter` collectors.
    """
    registry: CollectorRegistry = prom.REGISTRY
    mapping = getattr(registry, "_names_to_collectors", {})
    existing = mapping.get(name)
    if isinstance(existing, Counter):
        return existing

    labels = tuple(labelnames) if labelnames is not None else ()
    try:
        return Counter(name, doc, labels, registry=registry)
    except ValueError as exc:
        if "Duplicated timeseries" in str(exc):
            again = getattr(registry, "_names_to_collectors", {}).get(name)
            if isinstance(again, Counter):
                return again
        raise


flight_directory_latency_seconds: Histogram = _get_or_create_histogram(
    "tourcheck_flight_directory_latency_seconds",
    "Latency of flight directory calls (seconds).",
    labelnames=("endpoint", "outcome"),
)

flight_directory_errors_total: Counter = _get_or_create_counter(
    "tourcheck_flight_directory_errors_total",
    "Total errors encountered when calling the flight directory.",
    labelnames=("endpoint", "reason"),
)

leg_report_verdicts_total: Counter = _get_or_create_counter(
    "tourcheck_leg_report_verdicts_total",
    "Automated leg report verdicts by status and match source.",
    labelnames=("status", "source"),
)

audit_failures_total: Counter = _get_or_create_counter(
    "tourcheck_audit_failures_total",
    "Audit log writes that failed and were skipped.",
    labelnames=("entity_type",),
)


@dataclass
class DirectoryObservation:
    """State captured while observing one flight directory call.

    Attributes:
        endpoint: Logical endpoint name (for labelling).
        start: Monotonic start time in seconds.
        outcome: ``"success"`` or ``"error"``.
        error_reason: Short, machine-readable error reason if any.
    """

    endpoint: str
    start: float = field(default_factory=perf_counter)
    outcome: str = "success"
    error_reason: str | None = None

    def mark_error(self, reason: str) -> None:
        """Mark the call as failed with a given reason."""
        self.outcome = "error"
        self.error_reason = reason


@contextmanager
def observe_directory_request(*, endpoint: str) -> Generator[DirectoryObservation, None, None]:
    """Observe one flight directory request.

    Records a latency sample and, when the call failed, an error increment.

    Args:
        endpoint: Logical endpoint name (e.g. ``"sessions"``).

    Yields:
        A mutable :class:`DirectoryObservation`.
    """
    obs = DirectoryObservation(endpoint=endpoint)
    try:
        yield obs
    except Exception:
        if obs.error_reason is None:
            obs.mark_error("exception")
        raise
    finally:
        elapsed = perf_counter() - obs.start
        with suppress(Exception):
            flight_directory_latency_seconds.labels(
                endpoint=obs.endpoint, outcome=obs.outcome
            ).observe(elapsed)
            if obs.error_reason is not None:
                flight_directory_errors_total.labels(
                    endpoint=obs.endpoint, reason=obs.error_reason
                ).inc()


def record_verdict(status: str, source: str | None) -> None:
    """Count one automated leg report verdict."""
    leg_report_verdicts_total.labels(status=status, source=source or "none").inc()


def record_audit_failure(entity_type: str) -> None:
    """Count one skipped audit write."""
    audit_failures_total.labels(entity_type=entity_type).inc()


class PrometheusTelemetry:
    """Pipeline telemetry backed by the collectors above."""

    def record_verdict(self, status: str, source: str | None) -> None:
        record_verdict(status, source)

    def record_audit_failure(self, entity_type: str) -> None:
        record_audit_failure(entity_type)
