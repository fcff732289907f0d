from __future__ import annotations

import pytest
from prometheus_client import REGISTRY

from tourcheck_api.infrastructure.observability.metrics import (
    observe_directory_request,
    record_audit_failure,
    record_verdict,
)


def _value(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_successful_call_records_latency_only() -> None:
    labels = {"endpoint": "metrics_ok", "outcome": "success"}
    before = _value("tourcheck_flight_directory_latency_seconds_count", labels)

    with observe_directory_request(endpoint="metrics_ok"):
        pass

    assert _value("tourcheck_flight_directory_latency_seconds_count", labels) == before + 1
    assert (
        _value(
            "tourcheck_flight_directory_errors_total",
            {"endpoint": "metrics_ok", "reason": "exception"},
        )
        == 0.0
    )


def test_failed_call_counts_error_reason() -> None:
    labels = {"endpoint": "metrics_err", "reason": "exception"}
    before = _value("tourcheck_flight_directory_errors_total", labels)

    with pytest.raises(RuntimeError):
        with observe_directory_request(endpoint="metrics_err"):
            raise RuntimeError("x")

    assert _value("tourcheck_flight_directory_errors_total", labels) == before + 1


def test_marked_error_reason_is_kept() -> None:
    labels = {"endpoint": "metrics_mark", "reason": "FlightDirectoryUnavailable"}
    before = _value("tourcheck_flight_directory_errors_total", labels)

    with observe_directory_request(endpoint="metrics_mark") as obs:
        obs.mark_error("FlightDirectoryUnavailable")

    assert _value("tourcheck_flight_directory_errors_total", labels) == before + 1


def test_verdict_and_audit_counters() -> None:
    verdict = {"status": "APPROVED", "source": "none"}
    audit = {"entity_type": "metricsTest"}
    v0 = _value("tourcheck_leg_report_verdicts_total", verdict)
    a0 = _value("tourcheck_audit_failures_total", audit)

    record_verdict("APPROVED", None)
    record_audit_failure("metricsTest")

    assert _value("tourcheck_leg_report_verdicts_total", verdict) == v0 + 1
    assert _value("tourcheck_audit_failures_total", audit) == a0 + 1
