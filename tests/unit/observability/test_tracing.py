from __future__ import annotations

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from tourcheck_api.infrastructure.observability import tracing


@pytest.fixture
def exporter(monkeypatch: pytest.MonkeyPatch) -> InMemorySpanExporter:
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    monkeypatch.setattr(tracing.trace, "get_tracer", provider.get_tracer)
    return exporter


@pytest.mark.asyncio
async def test_span_carries_name_and_attributes(exporter: InMemorySpanExporter) -> None:
    async with tracing.traced("ivao.sessions", endpoint="sessions", page=1, skipped=None):
        pass

    (span,) = exporter.get_finished_spans()
    assert span.name == "ivao.sessions"
    assert dict(span.attributes or {}) == {"endpoint": "sessions", "page": 1}
    assert span.status.status_code is StatusCode.UNSET


@pytest.mark.asyncio
async def test_exception_marks_span_error_and_propagates(
    exporter: InMemorySpanExporter,
) -> None:
    with pytest.raises(TimeoutError):
        async with tracing.traced("ivao.live_flights"):
            raise TimeoutError("slow")

    (span,) = exporter.get_finished_spans()
    assert span.status.status_code is StatusCode.ERROR
    assert [event.name for event in span.events] == ["exception"]


@pytest.mark.asyncio
async def test_works_without_sdk_provider() -> None:
    async with tracing.traced("ivao.flight_plans", endpoint="flight_plans") as span:
        assert span.is_recording() is False
