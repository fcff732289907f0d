# src/tourcheck_api/infrastructure/observability/tracing.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Spans around flight directory calls.

Spans go through the OpenTelemetry API. Without an SDK tracer provider
installed by the deployment, the API hands out non-recording spans and
``traced`` costs almost nothing.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode

_TRACER_NAME = "tourcheck_api.flight_directory"


@asynccontextmanager
async def traced(span_name: str, **attrs: Any) -> AsyncIterator[Span]:
    """Run the block inside a span named ``span_name``.

    Attribute values that are not str/bool/int/float are stringified. An
    exception leaving the block is recorded on the span and re-raised.

    Args:
        span_name: Logical span name, e.g. ``"ivao.sessions"``.
        **attrs: Span attributes.

    Yields:
        The active span.
    """
    tracer = trace.get_tracer(_TRACER_NAME)
    attributes = {
        key: value if isinstance(value, (str, bool, int, float)) else str(value)
        for key, value in attrs.items()
        if value is not None
    }
    with tracer.start_as_current_span(
        span_name, attributes=attributes, record_exception=False, set_status_on_exception=False
    ) as span:
        try:
            yield span
        except Exception as exc:
            span.record_exception(exc)
            span.set_status(Status(StatusCode.ERROR, type(exc).__name__))
            raise
