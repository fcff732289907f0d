# src/tourcheck_api/infrastructure/external_apis/ivao/client.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""IVAO Transport Client: resilient, instrumented, async.

This transport is framework-agnostic and provides:

* Async HTTP (httpx) with a bounded per-request timeout.
* Optional jittered exponential retries (disabled by default).
* Circuit breaker (CLOSED -> OPEN -> HALF-OPEN).
* ``X-API-Key`` and OAuth2 client-credentials bearer authentication; the
  token is cached until 30 seconds before it expires.
* Deterministic mapping to flight directory errors (429/4xx/5xx/non-JSON).
* Prometheus metrics and request-id propagation.

Return shapes are the parsed JSON bodies; mapping into domain records is the
gateway's job.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from contextlib import suppress
from typing import Any, Final
from urllib.parse import quote

import httpx

from tourcheck_api.domain.exceptions.flight_directory import (
    FlightDirectoryBadRequest,
    FlightDirectoryError,
    FlightDirectoryUnavailable,
    FlightDirectoryValidationError,
)
from tourcheck_api.infrastructure.external_apis.ivao.settings import IvaoSettings
from tourcheck_api.infrastructure.logging.logger import get_request_id, get_trace_id
from tourcheck_api.infrastructure.observability.metrics import observe_directory_request
from tourcheck_api.infrastructure.observability.tracing import traced
from tourcheck_api.infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitOpenError,
)
from tourcheck_api.infrastructure.resilience.retry import RetryPolicy, retry_async

logger = logging.getLogger(__name__)

_DEFAULT_BASE_BACKOFF: Final[float] = 0.25
_DEFAULT_MAX_BACKOFF: Final[float] = 2.0
_TOKEN_REFRESH_MARGIN_S: Final[float] = 30.0
_DEFAULT_TOKEN_TTL_S: Final[float] = 300.0

_DEFAULT_HEADERS: Final[dict[str, str]] = {
    "Accept": "application/json",
    "User-Agent": "tourcheck-ivao-client/1.0",
}


class IvaoClient:
    """Resilient, instrumented transport client for the IVAO API."""

    def __init__(
        self,
        settings: IvaoSettings,
        *,
        http: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
        breaker: CircuitBreaker | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize the transport client.

        Args:
            settings: Provider settings loaded from environment or DI.
            http: Optional shared ``httpx.AsyncClient``. If omitted, a client
                is created and owned by this instance.
            retry_policy: Optional retry configuration for retryable failures.
                When omitted, a jittered exponential policy is built from
                ``settings.max_retries``.
            breaker: Circuit breaker instance to use; created if omitted.
            clock: Wall clock in epoch seconds, used for token expiry.
        """
        self._settings = settings
        self._base_url = str(settings.base_url).rstrip("/")
        self._timeout = float(settings.timeout_s)

        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(
            timeout=self._timeout,
            headers=_DEFAULT_HEADERS.copy(),
        )

        self._retry = retry_policy or RetryPolicy(
            total=int(settings.max_retries),
            base=_DEFAULT_BASE_BACKOFF,
            cap=_DEFAULT_MAX_BACKOFF,
            jitter=True,
        )
        self._breaker = breaker or CircuitBreaker(
            failure_threshold=5,
            recovery_timeout_s=30.0,
            half_open_max_calls=1,
        )
        self._clock = clock or time.time

        self._token: str | None = None
        self._token_expires_at: float = 0.0
        self._token_lock = asyncio.Lock()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    # ---------------------------- Public API ----------------------------- #

    async def session_flight_plans(self, session_id: str) -> Any:
        """Call ``/v2/tracker/sessions/{id}/flightPlans``."""
        path = f"/v2/tracker/sessions/{quote(session_id, safe='')}/flightPlans"
        return await self._observe_call(endpoint="session_flight_plans", path=path)

    async def sessions(
        self,
        *,
        user_id: str,
        callsign: str | None = None,
        connection_type: str = "PILOT",
        page: int = 1,
        per_page: int = 25,
        date_from: str | None = None,
        date_to: str | None = None,
    ) -> Any:
        """Call ``/v2/tracker/sessions`` filtered by identity and callsign.

        Args:
            user_id: Directory member identity (VID).
            callsign: Exact callsign; omitted when ``None``.
            connection_type: Connection type filter.
            page: 1-based page index.
            per_page: Page size.
            date_from: Optional ISO lower bound.
            date_to: Optional ISO upper bound.
        """
        params: dict[str, Any] = {
            "userId": user_id,
            "connectionType": connection_type,
            "page": max(1, int(page)),
            "perPage": max(1, int(per_page)),
        }
        if callsign:
            params["callsign"] = callsign
        if date_from:
            params["from"] = date_from
        if date_to:
            params["to"] = date_to
        return await self._observe_call(
            endpoint="sessions", path="/v2/tracker/sessions", params=params
        )

    async def live_flights(self) -> Any:
        """Call ``/v2/tracker/flights`` (current live snapshot)."""
        return await self._observe_call(endpoint="live_flights", path="/v2/tracker/flights")

    # --------------------------- Authentication --------------------------- #

    async def _bearer_token(self) -> str | None:
        """Return a cached client-credentials token, fetching one when stale.

        Token failures are logged and degrade to unauthenticated calls.
        """
        if not self._settings.has_client_credentials:
            return None
        async with self._token_lock:
            if self._token and self._token_expires_at > self._clock() + _TOKEN_REFRESH_MARGIN_S:
                return self._token
            try:
                self._token, self._token_expires_at = await self._fetch_token()
            except (httpx.HTTPError, FlightDirectoryError) as exc:
                logger.warning(
                    "ivao.token_fetch_failed",
                    extra={"extra": {"error": type(exc).__name__}},
                )
                self._token = None
                self._token_expires_at = 0.0
            return self._token

    async def _fetch_token(self) -> tuple[str | None, float]:
        secret = self._settings.client_secret
        response = await self._client.post(
            f"{self._base_url}/oauth/token",
            data={
                "grant_type": "client_credentials",
                "client_id": self._settings.client_id or "",
                "client_secret": secret.get_secret_value() if secret else "",
                "scope": self._settings.oauth_scope,
            },
            headers={"Accept": "application/json"},
            timeout=self._timeout,
        )
        if response.status_code >= 400:
            raise FlightDirectoryBadRequest(
                "token request rejected", details={"status": response.status_code}
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise FlightDirectoryValidationError("non_json", details={"error": str(exc)}) from exc

        token = body.get("access_token") if isinstance(body, Mapping) else None
        if not token:
            return None, 0.0
        ttl = body.get("expires_in")
        try:
            ttl_s = float(ttl) if ttl is not None else _DEFAULT_TOKEN_TTL_S
        except (TypeError, ValueError):
            ttl_s = _DEFAULT_TOKEN_TTL_S
        return str(token), self._clock() + ttl_s

    async def _auth_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        bearer = await self._bearer_token()
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        if self._settings.api_key is not None:
            headers["X-API-Key"] = self._settings.api_key.get_secret_value()
        return headers

    # --------------------------- Internal helpers ------------------------- #

    async def _observe_call(
        self,
        *,
        endpoint: str,
        path: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Wrap a GET call with breaker, retry, metrics, and tracing."""
        url = f"{self._base_url}{path}"

        headers: dict[str, str] = dict(_DEFAULT_HEADERS)
        request_id = get_request_id()
        trace_id = get_trace_id()
        if request_id:
            headers.setdefault("X-Request-ID", request_id)
        if trace_id:
            headers.setdefault("x-trace-id", trace_id)
        headers.update(await self._auth_headers())

        async def _call() -> Any:
            """Execute a single HTTP GET under breaker control."""
            try:
                async with self._breaker.guard(endpoint):
                    response = await self._client.get(
                        url,
                        params=params,
                        headers=headers,
                        timeout=self._timeout,
                    )
                    self._raise_for_status(response)
            except CircuitOpenError as exc:
                raise FlightDirectoryUnavailable(
                    "circuit open", details={"endpoint": endpoint}
                ) from exc
            except httpx.RequestError as exc:
                # Timeouts and transport errors count as unavailability.
                raise FlightDirectoryUnavailable(
                    "transport error", details={"error": type(exc).__name__}
                ) from exc

            try:
                return response.json()
            except ValueError as exc:
                raise FlightDirectoryValidationError(
                    "non_json", details={"error": str(exc)}
                ) from exc

        def _retryable(exc: Exception) -> bool:
            return isinstance(exc, FlightDirectoryUnavailable)

        with observe_directory_request(endpoint=endpoint) as obs:
            try:
                async with traced(f"ivao.{endpoint}", endpoint=endpoint):
                    return await retry_async(_call, policy=self._retry, retry_on=_retryable)
            except FlightDirectoryError as exc:
                obs.mark_error(type(exc).__name__)
                raise

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        """Raise flight directory errors for non-success statuses."""
        status = response.status_code
        if status < 400:
            return
        details: dict[str, Any] = {"status": status}
        with suppress(Exception):
            details["body"] = response.text[:240]
        if status == 429 or status >= 500:
            raise FlightDirectoryUnavailable("upstream unavailable", details=details)
        raise FlightDirectoryBadRequest("upstream rejected request", details=details)
