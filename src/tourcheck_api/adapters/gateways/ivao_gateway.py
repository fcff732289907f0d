# src/tourcheck_api/adapters/gateways/ivao_gateway.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Adapter Gateway: IVAO tracker -> domain flight records.

This gateway sits on top of the IVAO transport client and implements the
domain ``FlightDirectoryGateway`` Protocol.

Design principles:
    * Payload shapes vary across API revisions; every field goes through the
      defensive extraction helpers and missing data maps to ``None``.
    * Entries that are not JSON objects are skipped, never fatal.
    * Transport errors surface as ``FlightDirectoryError`` subclasses raised
      by the client; this layer adds no retries of its own.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol

from tourcheck_api.domain.entities.flight import (
    FlightPlan,
    LiveFlight,
    SessionQuery,
    TrackerSession,
)
from tourcheck_api.domain.interfaces.gateways.flight_directory_gateway import (
    FlightDirectoryGateway,
)
from tourcheck_api.domain.services.flight_fields import (
    flight_plan_from_payload,
    flight_plan_items,
    live_flight_from_payload,
    live_flight_items,
    session_from_payload,
    session_items,
)

_EPOCH = datetime.min.replace(tzinfo=UTC)


class IvaoTransport(Protocol):
    """Subset of :class:`IvaoClient` used by the gateway."""

    async def session_flight_plans(self, session_id: str) -> object: ...

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
    ) -> object: ...

    async def live_flights(self) -> object: ...


def _iso(value: datetime | None) -> str | None:
    return value.astimezone(UTC).isoformat() if value is not None else None


class IvaoFlightDirectoryGateway(FlightDirectoryGateway):
    """IVAO adapter implementing the flight directory Protocol."""

    def __init__(self, client: IvaoTransport) -> None:
        """Initialize the gateway.

        Args:
            client: Transport client exposing the tracker endpoints.
        """
        self._client = client

    async def get_session_flight_plans(self, session_id: str) -> list[FlightPlan]:
        """Return the flight plans filed during a session."""
        raw = await self._client.session_flight_plans(session_id)
        return [flight_plan_from_payload(item) for item in flight_plan_items(raw)]

    async def get_sessions(self, query: SessionQuery) -> list[TrackerSession]:
        """Return sessions matching ``query``, most recent first."""
        raw = await self._client.sessions(
            user_id=query.user_id,
            callsign=query.callsign,
            connection_type=query.connection_type,
            page=query.page,
            per_page=query.per_page,
            date_from=_iso(query.from_),
            date_to=_iso(query.to),
        )
        sessions = [session_from_payload(item) for item in session_items(raw)]
        sessions.sort(key=lambda s: s.created_at or _EPOCH, reverse=True)
        return sessions

    async def get_live_flights(self) -> list[LiveFlight]:
        """Return the current live activity snapshot."""
        raw = await self._client.live_flights()
        return [live_flight_from_payload(item) for item in live_flight_items(raw)]
