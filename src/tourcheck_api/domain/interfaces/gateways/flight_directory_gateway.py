# src/tourcheck_api/domain/interfaces/gateways/flight_directory_gateway.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Flight Directory Gateway Protocol.

Synopsis:
    Domain-level Protocol (PEP 544) over the external flight activity
    directory. Concrete implementations live in the adapters layer and map
    loosely-shaped payloads into domain records.

Layer:
    domain/interfaces/gateways
"""

from __future__ import annotations

from typing import Protocol

from tourcheck_api.domain.entities.flight import (
    FlightPlan,
    LiveFlight,
    SessionQuery,
    TrackerSession,
)


class FlightDirectoryGateway(Protocol):
    """Abstraction over the flight activity directory.

    Implementations raise :class:`FlightDirectoryError` subclasses (never
    transport exceptions) on failure.
    """

    async def get_session_flight_plans(self, session_id: str) -> list[FlightPlan]:
        """Return the flight plans filed during a session.

        Raises:
            FlightDirectoryError: On any upstream failure.
        """
        ...

    async def get_sessions(self, query: SessionQuery) -> list[TrackerSession]:
        """Return sessions matching ``query``, most recent first.

        Raises:
            FlightDirectoryError: On any upstream failure.
        """
        ...

    async def get_live_flights(self) -> list[LiveFlight]:
        """Return the current live activity snapshot.

        Raises:
            FlightDirectoryError: On any upstream failure.
        """
        ...
