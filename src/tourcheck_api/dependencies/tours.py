# src/tourcheck_api/dependencies/tours.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Dependency wiring for tours (unit of work, directory gateway, use cases).

Overview:
    FastAPI dependency providers consumed by the tour routers. Tests override
    :func:`get_uow` and :func:`get_flight_directory_gateway` through
    ``app.dependency_overrides`` to run the real use cases against fakes.

Layer:
    dependencies
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request

from tourcheck_api.adapters.gateways.ivao_gateway import IvaoFlightDirectoryGateway
from tourcheck_api.adapters.uow.sqlalchemy_uow import SqlAlchemyUnitOfWork
from tourcheck_api.application.services.audit_trail import AuditTrail
from tourcheck_api.application.services.flight_matcher import FlightMatcher
from tourcheck_api.application.uow import UnitOfWork
from tourcheck_api.application.use_cases.tours.get_tour_rules import GetTourRulesUseCase
from tourcheck_api.application.use_cases.tours.join_tour import JoinTourUseCase
from tourcheck_api.application.use_cases.tours.list_leg_reports import ListLegReportsUseCase
from tourcheck_api.application.use_cases.tours.list_pilot_sessions import (
    ListPilotSessionsUseCase,
)
from tourcheck_api.application.use_cases.tours.review_leg_report import ReviewLegReportUseCase
from tourcheck_api.application.use_cases.tours.submit_leg_report import SubmitLegReportUseCase
from tourcheck_api.config.settings import get_settings
from tourcheck_api.domain.interfaces.gateways.flight_directory_gateway import (
    FlightDirectoryGateway,
)
from tourcheck_api.infrastructure.database.session import get_sessionmaker
from tourcheck_api.infrastructure.external_apis.ivao.client import IvaoClient
from tourcheck_api.infrastructure.external_apis.ivao.settings import IvaoSettings
from tourcheck_api.infrastructure.observability.metrics import PrometheusTelemetry

logger = logging.getLogger(__name__)

_fallback_client: IvaoClient | None = None
_telemetry = PrometheusTelemetry()


def _ivao_client(request: Request) -> IvaoClient:
    """Return the app-wide IVAO client, or a process-wide fallback.

    The fallback covers transports that skip the lifespan (e.g. bare
    ``ASGITransport`` in tests).
    """
    global _fallback_client
    client = getattr(request.app.state, "ivao_client", None)
    if isinstance(client, IvaoClient):
        return client
    if _fallback_client is None:
        logger.info("ivao_client.fallback_created")
        _fallback_client = IvaoClient(IvaoSettings.from_app_settings(get_settings()))
    return _fallback_client


def _audit_trail() -> AuditTrail:
    return AuditTrail(_telemetry)


def get_uow() -> UnitOfWork:
    """Return a SQLAlchemy-backed unit of work."""
    return SqlAlchemyUnitOfWork(session_factory=get_sessionmaker())


def get_flight_directory_gateway(request: Request) -> FlightDirectoryGateway:
    """Return the IVAO-backed flight directory gateway."""
    return IvaoFlightDirectoryGateway(_ivao_client(request))


def get_flight_matcher(
    gateway: Annotated[FlightDirectoryGateway, Depends(get_flight_directory_gateway)],
) -> FlightMatcher:
    """Return a flight matcher bound to the directory gateway."""
    return FlightMatcher(gateway, sessions_page_size=get_settings().ivao_sessions_page_size)


def get_submit_leg_report_uc(
    uow: Annotated[UnitOfWork, Depends(get_uow)],
    matcher: Annotated[FlightMatcher, Depends(get_flight_matcher)],
) -> SubmitLegReportUseCase:
    """Provide the submission use case."""
    return SubmitLegReportUseCase(
        uow=uow, matcher=matcher, audit=_audit_trail(), telemetry=_telemetry
    )


def get_review_leg_report_uc(
    uow: Annotated[UnitOfWork, Depends(get_uow)],
) -> ReviewLegReportUseCase:
    """Provide the staff review use case."""
    return ReviewLegReportUseCase(uow=uow, audit=_audit_trail())


def get_list_leg_reports_uc(
    uow: Annotated[UnitOfWork, Depends(get_uow)],
) -> ListLegReportsUseCase:
    """Provide the staff listing use case."""
    return ListLegReportsUseCase(uow=uow)


def get_join_tour_uc(uow: Annotated[UnitOfWork, Depends(get_uow)]) -> JoinTourUseCase:
    """Provide the join use case."""
    return JoinTourUseCase(uow=uow, audit=_audit_trail())


def get_tour_rules_uc(uow: Annotated[UnitOfWork, Depends(get_uow)]) -> GetTourRulesUseCase:
    """Provide the public rules use case."""
    return GetTourRulesUseCase(uow=uow)


def get_list_pilot_sessions_uc(
    gateway: Annotated[FlightDirectoryGateway, Depends(get_flight_directory_gateway)],
) -> ListPilotSessionsUseCase:
    """Provide the session picker use case."""
    return ListPilotSessionsUseCase(gateway=gateway)
