# src/tourcheck_api/adapters/routers/tours_router.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Tours Router (member surface).

Summary:
    Join a tour, read its public rules, pick a directory session and submit
    leg reports.

Routes:
    POST /v1/tours/{tour_id}/enrollment
    GET  /v1/tours/sessions?date=YYYY-MM-DD
    GET  /v1/tours/{slug}/rules
    POST /v1/tours/legs/{leg_id}/reports

Layer:
    adapters/routers

Notes:
    Domain errors (404/409) are rendered by the application-level exception
    handler. The submission pipeline absorbs directory failures into a PENDING
    report; the session picker reports a failed session search as 503/502.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, Query, Request, Response, status

from tourcheck_api.adapters.presenters.tours_presenter import ToursPresenter
from tourcheck_api.adapters.routers.base_router import BaseRouter
from tourcheck_api.adapters.schemas.http.envelopes import SuccessEnvelope
from tourcheck_api.adapters.schemas.http.tours import (
    EnrollmentHTTP,
    LegReportHTTP,
    PilotSessionsHTTP,
    SubmitLegReportRequest,
    TourRulesHTTP,
)
from tourcheck_api.application.schemas.dto.tours import SubmitLegReportDTO
from tourcheck_api.application.use_cases.tours.get_tour_rules import GetTourRulesUseCase
from tourcheck_api.application.use_cases.tours.join_tour import JoinTourUseCase
from tourcheck_api.application.use_cases.tours.list_pilot_sessions import (
    ListPilotSessionsUseCase,
)
from tourcheck_api.application.use_cases.tours.submit_leg_report import SubmitLegReportUseCase
from tourcheck_api.dependencies.tours import (
    get_join_tour_uc,
    get_list_pilot_sessions_uc,
    get_submit_leg_report_uc,
    get_tour_rules_uc,
)
from tourcheck_api.infrastructure.auth.jwt_dependency import Principal, auth_required

router = BaseRouter(version="v1", resource="tours", tags=["Tours"])
presenter = ToursPresenter()

MEMBER_AUTH = auth_required()


def _trace_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@router.post(
    "/{tour_id}/enrollment",
    response_model=SuccessEnvelope[EnrollmentHTTP],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="Join a tour",
)
async def join_tour(
    tour_id: UUID,
    request: Request,
    response: Response,
    principal: Annotated[Principal, Depends(MEMBER_AUTH)],
    uc: Annotated[JoinTourUseCase, Depends(get_join_tour_uc)],
) -> Any:
    """Enroll the caller in a tour; joining again keeps the original enrollment."""
    dto = await uc.execute(user_id=principal.sub, tour_id=tour_id)
    result = presenter.present_enrollment(dto, trace_id=_trace_id(request))
    presenter.apply_headers(result, response)
    return result.body


@router.get(
    "/sessions",
    response_model=SuccessEnvelope[PilotSessionsHTTP],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="List the caller's pilot sessions on a UTC day",
)
async def list_pilot_sessions(
    request: Request,
    response: Response,
    day: Annotated[date, Query(alias="date", description="UTC day (YYYY-MM-DD).")],
    principal: Annotated[Principal, Depends(MEMBER_AUTH)],
    uc: Annotated[ListPilotSessionsUseCase, Depends(get_list_pilot_sessions_uc)],
) -> Any:
    """Return the caller's directory sessions that overlap ``date``.

    Each session carries the details of its first flight plan so the leg
    report form can be prefilled; the chosen id is sent back as
    ``session_id``.
    """
    sessions = await uc.execute(vid=principal.vid, day=day)
    result = presenter.present_pilot_sessions(sessions, trace_id=_trace_id(request))
    presenter.apply_headers(result, response)
    return result.body


@router.get(
    "/{slug}/rules",
    response_model=SuccessEnvelope[TourRulesHTTP],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="List a tour's public rules",
)
async def get_tour_rules(
    slug: str,
    request: Request,
    response: Response,
    _principal: Annotated[Principal, Depends(MEMBER_AUTH)],
    uc: Annotated[GetTourRulesUseCase, Depends(get_tour_rules_uc)],
) -> Any:
    """Return the member-visible rules of a published tour."""
    dto = await uc.execute(slug)
    result = presenter.present_rules(dto, trace_id=_trace_id(request))
    presenter.apply_headers(result, response)
    return result.body


@router.post(
    "/legs/{leg_id}/reports",
    response_model=SuccessEnvelope[LegReportHTTP],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="Submit or resubmit a leg report",
)
async def submit_leg_report(
    leg_id: UUID,
    body: SubmitLegReportRequest,
    request: Request,
    response: Response,
    principal: Annotated[Principal, Depends(MEMBER_AUTH)],
    uc: Annotated[SubmitLegReportUseCase, Depends(get_submit_leg_report_uc)],
) -> Any:
    """Run automated validation and persist the caller's report for the leg.

    The response carries the resulting status (``APPROVED`` or ``PENDING``)
    and the review note explaining it.
    """
    req = SubmitLegReportDTO(leg_id=leg_id, **body.model_dump())
    dto = await uc.execute(user_id=principal.sub, vid=principal.vid, req=req)
    result = presenter.present_report(dto, trace_id=_trace_id(request))
    presenter.apply_headers(result, response)
    return result.body
