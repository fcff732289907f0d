# src/tourcheck_api/adapters/routers/tour_reports_admin_router.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Tour Reports Admin Router (staff surface).

Routes:
    GET  /v1/admin/tour-reports?status=&page=&page_size=
    POST /v1/admin/tour-reports/{report_id}/review

Every route requires the reviewer scope (``REVIEWER_SCOPE``).

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, Query, Request, Response, status

from tourcheck_api.adapters.presenters.tours_presenter import ToursPresenter
from tourcheck_api.adapters.routers.base_router import BaseRouter, PageParams
from tourcheck_api.adapters.schemas.http.envelopes import PaginatedEnvelope, SuccessEnvelope
from tourcheck_api.adapters.schemas.http.tours import LegReportHTTP, ReviewLegReportRequest
from tourcheck_api.application.schemas.dto.tours import (
    ListLegReportsQueryDTO,
    ReviewLegReportDTO,
)
from tourcheck_api.application.use_cases.tours.list_leg_reports import ListLegReportsUseCase
from tourcheck_api.application.use_cases.tours.review_leg_report import ReviewLegReportUseCase
from tourcheck_api.dependencies.tours import get_list_leg_reports_uc, get_review_leg_report_uc
from tourcheck_api.infrastructure.auth.jwt_dependency import Principal, auth_required

router = BaseRouter(version="v1", resource="admin/tour-reports", tags=["Tour Reports (Admin)"])
presenter = ToursPresenter()

REVIEWER_AUTH = auth_required(reviewer=True)


def _trace_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@router.get(
    "",
    response_model=PaginatedEnvelope[LegReportHTTP],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="List leg reports for review",
)
async def list_leg_reports(
    request: Request,
    response: Response,
    _principal: Annotated[Principal, Depends(REVIEWER_AUTH)],
    uc: Annotated[ListLegReportsUseCase, Depends(get_list_leg_reports_uc)],
    paging: Annotated[PageParams, Depends(BaseRouter.page_params)],
    status_filter: Annotated[
        str | None,
        Query(alias="status", description="PENDING, APPROVED or REJECTED."),
    ] = None,
) -> Any:
    """Return reports newest first, optionally filtered by status."""
    page = await uc.execute(
        ListLegReportsQueryDTO(
            status=status_filter, page=paging.page, page_size=paging.page_size
        )
    )
    result = presenter.present_report_page(page, trace_id=_trace_id(request))
    presenter.apply_headers(result, response)
    return result.body


@router.post(
    "/{report_id}/review",
    response_model=SuccessEnvelope[LegReportHTTP],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="Override a report's status",
)
async def review_leg_report(
    report_id: UUID,
    body: ReviewLegReportRequest,
    request: Request,
    response: Response,
    principal: Annotated[Principal, Depends(REVIEWER_AUTH)],
    uc: Annotated[ReviewLegReportUseCase, Depends(get_review_leg_report_uc)],
) -> Any:
    """Set status and note on a report without re-running validation."""
    dto = await uc.execute(
        reviewer_id=principal.sub,
        req=ReviewLegReportDTO(report_id=report_id, status=body.status, note=body.note),
    )
    result = presenter.present_report(dto, trace_id=_trace_id(request))
    presenter.apply_headers(result, response)
    return result.body
