# src/tourcheck_api/adapters/presenters/tours_presenter.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Tours presenter: application DTOs -> HTTP schemas inside envelopes."""

from __future__ import annotations

from typing import Any

from tourcheck_api.adapters.presenters.base_presenter import BasePresenter, PresentResult
from tourcheck_api.adapters.schemas.http.envelopes import PaginatedEnvelope, SuccessEnvelope
from tourcheck_api.adapters.schemas.http.tours import (
    EnrollmentHTTP,
    LegReportHTTP,
    PilotSessionHTTP,
    PilotSessionsHTTP,
    PublicRuleHTTP,
    TourRulesHTTP,
)
from tourcheck_api.application.schemas.dto.tours import (
    EnrollmentDTO,
    LegReportDTO,
    LegReportPageDTO,
    PilotSessionDTO,
    TourRulesDTO,
)


def _report_http(dto: LegReportDTO) -> LegReportHTTP:
    return LegReportHTTP.model_validate(dto.model_dump())


class ToursPresenter(BasePresenter):
    """Shape tour resources for the HTTP boundary."""

    def present_report(
        self, dto: LegReportDTO, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Present one leg report."""
        return self.present_success(data=_report_http(dto), trace_id=trace_id)

    def present_report_page(
        self, page: LegReportPageDTO, *, trace_id: str | None = None
    ) -> PresentResult[PaginatedEnvelope[Any]]:
        """Present one page of the staff review queue."""
        return self.present_paginated(
            items=[_report_http(item) for item in page.items],
            page=page.page,
            page_size=page.page_size,
            total=page.total,
            trace_id=trace_id,
        )

    def present_enrollment(
        self, dto: EnrollmentDTO, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Present an enrollment."""
        return self.present_success(
            data=EnrollmentHTTP.model_validate(dto.model_dump()), trace_id=trace_id
        )

    def present_rules(
        self, dto: TourRulesDTO, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Present the public rules of a tour (cacheable)."""
        data = TourRulesHTTP(
            tour_id=dto.tour_id,
            slug=dto.slug,
            title=dto.title,
            allow_any_aircraft=dto.allow_any_aircraft,
            rules=[PublicRuleHTTP(key=r.key, label=r.label) for r in dto.rules],
        )
        return self.present_success(data=data, trace_id=trace_id, with_etag=True)

    def present_pilot_sessions(
        self, sessions: list[PilotSessionDTO], *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Present the session picker listing."""
        data = PilotSessionsHTTP(
            items=[PilotSessionHTTP.model_validate(s.model_dump()) for s in sessions]
        )
        return self.present_success(data=data, trace_id=trace_id)
