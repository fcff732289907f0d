# tests/integration/routers/test_tour_reports_admin_router.py
"""Staff review queue routes over the full app with in-memory fakes."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

import httpx
import jwt
import pytest
from tours_testkit import InMemoryTourStore, make_tour

from tourcheck_api.domain.entities.report import TourLegReport
from tourcheck_api.domain.enums.tour import AuditAction, ReportStatus

pytestmark = pytest.mark.asyncio

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def _seed_reports(store: InMemoryTourStore) -> list[TourLegReport]:
    tour = store.add_tour(make_tour())
    leg_id = tour.legs[0].id
    statuses = [ReportStatus.PENDING, ReportStatus.APPROVED, ReportStatus.PENDING]
    return [
        store.add_report(
            TourLegReport(
                id=uuid.uuid4(),
                user_id=f"member-{i}",
                tour_leg_id=leg_id,
                status=status,
                submitted_at=T0 + timedelta(hours=i),
                review_note="Auto-validation failed: flight must be marked online.",
            )
        )
        for i, status in enumerate(statuses)
    ]


def _headers(secret: str, *, scope: str) -> dict[str, str]:
    token = jwt.encode({"sub": "staff-1", "scope": scope}, secret, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


async def test_list_is_paginated_newest_first(
    app_client: httpx.AsyncClient, store: InMemoryTourStore
) -> None:
    reports = _seed_reports(store)

    resp = await app_client.get("/v1/admin/tour-reports", params={"page": 1, "page_size": 2})

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 3
    assert body["page"] == 1
    assert body["page_size"] == 2
    assert [item["id"] for item in body["items"]] == [str(reports[2].id), str(reports[1].id)]


async def test_list_filters_by_status_case_insensitively(
    app_client: httpx.AsyncClient, store: InMemoryTourStore
) -> None:
    _seed_reports(store)

    resp = await app_client.get("/v1/admin/tour-reports", params={"status": "pending"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2
    assert {item["status"] for item in body["items"]} == {"PENDING"}


async def test_list_with_unknown_status_is_422(app_client: httpx.AsyncClient) -> None:
    resp = await app_client.get("/v1/admin/tour-reports", params={"status": "LOST"})

    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "INVALID_REVIEW_STATUS"


async def test_review_overrides_status_and_audits(
    app_client: httpx.AsyncClient, store: InMemoryTourStore
) -> None:
    target = _seed_reports(store)[0]

    resp = await app_client.post(
        f"/v1/admin/tour-reports/{target.id}/review",
        json={"status": "rejected", "note": "  Wrong aircraft  "},
    )

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "REJECTED"
    assert data["review_note"] == "Wrong aircraft"
    assert data["reviewed_by_id"] == "dev-user"
    assert data["reviewed_at"] is not None

    assert store.reports[target.id].status is ReportStatus.REJECTED
    assert [entry.action for entry in store.audit] == [AuditAction.UPDATE]


async def test_review_unknown_report_is_404(app_client: httpx.AsyncClient) -> None:
    resp = await app_client.post(
        f"/v1/admin/tour-reports/{uuid.uuid4()}/review", json={"status": "APPROVED"}
    )

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "TOUR_LEG_REPORT_NOT_FOUND"


async def test_review_with_invalid_status_is_422(
    app_client: httpx.AsyncClient, store: InMemoryTourStore
) -> None:
    target = _seed_reports(store)[0]

    resp = await app_client.post(
        f"/v1/admin/tour-reports/{target.id}/review", json={"status": "MAYBE"}
    )

    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "INVALID_REVIEW_STATUS"
    assert store.reports[target.id].status is ReportStatus.PENDING


async def test_admin_routes_require_reviewer_scope(
    app_client: httpx.AsyncClient, store: InMemoryTourStore, enable_auth: str
) -> None:
    _seed_reports(store)

    anonymous = await app_client.get("/v1/admin/tour-reports")
    member = await app_client.get(
        "/v1/admin/tour-reports", headers=_headers(enable_auth, scope="tours:read")
    )
    staff = await app_client.get(
        "/v1/admin/tour-reports", headers=_headers(enable_auth, scope="tours:read admin:tours")
    )

    assert anonymous.status_code == 401
    assert member.status_code == 403
    assert staff.status_code == 200
    assert staff.json()["total"] == 3
