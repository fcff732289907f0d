from __future__ import annotations

import pytest
from tours_testkit import FakeUnitOfWork, InMemoryTourStore

from tourcheck_api.application.services.audit_trail import AuditTrail
from tourcheck_api.domain.enums.tour import AuditAction


class RecordingTelemetry:
    def __init__(self) -> None:
        self.audit_failures: list[str] = []

    def record_verdict(self, status: str, source: str | None) -> None:
        pass

    def record_audit_failure(self, entity_type: str) -> None:
        self.audit_failures.append(entity_type)


@pytest.mark.asyncio
async def test_record_creates_entry_and_commits() -> None:
    store = InMemoryTourStore()
    uow = FakeUnitOfWork(store)

    async with uow as tx:
        ok = await AuditTrail().record(
            tx,
            actor_id="u-1",
            entity_type="tourLegReport",
            entity_id="r-1",
            before=None,
            after={"status": "PENDING"},
        )

    assert ok is True
    assert store.commits == 1
    [entry] = store.audit
    assert entry.action is AuditAction.CREATE
    assert entry.after == {"status": "PENDING"}


@pytest.mark.asyncio
async def test_before_image_marks_update() -> None:
    store = InMemoryTourStore()

    async with FakeUnitOfWork(store) as tx:
        await AuditTrail().record(
            tx,
            actor_id="u-1",
            entity_type="tourLegReport",
            entity_id="r-1",
            before={"status": "PENDING"},
            after={"status": "APPROVED"},
        )

    assert store.audit[0].action is AuditAction.UPDATE


@pytest.mark.asyncio
async def test_failure_is_swallowed_and_rolled_back() -> None:
    store = InMemoryTourStore(fail_audit=True)
    telemetry = RecordingTelemetry()

    async with FakeUnitOfWork(store) as tx:
        ok = await AuditTrail(telemetry).record(
            tx,
            actor_id="u-1",
            entity_type="tourEnrollment",
            entity_id="e-1",
            before=None,
            after={},
        )

    assert ok is False
    assert store.audit == []
    assert store.commits == 0
    assert store.rollbacks == 1
    assert telemetry.audit_failures == ["tourEnrollment"]
