from __future__ import annotations

import uuid

import pytest
from tours_testkit import FIXED_NOW, FakeUnitOfWork, InMemoryTourStore, fixed_clock, make_tour

from tourcheck_api.application.use_cases.tours.join_tour import JoinTourUseCase
from tourcheck_api.domain.enums.tour import AuditAction
from tourcheck_api.domain.exceptions.tour import TourNotFound


@pytest.mark.asyncio
async def test_join_creates_enrollment_once() -> None:
    store = InMemoryTourStore()
    tour = store.add_tour(make_tour())
    uc = JoinTourUseCase(uow=FakeUnitOfWork(store), clock=fixed_clock)

    first = await uc.execute(user_id="member-1", tour_id=tour.id)
    second = await uc.execute(user_id="member-1", tour_id=tour.id)

    assert first.created is True
    assert first.accepted_at == FIXED_NOW
    assert first.status == "ACTIVE"
    assert second.created is False
    assert second.id == first.id
    assert [e.action for e in store.audit] == [AuditAction.CREATE, AuditAction.UPDATE]


@pytest.mark.asyncio
async def test_join_unpublished_or_unknown_tour_raises() -> None:
    store = InMemoryTourStore()
    hidden = store.add_tour(make_tour(is_published=False))
    uc = JoinTourUseCase(uow=FakeUnitOfWork(store))

    with pytest.raises(TourNotFound):
        await uc.execute(user_id="member-1", tour_id=hidden.id)
    with pytest.raises(TourNotFound):
        await uc.execute(user_id="member-1", tour_id=uuid.uuid4())

    assert store.enrollments == {}
