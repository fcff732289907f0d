from __future__ import annotations

import pytest
from tours_testkit import FakeUnitOfWork, InMemoryTourStore, make_tour

from tourcheck_api.application.use_cases.tours.get_tour_rules import GetTourRulesUseCase
from tourcheck_api.domain.exceptions.tour import TourNotFound

RULES = [
    {"key": "aircraft", "value": "A320,A321", "public": True},
    {"key": "maxSpeed", "value": "450", "public": True, "publicLabel": "Keep it under 450 kt"},
    {"key": "remarks", "value": "RZO TOUR"},
    {"key": "military", "value": "forbidden", "public": True},
]


@pytest.mark.asyncio
async def test_public_rules_with_labels() -> None:
    store = InMemoryTourStore()
    store.add_tour(make_tour(rules=RULES))

    dto = await GetTourRulesUseCase(uow=FakeUnitOfWork(store)).execute("portugal-tour")

    assert [(r.key, r.label) for r in dto.rules] == [
        ("aircraft", "Allowed aircraft: A320,A321"),
        ("maxSpeed", "Keep it under 450 kt"),
        ("military", "Military flights not allowed"),
    ]


@pytest.mark.asyncio
async def test_aircraft_rule_hidden_when_any_aircraft_allowed() -> None:
    store = InMemoryTourStore()
    store.add_tour(make_tour(rules=RULES, allow_any_aircraft=True))

    dto = await GetTourRulesUseCase(uow=FakeUnitOfWork(store)).execute("portugal-tour")

    assert dto.allow_any_aircraft is True
    assert [r.key for r in dto.rules] == ["maxSpeed", "military"]


@pytest.mark.asyncio
async def test_malformed_rules_yield_empty_list() -> None:
    store = InMemoryTourStore()
    store.add_tour(make_tour(rules="{not json"))

    dto = await GetTourRulesUseCase(uow=FakeUnitOfWork(store)).execute("portugal-tour")

    assert dto.rules == []


@pytest.mark.asyncio
async def test_unknown_or_unpublished_tour_raises() -> None:
    store = InMemoryTourStore()
    store.add_tour(make_tour(is_published=False, slug="hidden"))
    uc = GetTourRulesUseCase(uow=FakeUnitOfWork(store))

    with pytest.raises(TourNotFound):
        await uc.execute("hidden")
    with pytest.raises(TourNotFound):
        await uc.execute("missing")
