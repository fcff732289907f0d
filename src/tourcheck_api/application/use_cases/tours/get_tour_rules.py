# src/tourcheck_api/application/use_cases/tours/get_tour_rules.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Use case: Member-facing view of a tour's public rules."""

from __future__ import annotations

from tourcheck_api.application.schemas.dto.tours import PublicRuleDTO, TourRulesDTO
from tourcheck_api.application.uow import UnitOfWork
from tourcheck_api.domain.exceptions.tour import TourNotFound
from tourcheck_api.domain.interfaces.repositories.tours_repository import ToursRepository
from tourcheck_api.domain.services.rule_model import parse_rules, public_label, public_rules


class GetTourRulesUseCase:
    """Return the rules members may see, with their display labels."""

    def __init__(self, *, uow: UnitOfWork) -> None:
        """Initialize the use case."""
        self._uow = uow

    async def execute(self, slug: str) -> TourRulesDTO:
        """Resolve a published tour by slug and list its public rules.

        Raises:
            TourNotFound: Unknown or unpublished tour.
        """
        async with self._uow as tx:
            tours: ToursRepository = tx.get_repository(ToursRepository)
            tour = await tours.get_tour_by_slug(slug)
        if tour is None or not tour.is_published:
            raise TourNotFound("Tour not found", details={"slug": slug})

        visible = public_rules(
            parse_rules(tour.validation_rules), allow_any_aircraft=tour.allow_any_aircraft
        )
        return TourRulesDTO(
            tour_id=tour.id,
            slug=tour.slug,
            title=tour.title,
            allow_any_aircraft=tour.allow_any_aircraft,
            rules=[PublicRuleDTO(key=r.key or "", label=public_label(r)) for r in visible],
        )
