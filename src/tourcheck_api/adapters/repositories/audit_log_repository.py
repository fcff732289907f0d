# src/tourcheck_api/adapters/repositories/audit_log_repository.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Audit Log Repository (SQLAlchemy).

Append-only; satisfies ``AuditLogRepository`` via structural typing.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from tourcheck_api.adapters.repositories.base_repository import BaseRepository
from tourcheck_api.domain.entities.report import AuditEntry
from tourcheck_api.infrastructure.database.models.audit import AuditLogModel


class SqlAlchemyAuditLogRepository(BaseRepository[AuditLogModel]):
    """Writes audit entries to ``audit_logs``."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session bound to the primary database.
        """
        super().__init__(session=session)

    async def add(self, entry: AuditEntry) -> None:
        """Append one entry and flush it."""
        self._session.add(
            AuditLogModel(
                actor_id=entry.actor_id,
                action=entry.action.value,
                entity_type=entry.entity_type,
                entity_id=entry.entity_id,
                before=entry.before,
                after=entry.after,
                created_at=self.utc_now(),
            )
        )
        await self._session.flush()
