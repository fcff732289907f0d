# src/tourcheck_api/application/services/audit_trail.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Best-effort audit trail (Application Service).

Purpose:
    Record before/after snapshots of entity writes as a second step after the
    primary write has been committed. The primary write succeeds
    unconditionally; the audit attempt runs in its own transaction and its
    failure is logged, counted and reported to the caller as ``False`` but
    never raised.

Layer:
    application/services
"""

from __future__ import annotations

import logging
from typing import Any

from tourcheck_api.application.interfaces.telemetry_port import NullTelemetry, TelemetryPort
from tourcheck_api.application.uow import UnitOfWork
from tourcheck_api.domain.entities.report import AuditEntry
from tourcheck_api.domain.enums.tour import AuditAction
from tourcheck_api.domain.interfaces.repositories.audit_log_repository import (
    AuditLogRepository,
)

logger = logging.getLogger(__name__)


class AuditTrail:
    """Writes audit entries in a transaction separate from the audited write."""

    def __init__(self, telemetry: TelemetryPort | None = None) -> None:
        self._telemetry = telemetry or NullTelemetry()

    async def record(
        self,
        tx: UnitOfWork,
        *,
        actor_id: str | None,
        entity_type: str,
        entity_id: str,
        before: dict[str, Any] | None,
        after: dict[str, Any] | None,
    ) -> bool:
        """Append one audit entry and commit it.

        The action is ``create`` when there is no before-image, else ``update``.

        Args:
            tx: Active unit of work; the audited write must already be committed.
            actor_id: Member or staff id performing the write.
            entity_type: Logical entity name.
            entity_id: Written entity identifier.
            before: Snapshot before the write, or ``None`` on creation.
            after: Snapshot after the write.

        Returns:
            True when the entry was persisted, False when the attempt failed.
        """
        entry = AuditEntry(
            actor_id=actor_id,
            action=AuditAction.CREATE if before is None else AuditAction.UPDATE,
            entity_type=entity_type,
            entity_id=entity_id,
            before=before,
            after=after,
        )
        try:
            repo: AuditLogRepository = tx.get_repository(AuditLogRepository)
            await repo.add(entry)
            await tx.commit()
        except Exception:  # noqa: BLE001
            logger.exception(
                "audit_trail.write_failed",
                extra={
                    "extra": {
                        "entity_type": entity_type,
                        "entity_id": entity_id,
                        "action": entry.action.value,
                    }
                },
            )
            await self._safe_rollback(tx)
            self._telemetry.record_audit_failure(entity_type)
            return False
        return True

    @staticmethod
    async def _safe_rollback(tx: UnitOfWork) -> None:
        try:
            await tx.rollback()
        except Exception:  # noqa: BLE001
            logger.exception("audit_trail.rollback_failed")
