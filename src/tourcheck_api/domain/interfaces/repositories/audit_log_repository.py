# src/tourcheck_api/domain/interfaces/repositories/audit_log_repository.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Domain-facing interface for the audit log."""

from __future__ import annotations

from typing import Protocol

from tourcheck_api.domain.entities.report import AuditEntry


class AuditLogRepository(Protocol):
    """Append-only audit log."""

    async def add(self, entry: AuditEntry) -> None:
        """Append one entry.

        Raises:
            Exception: Any persistence failure; callers decide whether it is
                fatal.
        """
        raise NotImplementedError
