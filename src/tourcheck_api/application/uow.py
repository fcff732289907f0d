# src/tourcheck_api/application/uow.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Unit of Work (Application Layer).

Purpose:
    Define the abstract Unit-of-Work boundary used by application-layer
    use cases to coordinate transactional work across one or more
    repositories.

    This module is infrastructure-agnostic:
        * No SQLAlchemy / DB / HTTP imports.
        * No concrete repository implementations.
        * Only the Protocol that use cases depend on.

    Concrete implementations (e.g., SQLAlchemy-backed UoW) live in the
    adapters/ layer and must satisfy this protocol.

Layer:
    application
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from types import TracebackType
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class UnitOfWork(Protocol, AbstractAsyncContextManager["UnitOfWork"]):
    """Abstract Unit-of-Work contract for application use cases.

    A unit of work may commit more than once; each commit closes one
    transaction and the next repository call opens a new one.
    """

    async def __aenter__(self) -> UnitOfWork:
        """Enter the transactional scope and return the active UoW."""
        raise NotImplementedError

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        """Exit the transactional scope."""
        raise NotImplementedError

    async def commit(self) -> None:
        """Commit all pending changes for this UnitOfWork."""
        raise NotImplementedError

    async def rollback(self) -> None:
        """Roll back any pending changes for this UnitOfWork."""
        raise NotImplementedError

    def get_repository(self, repo_type: type[Any]) -> Any:
        """Return a repository instance for the given key/type.

        Args:
            repo_type: Repository protocol (or concrete class) used as key.
        """
        raise NotImplementedError
