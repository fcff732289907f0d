# src/tourcheck_api/adapters/uow/sqlalchemy_uow.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""SQLAlchemy-backed Unit of Work implementation.

Purpose:
    Provide a concrete implementation of the application-layer UnitOfWork
    protocol using SQLAlchemy's AsyncSession. This UoW coordinates one or
    more repository instances within a single session scope.

Layer:
    adapters/uow

Notes:
    A scope may commit several times (primary write, then audit entry).
    After a commit the session autobegins a fresh transaction on the next
    statement, and ``rollback`` only discards work since the last commit.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import TracebackType
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tourcheck_api.adapters.repositories.audit_log_repository import (
    SqlAlchemyAuditLogRepository,
)
from tourcheck_api.adapters.repositories.tour_leg_reports_repository import (
    SqlAlchemyTourLegReportsRepository,
)
from tourcheck_api.adapters.repositories.tours_repository import SqlAlchemyToursRepository
from tourcheck_api.application.uow import UnitOfWork
from tourcheck_api.domain.interfaces.repositories.audit_log_repository import (
    AuditLogRepository,
)
from tourcheck_api.domain.interfaces.repositories.tour_leg_reports_repository import (
    TourLegReportsRepository,
)
from tourcheck_api.domain.interfaces.repositories.tours_repository import (
    TourEnrollmentsRepository,
    ToursRepository,
)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy-based UnitOfWork implementation.

    Coordinates a single AsyncSession and a set of repositories. Intended to
    be used via:

        async with SqlAlchemyUnitOfWork(...) as uow:
            repo = uow.get_repository(ToursRepository)
            ...
            await uow.commit()

    The instance is reusable: each ``async with`` opens a new session.
    """

    def __init__(
        self,
        *,
        session_factory: async_sessionmaker[AsyncSession],
        repo_factories: Mapping[type[Any], Callable[[AsyncSession], Any]] | None = None,
    ) -> None:
        """Initialize the UnitOfWork.

        Args:
            session_factory:
                Factory for creating new AsyncSession instances.
            repo_factories:
                Optional mapping from repository type to a factory function
                taking an AsyncSession and returning a repository instance.
                Defaults are provided for all domain repository protocols.
        """
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

        # Tours and enrollments share one implementation; each key resolves
        # to its own instance bound to the same session.
        default_factories: dict[type[Any], Callable[[AsyncSession], Any]] = {
            ToursRepository: lambda s: SqlAlchemyToursRepository(session=s),
            TourEnrollmentsRepository: lambda s: SqlAlchemyToursRepository(session=s),
            TourLegReportsRepository: lambda s: SqlAlchemyTourLegReportsRepository(session=s),
            AuditLogRepository: lambda s: SqlAlchemyAuditLogRepository(session=s),
        }

        self._repo_factories: dict[type[Any], Callable[[AsyncSession], Any]] = {
            **default_factories,
            **(dict(repo_factories) if repo_factories is not None else {}),
        }

        self._repos: dict[type[Any], Any] = {}

    # ------------------------------------------------------------------
    # Async context manager
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        """Enter the UnitOfWork context and open a new AsyncSession.

        Raises:
            RuntimeError: If a session is already active (nested usage).
        """
        if self._session is not None:
            raise RuntimeError("UnitOfWork is already active; nested usage is not supported.")

        self._session = self._session_factory()
        self._repos.clear()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        """Exit the UnitOfWork context.

        Behavior:
            * If an exception occurred, rolls back uncommitted work.
            * Closes the AsyncSession and clears cached repositories.

        Returns:
            Always returns None; exceptions are propagated.
        """
        try:
            if exc_type is not None:
                await self.rollback()
        finally:
            if self._session is not None:
                await self._session.close()
                self._session = None
            self._repos.clear()
        return None

    # ------------------------------------------------------------------
    # Transaction control
    # ------------------------------------------------------------------

    async def commit(self) -> None:
        """Commit the current transaction.

        Raises:
            RuntimeError: If called without an active session.
        """
        if self._session is None:
            raise RuntimeError("Cannot commit: UnitOfWork has no active session.")
        await self._session.commit()

    async def rollback(self) -> None:
        """Roll back work since the last commit; no-op without a session."""
        if self._session is None:
            return
        await self._session.rollback()

    # ------------------------------------------------------------------
    # Repository resolution
    # ------------------------------------------------------------------

    def get_repository(self, repo_type: type[Any]) -> Any:
        """Return a repository instance for the given type.

        The instance is created via a configured factory on first request
        and cached for subsequent calls within the same UnitOfWork context.

        Args:
            repo_type: Repository protocol or concrete class used as key.

        Returns:
            A repository instance bound to the active AsyncSession.

        Raises:
            RuntimeError: If called outside of an active UnitOfWork context.
            KeyError: If no factory is registered for the given repo_type.
        """
        if self._session is None:
            raise RuntimeError(
                "get_repository() called outside of an active UnitOfWork scope. "
                "Use 'async with uow:' before requesting repositories.",
            )

        if repo_type in self._repos:
            return self._repos[repo_type]

        try:
            factory = self._repo_factories[repo_type]
        except KeyError as exc:
            raise KeyError(
                f"No repository factory registered for type {repo_type!r}.",
            ) from exc

        repo = factory(self._session)
        self._repos[repo_type] = repo
        return repo
