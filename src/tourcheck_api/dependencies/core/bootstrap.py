# src/tourcheck_api/dependencies/core/bootstrap.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Core bootstrap for infrastructure (DB, HTTP, flight directory client).

This module owns the lifecycle of shared infrastructure used by the FastAPI app.
It is intentionally thin: configuration is read from Settings, and all heavy
lifting is delegated to the infrastructure modules.

The single public surface is :func:`bootstrap`, an async context manager that
yields a simple state object with the resolved Settings, the shared HTTP
client and the process-wide IVAO client (one circuit breaker per process).
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx
from fastapi import FastAPI

from tourcheck_api.config.settings import Settings, get_settings
from tourcheck_api.infrastructure.external_apis.ivao.client import IvaoClient
from tourcheck_api.infrastructure.external_apis.ivao.settings import IvaoSettings
from tourcheck_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


@dataclass
class BootstrapState:
    """State yielded by the bootstrap context manager."""

    settings: Settings
    http_client: httpx.AsyncClient
    ivao_client: IvaoClient


@asynccontextmanager
async def bootstrap(app: FastAPI) -> AsyncGenerator[BootstrapState, None]:
    """Initialize and teardown shared infrastructure.

    Responsibilities:
        * Load application settings.
        * Initialize DB engine/sessionmaker.
        * Create a shared HTTPX AsyncClient and the IVAO client on top of it.
        * Ensure all of the above are shut down on exit, even on error.

    Args:
        app: FastAPI application instance (unused today).

    Yields:
        BootstrapState: Resolved settings and shared clients.
    """
    settings: Settings = get_settings()
    logger.info("bootstrap.start")

    # Imported here so tests can monkeypatch its functions.
    import tourcheck_api.infrastructure.database.session as db_session

    db_session.init_engine_and_sessionmaker(settings)

    ivao_settings = IvaoSettings.from_app_settings(settings)
    http_client = httpx.AsyncClient(timeout=ivao_settings.timeout_s)
    ivao_client = IvaoClient(ivao_settings, http=http_client)

    state = BootstrapState(settings=settings, http_client=http_client, ivao_client=ivao_client)

    try:
        yield state
    finally:
        try:
            await http_client.aclose()
        except Exception:
            logger.exception("bootstrap.http_client_close_failed")

        # Tests patch db_session.dispose_engine.
        try:
            await db_session.dispose_engine()
        except Exception:
            logger.exception("bootstrap.db_dispose_failed")

        logger.info("bootstrap.stop")
