# tests/conftest.py
from __future__ import annotations

import os

# Must be set before any tourcheck_api import: models read DB_SCHEMA at import
# time and Settings requires a database URL.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["DB_SCHEMA"] = ""

from collections.abc import AsyncGenerator, Callable, Iterator  # noqa: E402
from contextlib import AbstractAsyncContextManager, asynccontextmanager  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402
from tours_testkit import FakeFlightDirectory, FakeUnitOfWork, InMemoryTourStore  # noqa: E402

from tourcheck_api.config.settings import get_settings  # noqa: E402
from tourcheck_api.dependencies.tours import get_flight_directory_gateway, get_uow  # noqa: E402
from tourcheck_api.infrastructure.database.models import audit as _audit  # noqa: E402,F401
from tourcheck_api.infrastructure.database.models import tours as _tours  # noqa: E402,F401
from tourcheck_api.infrastructure.database.models.base import Base  # noqa: E402
from tourcheck_api.main import create_app  # noqa: E402

JWT_SECRET = "test-secret-with-at-least-32-bytes!!"


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear the settings cache and auth env around each test."""
    monkeypatch.delenv("AUTH_ENABLED", raising=False)
    monkeypatch.delenv("AUTH_HS256_SECRET", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def enable_auth(monkeypatch: pytest.MonkeyPatch) -> str:
    """Turn on HS256 auth for the test and return the signing secret."""
    monkeypatch.setenv("AUTH_ENABLED", "true")
    monkeypatch.setenv("AUTH_HS256_SECRET", JWT_SECRET)
    get_settings.cache_clear()
    return JWT_SECRET


@pytest.fixture
def store() -> InMemoryTourStore:
    return InMemoryTourStore()


@pytest.fixture
def directory() -> FakeFlightDirectory:
    return FakeFlightDirectory()


@pytest.fixture
def app(store: InMemoryTourStore, directory: FakeFlightDirectory) -> FastAPI:
    """App with the unit of work and flight directory swapped for fakes."""
    app = create_app()
    app.dependency_overrides[get_uow] = lambda: FakeUnitOfWork(store)
    app.dependency_overrides[get_flight_directory_gateway] = lambda: directory
    return app


@asynccontextmanager
async def _client_for(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    client = httpx.AsyncClient(transport=transport, base_url="http://testserver")
    try:
        yield client
    finally:
        await client.aclose()


@pytest.fixture
def http_client_factory() -> Callable[[FastAPI], AbstractAsyncContextManager[httpx.AsyncClient]]:
    return _client_for


@pytest.fixture
async def app_client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Async HTTP client bound to the per-test FastAPI app."""
    async with _client_for(app) as client:
        yield client


@pytest.fixture
async def sqlite_sessionmaker() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Sessionmaker over a fresh in-memory SQLite schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
    finally:
        await engine.dispose()
