from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from meal_allowance.db import create_session_factory
from meal_allowance.main import app
from meal_allowance.models import SQLModel
from meal_allowance.services.loader import set_data_loader
from meal_allowance.services.repository import InMemoryRepository, SqlRepository, set_repository

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture(autouse=True)
def repository() -> Iterator[InMemoryRepository]:
    """Install a fresh in-memory store and an empty loader cache for every test."""
    repo = InMemoryRepository()
    set_repository(repo)
    set_data_loader(None)
    yield repo
    set_repository(InMemoryRepository())
    set_data_loader(None)


@pytest.fixture
async def async_client() -> AsyncIterator[AsyncClient]:
    """Async HTTP client bound to the application over the in-memory store."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def sqlite_engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def sql_repository(sqlite_engine: AsyncEngine) -> SqlRepository:
    """SQL store over the SQLite engine."""
    return SqlRepository(create_session_factory(sqlite_engine))
