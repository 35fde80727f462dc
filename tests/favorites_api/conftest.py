"""Shared fixtures giving every test its own ephemeral favorites store."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from favorites_api.db.models import Base
from favorites_api.main import create_app
from favorites_api.settings import AppSettings


@pytest.fixture
def app_settings(tmp_path: Path) -> AppSettings:
    """Settings pointing at a throwaway SQLite file inside ``tmp_path``."""

    return AppSettings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'favorites.db'}",
        CORS_ALLOW_ORIGINS="http://localhost:5173",
    )


@pytest.fixture
def app(app_settings: AppSettings) -> FastAPI:
    return create_app(app_settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """``TestClient`` running the full lifespan, so the table is created on entry."""

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def session(tmp_path: Path) -> AsyncIterator[AsyncSession]:
    """Provide a SQLite session with freshly created tables for service-level tests."""
    pytest.importorskip("aiosqlite")
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'service.db'}", future=True
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async_session = async_sessionmaker(engine, expire_on_commit=False)
    async with async_session() as db_session:
        yield db_session
        if db_session.in_transaction():
            await db_session.rollback()
    await engine.dispose()
