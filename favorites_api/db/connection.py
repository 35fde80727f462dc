from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from favorites_api.db.models import Base
from favorites_api.settings import AppSettings

logger = logging.getLogger(__name__)


def create_engine(settings: AppSettings) -> AsyncEngine:
    """Create the async engine backing the favorites store.

    Creating the engine does not touch the database file; the first connection
    is opened lazily, so building an application never has filesystem side
    effects.
    """

    engine = create_async_engine(
        settings.resolved_database_url,
        future=True,
        echo=False,
    )

    try:
        from favorites_api.monitoring import setup_query_monitoring

        setup_query_monitoring(
            engine, slow_query_threshold=settings.slow_query_threshold
        )
    except Exception as exc:  # pragma: no cover - monitoring is optional at runtime
        logger.warning("Failed to enable query monitoring: %s", exc)

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def create_tables(engine: AsyncEngine) -> None:
    """Create the favorites table when it does not exist yet."""

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def attach_storage(app: FastAPI, settings: AppSettings) -> None:
    """Bind a fresh engine and session factory to ``app.state``.

    Every application instance owns its storage handle; request handlers reach
    it through :func:`get_db` rather than through module globals.
    """

    engine = create_engine(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)


async def initialize_storage(app: FastAPI, settings: AppSettings) -> None:
    """Prepare the database file and table for the application's engine."""

    database_path = settings.database_path
    if database_path is not None:
        database_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Database located at: %s", database_path.resolve())

    await create_tables(app.state.engine)
    logger.info("Favorites table ready")


async def shutdown_storage(app: FastAPI) -> None:
    """Dispose of the application's engine and its pooled connections."""

    engine: AsyncEngine | None = getattr(app.state, "engine", None)
    if engine is None:
        return
    await engine.dispose()
    logger.info("Database connection closed")


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    Dependency to provide database session.

    The session comes from the factory bound to the serving application.
    Persistence helpers commit their own statements; anything left pending when
    a handler fails is rolled back here.
    """
    session_factory: async_sessionmaker[AsyncSession] = (
        request.app.state.session_factory
    )
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
