"""Business logic powering the favorites API endpoints.

Persistence-oriented operations delegated to :class:`FavoritesPersistence`:
* ``list_favorites`` – full table scan ordered newest first.
* ``insert_favorite`` – single insert guarded by the ``movie_id`` constraint.
* ``delete_favorite`` – delete by identity, reporting the affected row count.
* ``favorite_exists``/``count_favorites`` – aggregate lookups.

Schema conversions handled by :class:`FavoritesSerializer`:
* ``to_model`` – payload to ORM row, encoding ``genre_ids``.
* ``to_schema``/``to_schemas`` – ORM rows back to API schemas.

:class:`FavoritesService` only coordinates the two and turns "nothing was
deleted" into a not-found error.
"""

from __future__ import annotations

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from favorites_api.db.connection import get_db
from favorites_api.errors import FavoriteNotFoundError
from favorites_api.schemas.favorites import (
    FavoriteCount,
    FavoriteCreated,
    FavoriteMovie,
    FavoriteMovieCreate,
    FavoriteRemoved,
    FavoriteStatus,
)
from favorites_api.services.favorites import (
    FavoritesPersistence,
    FavoritesSerializer,
)

logger = logging.getLogger(__name__)


class FavoritesService:
    """Orchestrates persistence and serialization for the favorites list."""

    def __init__(
        self,
        *,
        persistence: FavoritesPersistence,
        serializer: FavoritesSerializer,
    ) -> None:
        self._persistence = persistence
        self._serializer = serializer

    async def list_favorites(self) -> list[FavoriteMovie]:
        rows = await self._persistence.list_favorites()
        return self._serializer.to_schemas(rows)

    async def add_favorite(self, payload: FavoriteMovieCreate) -> FavoriteCreated:
        row = self._serializer.to_model(payload)
        saved = await self._persistence.insert_favorite(row)
        logger.info("Added movie %s to favorites", payload.id)
        return FavoriteCreated(id=saved.id, movie_id=payload.id)

    async def remove_favorite(self, movie_id: int) -> FavoriteRemoved:
        removed = await self._persistence.delete_favorite(movie_id)
        if removed == 0:
            raise FavoriteNotFoundError(movie_id)
        logger.info("Removed movie %s from favorites", movie_id)
        return FavoriteRemoved(movie_id=movie_id)

    async def is_favorite(self, movie_id: int) -> FavoriteStatus:
        exists = await self._persistence.favorite_exists(movie_id)
        return FavoriteStatus(is_favorite=exists)

    async def count_favorites(self) -> FavoriteCount:
        return FavoriteCount(count=await self._persistence.count_favorites())


async def get_favorites_service(
    session: AsyncSession = Depends(get_db),
) -> FavoritesService:
    """FastAPI dependency that wires the service to the request's session."""

    return FavoritesService(
        persistence=FavoritesPersistence(session),
        serializer=FavoritesSerializer(),
    )
