"""Database-oriented helpers for the favorites table."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from favorites_api.db.models import FavoriteMovie as FavoriteMovieModel
from favorites_api.errors import FavoriteConflictError, FavoritesStorageError

logger = logging.getLogger(__name__)


def _is_unique_violation(exc: IntegrityError) -> bool:
    """Return ``True`` when ``exc`` was raised by the ``movie_id`` constraint."""

    message = str(exc.orig).lower()
    return "unique" in message and "movie_id" in message


class FavoritesPersistence:
    """Encapsulates the SQLAlchemy statements used by the favorites domain.

    Every public method issues a single statement and commits it immediately.
    Driver errors are logged here and re-raised as
    :class:`FavoritesStorageError` carrying a caller-safe message.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_favorites(self) -> Sequence[FavoriteMovieModel]:
        """Return every row, most recently added first."""

        query = select(FavoriteMovieModel).order_by(
            FavoriteMovieModel.added_at.desc(),
            FavoriteMovieModel.id.desc(),
        )
        try:
            result = await self._session.execute(query)
        except SQLAlchemyError as exc:
            logger.error("Error fetching favorites: %s", exc)
            raise FavoritesStorageError("Failed to fetch favorites") from exc
        return result.scalars().all()

    async def insert_favorite(self, row: FavoriteMovieModel) -> FavoriteMovieModel:
        """Insert ``row``; a duplicate ``movie_id`` raises a conflict."""

        movie_id = row.movie_id
        self._session.add(row)
        try:
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            if _is_unique_violation(exc):
                raise FavoriteConflictError(movie_id) from exc
            logger.error("Error adding to favorites: %s", exc)
            raise FavoritesStorageError("Failed to add to favorites") from exc
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.error("Error adding to favorites: %s", exc)
            raise FavoritesStorageError("Failed to add to favorites") from exc
        return row

    async def delete_favorite(self, movie_id: int) -> int:
        """Delete rows matching ``movie_id`` and return how many were removed."""

        statement = delete(FavoriteMovieModel).where(
            FavoriteMovieModel.movie_id == movie_id
        )
        try:
            result = await self._session.execute(statement)
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.error("Error removing from favorites: %s", exc)
            raise FavoritesStorageError("Failed to remove from favorites") from exc
        return result.rowcount or 0

    async def favorite_exists(self, movie_id: int) -> bool:
        query = (
            select(func.count())
            .select_from(FavoriteMovieModel)
            .where(FavoriteMovieModel.movie_id == movie_id)
        )
        try:
            matches = (await self._session.execute(query)).scalar_one()
        except SQLAlchemyError as exc:
            logger.error("Error checking favorite status: %s", exc)
            raise FavoritesStorageError("Failed to check favorite status") from exc
        return matches > 0

    async def count_favorites(self) -> int:
        query = select(func.count()).select_from(FavoriteMovieModel)
        try:
            return (await self._session.execute(query)).scalar_one()
        except SQLAlchemyError as exc:
            logger.error("Error getting favorites count: %s", exc)
            raise FavoritesStorageError("Failed to get favorites count") from exc
