"""Domain exceptions raised by the favorites service layer.

Each exception also derives from the builtin that best describes it so callers
that only care about the broad category (``LookupError`` for a missing row,
``ValueError`` for a rejected write) can keep catching the builtin.
"""

from __future__ import annotations

__all__ = [
    "FavoriteConflictError",
    "FavoriteNotFoundError",
    "FavoritesError",
    "FavoritesStorageError",
]


class FavoritesError(Exception):
    """Base class for favorites failures surfaced to API callers."""


class FavoriteConflictError(FavoritesError, ValueError):
    """The movie identity is already present in the favorites table."""

    def __init__(self, movie_id: int, message: str = "Movie already in favorites") -> None:
        super().__init__(message)
        self.movie_id = movie_id


class FavoriteNotFoundError(FavoritesError, LookupError):
    """No favorite row matches the requested movie identity."""

    def __init__(
        self, movie_id: int, message: str = "Movie not found in favorites"
    ) -> None:
        super().__init__(message)
        self.movie_id = movie_id


class FavoritesStorageError(FavoritesError, RuntimeError):
    """Opaque persistence failure; the message is safe to show to callers."""
