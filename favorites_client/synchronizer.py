"""Client-side favorites state kept in sync with the favorites API.

The synchronizer owns a single in-memory list.  Every mutation of that list is
followed by :meth:`FavoritesSynchronizer.mirror_to_fallback`, which writes the
whole list to the local fallback store so the client can keep working from
that copy while the API is unreachable.

Mutations are optimistic: when the API rejects or never receives an add or a
remove, the local list is still updated.  Local and server state can therefore
diverge until the next successful :meth:`fetch_favorites`; nothing reconciles
them automatically.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from favorites_client.api import FavoritesApiClient
from favorites_client.errors import ApiResponseError, NetworkError
from favorites_client.storage import LocalFavoritesStore

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load favorites"
ADD_ERROR = "Failed to add to favorites"
REMOVE_ERROR = "Failed to remove from favorites"


def _client_timestamp() -> str:
    return datetime.now(UTC).isoformat()


class FavoritesSynchronizer:
    """In-client cache of the favorites list with a local degraded-mode copy."""

    def __init__(self, api: FavoritesApiClient, store: LocalFavoritesStore) -> None:
        self._api = api
        self._store = store
        self.favorites: list[dict[str, Any]] = []
        self.loading = False
        self.error: str | None = None

    async def initialize(self) -> None:
        """Populate the in-memory list when the client starts."""

        await self.fetch_favorites()

    async def fetch_favorites(self) -> None:
        """Replace local state with the server list, or the fallback copy on failure."""

        self.loading = True
        self.error = None
        try:
            self.favorites = await self._api.list_favorites()
        except NetworkError as exc:
            logger.error("Error fetching favorites: %s", exc)
            self.error = LOAD_ERROR
            stored = self._store.load_favorites()
            if stored is not None:
                logger.warning("Serving %d favorites from the fallback store", len(stored))
                self.favorites = stored
        finally:
            self.loading = False

    async def add_to_favorites(self, movie: Mapping[str, Any]) -> None:
        try:
            await self._api.add_favorite(movie)
        except ApiResponseError as exc:
            if exc.status_code == 409:
                # Already stored server-side.
                return
            logger.error("Error adding to favorites: %s", exc)
            self.error = ADD_ERROR
        except NetworkError as exc:
            logger.error("Error adding to favorites: %s", exc)
            self.error = ADD_ERROR

        if self.is_favorite(movie.get("id")):
            return
        self.favorites = [*self.favorites, {**movie, "added_at": _client_timestamp()}]
        self.mirror_to_fallback()

    async def remove_from_favorites(self, movie_id: int) -> None:
        try:
            await self._api.remove_favorite(movie_id)
        except NetworkError as exc:
            logger.error("Error removing from favorites: %s", exc)
            self.error = REMOVE_ERROR

        self.favorites = [movie for movie in self.favorites if movie.get("id") != movie_id]
        self.mirror_to_fallback()

    def is_favorite(self, movie_id: int) -> bool:
        """Membership according to locally known state only."""

        return any(movie.get("id") == movie_id for movie in self.favorites)

    async def check_is_favorite(self, movie_id: int) -> bool:
        try:
            return await self._api.check_favorite(movie_id)
        except NetworkError as exc:
            logger.warning("Error checking favorite status: %s", exc)
            return self.is_favorite(movie_id)

    async def get_favorites_count(self) -> int:
        try:
            return await self._api.count_favorites()
        except NetworkError as exc:
            logger.warning("Error getting favorites count: %s", exc)
            return len(self.favorites)

    def clear_error(self) -> None:
        self.error = None

    def mirror_to_fallback(self) -> None:
        """Write the full in-memory list to the fallback store."""

        try:
            self._store.save_favorites(self.favorites)
        except OSError as exc:
            logger.error("Could not update fallback store %s: %s", self._store.path, exc)
