"""In-memory stand-in for the favorites API, served through ``httpx.MockTransport``."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio

from favorites_client.api import FavoritesApiClient
from favorites_client.storage import LocalFavoritesStore
from favorites_client.synchronizer import FavoritesSynchronizer

BASE_URL = "http://favorites.test/api"


class FakeFavoritesServer:
    """Implements the favorites endpoints against a plain list.

    ``offline`` makes every request fail at the transport level,
    ``fail_with`` answers every request with that status code and ``garbled``
    answers every request with a 200 whose body has none of the expected keys.
    """

    def __init__(self) -> None:
        self.favorites: list[dict[str, Any]] = []
        self.requests: list[tuple[str, str]] = []
        self.offline = False
        self.fail_with: int | None = None
        self.garbled = False
        self._next_row_id = 1

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.method, request.url.path))
        if self.offline:
            raise httpx.ConnectError("connection refused", request=request)
        if self.fail_with is not None:
            return httpx.Response(
                self.fail_with, json={"message": "Failed to fetch favorites"}
            )
        if self.garbled:
            return httpx.Response(200, json={"unexpected": True})

        path = request.url.path.removeprefix("/api")
        if path == "/health":
            return httpx.Response(
                200, json={"status": "OK", "timestamp": datetime.now(UTC).isoformat()}
            )
        if path == "/favorites/stats/count":
            return httpx.Response(200, json={"count": len(self.favorites)})
        if path == "/favorites":
            if request.method == "GET":
                return httpx.Response(200, json=list(reversed(self.favorites)))
            return self._add(json.loads(request.content))

        movie_id = int(path.rsplit("/", 1)[-1])
        if request.method == "DELETE":
            return self._remove(movie_id)
        return httpx.Response(200, json={"isFavorite": self._contains(movie_id)})

    def _contains(self, movie_id: int) -> bool:
        return any(movie["id"] == movie_id for movie in self.favorites)

    def _add(self, movie: dict[str, Any]) -> httpx.Response:
        if self._contains(movie["id"]):
            return httpx.Response(409, json={"message": "Movie already in favorites"})
        stored = {**movie, "added_at": datetime.now(UTC).isoformat()}
        self.favorites.append(stored)
        row_id = self._next_row_id
        self._next_row_id += 1
        return httpx.Response(
            201,
            json={"message": "Movie added to favorites", "id": row_id, "movie_id": movie["id"]},
        )

    def _remove(self, movie_id: int) -> httpx.Response:
        if not self._contains(movie_id):
            return httpx.Response(404, json={"message": "Movie not found in favorites"})
        self.favorites = [movie for movie in self.favorites if movie["id"] != movie_id]
        return httpx.Response(
            200, json={"message": "Movie removed from favorites", "movie_id": movie_id}
        )


@pytest.fixture
def fake_server() -> FakeFavoritesServer:
    return FakeFavoritesServer()


@pytest_asyncio.fixture
async def api_client(fake_server: FakeFavoritesServer) -> AsyncIterator[FavoritesApiClient]:
    http_client = httpx.AsyncClient(
        base_url=BASE_URL, transport=httpx.MockTransport(fake_server.handler)
    )
    async with http_client:
        yield FavoritesApiClient(client=http_client)


@pytest.fixture
def fallback_store(tmp_path: Path) -> LocalFavoritesStore:
    return LocalFavoritesStore(tmp_path / "fallback.json")


@pytest.fixture
def synchronizer(
    api_client: FavoritesApiClient, fallback_store: LocalFavoritesStore
) -> FavoritesSynchronizer:
    return FavoritesSynchronizer(api_client, fallback_store)
