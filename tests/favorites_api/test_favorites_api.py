"""End-to-end tests for the favorites endpoints over an ephemeral SQLite store."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from fastapi.testclient import TestClient

from favorites_api.errors import FavoritesStorageError
from favorites_api.services.favorites import FavoritesSerializer
from favorites_api.services.favorites_service import (
    FavoritesService,
    get_favorites_service,
)

MovieFactory = Callable[..., dict[str, Any]]


def _favorite_ids(client: TestClient) -> list[int]:
    response = client.get("/api/favorites")
    assert response.status_code == 200
    return [movie["id"] for movie in response.json()]


def test_add_check_count_remove_walkthrough(client: TestClient) -> None:
    """The documented request sequence behaves exactly as advertised."""

    created = client.post(
        "/api/favorites", json={"id": 42, "title": "X", "genre_ids": [1, 2]}
    )
    assert created.status_code == 201
    body = created.json()
    assert body["message"] == "Movie added to favorites"
    assert body["movie_id"] == 42
    assert isinstance(body["id"], int)

    assert client.get("/api/favorites/42").json() == {"isFavorite": True}
    assert client.get("/api/favorites/stats/count").json() == {"count": 1}

    removed = client.delete("/api/favorites/42")
    assert removed.status_code == 200
    assert removed.json() == {"message": "Movie removed from favorites", "movie_id": 42}

    assert client.get("/api/favorites/42").json() == {"isFavorite": False}


def test_list_round_trips_every_field(client: TestClient, make_movie: MovieFactory) -> None:
    movie = make_movie(603, genre_ids=[878, 28, 12])

    assert client.post("/api/favorites", json=movie).status_code == 201

    listed = client.get("/api/favorites").json()
    assert len(listed) == 1
    stored = listed[0]
    added_at = stored.pop("added_at")
    assert added_at
    assert stored == movie


def test_list_orders_most_recent_first(client: TestClient, make_movie: MovieFactory) -> None:
    for movie_id in (1, 2, 3):
        assert client.post("/api/favorites", json=make_movie(movie_id)).status_code == 201

    assert _favorite_ids(client) == [3, 2, 1]


def test_list_is_empty_on_fresh_store(client: TestClient) -> None:
    response = client.get("/api/favorites")

    assert response.status_code == 200
    assert response.json() == []


def test_missing_genres_are_listed_as_empty(client: TestClient) -> None:
    client.post("/api/favorites", json={"id": 7, "title": "No genres", "genre_ids": None})

    assert client.get("/api/favorites").json()[0]["genre_ids"] == []


def test_duplicate_add_returns_conflict_and_keeps_original(
    client: TestClient, make_movie: MovieFactory
) -> None:
    first = make_movie(42, title="Original title")
    second = make_movie(42, title="Replacement title")

    assert client.post("/api/favorites", json=first).status_code == 201
    conflict = client.post("/api/favorites", json=second)

    assert conflict.status_code == 409
    assert conflict.json()["error_type"] == "conflict"
    assert conflict.json()["message"] == "Movie already in favorites"
    listed = client.get("/api/favorites").json()
    assert [movie["title"] for movie in listed] == ["Original title"]
    assert client.get("/api/favorites/stats/count").json() == {"count": 1}


def test_add_ignores_client_supplied_timestamp(client: TestClient, make_movie: MovieFactory) -> None:
    movie = make_movie(9, added_at="1970-01-01T00:00:00")

    client.post("/api/favorites", json=movie)

    assert not client.get("/api/favorites").json()[0]["added_at"].startswith("1970")


def test_add_without_identity_is_rejected(client: TestClient) -> None:
    response = client.post("/api/favorites", json={"title": "Nameless"})

    assert response.status_code == 400
    payload = response.json()
    assert payload["error_type"] == "validation_error"
    assert payload["message"] == "Invalid movie data"
    assert any(error["field"] == "body.id" for error in payload["errors"])
    assert client.get("/api/favorites/stats/count").json() == {"count": 0}


def test_add_with_zero_identity_is_rejected(client: TestClient) -> None:
    response = client.post("/api/favorites", json={"id": 0, "title": "Zero"})

    assert response.status_code == 400


def test_add_without_title_is_rejected(client: TestClient) -> None:
    response = client.post("/api/favorites", json={"id": 5})

    assert response.status_code == 400
    assert any(error["field"] == "body.title" for error in response.json()["errors"])


@pytest.mark.parametrize(
    "overrides",
    [
        {"id": 2**64},
        {"id": True},
        {"id": "42"},
        {"id": 4.0},
        {"vote_count": 2**64},
    ],
)
def test_add_with_unstorable_values_is_rejected(
    client: TestClient, make_movie: MovieFactory, overrides: dict[str, Any]
) -> None:
    response = client.post("/api/favorites", json=make_movie(**overrides))

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid movie data"
    assert client.get("/api/favorites/stats/count").json() == {"count": 0}


def test_add_accepts_largest_storable_identity(client: TestClient) -> None:
    largest = 2**63 - 1

    created = client.post("/api/favorites", json={"id": largest, "title": "Edge"})

    assert created.status_code == 201
    assert client.get(f"/api/favorites/{largest}").json() == {"isFavorite": True}


def test_add_with_empty_body_is_rejected(client: TestClient) -> None:
    response = client.post("/api/favorites")

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid movie data"


def test_delete_unknown_identity_returns_not_found(
    client: TestClient, make_movie: MovieFactory
) -> None:
    client.post("/api/favorites", json=make_movie(1))

    response = client.delete("/api/favorites/999")

    assert response.status_code == 404
    assert response.json()["error_type"] == "not_found"
    assert response.json()["message"] == "Movie not found in favorites"
    assert _favorite_ids(client) == [1]


def test_delete_removes_exactly_one_row(client: TestClient, make_movie: MovieFactory) -> None:
    for movie_id in (10, 20, 30):
        client.post("/api/favorites", json=make_movie(movie_id))

    response = client.delete("/api/favorites/20")

    assert response.status_code == 200
    assert _favorite_ids(client) == [30, 10]
    assert client.get("/api/favorites/stats/count").json() == {"count": 2}


def test_invalid_identity_in_path_is_rejected(client: TestClient) -> None:
    for method, path in (
        ("GET", "/api/favorites/abc"),
        ("GET", "/api/favorites/0"),
        ("DELETE", "/api/favorites/abc"),
        ("DELETE", "/api/favorites/-3"),
        ("GET", f"/api/favorites/{2**64}"),
        ("DELETE", f"/api/favorites/{2**64}"),
    ):
        response = client.request(method, path)
        assert response.status_code == 400, (method, path)
        assert response.json()["message"] == "Invalid movie ID"


def test_check_never_added_identity_is_false(client: TestClient) -> None:
    response = client.get("/api/favorites/12345")

    assert response.status_code == 200
    assert response.json() == {"isFavorite": False}


def test_health_reports_ok_with_timestamp(client: TestClient) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "OK"
    assert payload["timestamp"]


def test_responses_carry_request_id(client: TestClient) -> None:
    response = client.get("/api/favorites/stats/count")

    assert response.headers["X-Request-ID"]


def test_caller_request_id_is_echoed_into_errors(client: TestClient) -> None:
    response = client.delete(
        "/api/favorites/31", headers={"X-Request-ID": "cli-run-7"}
    )

    assert response.status_code == 404
    assert response.headers["X-Request-ID"] == "cli-run-7"
    assert response.json()["request_id"] == "cli-run-7"


class _BrokenPersistence:
    """Persistence double whose every statement fails like a locked database."""

    async def list_favorites(self):
        raise FavoritesStorageError("Failed to fetch favorites")

    async def count_favorites(self):
        raise FavoritesStorageError("Failed to get favorites count")


def test_storage_failures_are_opaque_server_errors(client: TestClient) -> None:
    service = FavoritesService(
        persistence=_BrokenPersistence(),  # type: ignore[arg-type]
        serializer=FavoritesSerializer(),
    )
    client.app.dependency_overrides[get_favorites_service] = lambda: service

    listed = client.get("/api/favorites")
    counted = client.get("/api/favorites/stats/count")

    assert listed.status_code == 500
    assert listed.json()["message"] == "Failed to fetch favorites"
    assert listed.json()["error_type"] == "database_error"
    assert counted.status_code == 500
    assert counted.json()["message"] == "Failed to get favorites count"
