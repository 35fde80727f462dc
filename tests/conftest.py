"""Pytest configuration shared by the API and client test packages."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from tests import _ensure_repo_on_path


def pytest_configure(config: pytest.Config) -> None:
    """Hook executed by pytest prior to running any tests."""

    _ensure_repo_on_path()


@pytest.fixture
def make_movie() -> Callable[..., dict[str, Any]]:
    """Factory for movie records shaped like the movie-metadata source's payloads."""

    def _make_movie(movie_id: int = 42, **overrides: Any) -> dict[str, Any]:
        movie: dict[str, Any] = {
            "id": movie_id,
            "title": f"Movie {movie_id}",
            "poster_path": f"/posters/{movie_id}.jpg",
            "release_date": "1999-03-31",
            "overview": "A hacker learns the truth about his reality.",
            "vote_average": 8.2,
            "vote_count": 24000,
            "genre_ids": [28, 878],
            "original_language": "en",
            "popularity": 83.125,
            "backdrop_path": f"/backdrops/{movie_id}.jpg",
            "adult": False,
            "video": False,
            "original_title": f"Original {movie_id}",
        }
        movie.update(overrides)
        return movie

    return _make_movie
