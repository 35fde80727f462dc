"""Pydantic schemas that power the favorites API surface."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

# Range of a SQLite INTEGER column.
SQLITE_MIN_INTEGER = -(2**63)
SQLITE_MAX_INTEGER = 2**63 - 1


class FavoriteMovieBase(BaseModel):
    """Movie fields passed through verbatim from the movie-metadata source."""

    title: str = Field(..., description="Display title of the movie")
    poster_path: str | None = None
    release_date: str | None = None
    overview: str | None = None
    vote_average: float | None = None
    vote_count: int | None = Field(
        default=None, ge=SQLITE_MIN_INTEGER, le=SQLITE_MAX_INTEGER
    )
    genre_ids: list[int] = Field(
        default_factory=list,
        description="Genre identifiers in the order supplied by the source.",
    )
    original_language: str | None = None
    popularity: float | None = None
    backdrop_path: str | None = None
    adult: bool | None = None
    video: bool | None = None
    original_title: str | None = None

    @field_validator("genre_ids", mode="before")
    @classmethod
    def _missing_genres_are_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class FavoriteMovieCreate(FavoriteMovieBase):
    """Payload for adding a movie to the favorites list.

    Unknown keys sent by the client (including ``added_at``) are ignored; the
    insert timestamp is always assigned by the server.
    """

    model_config = ConfigDict(extra="ignore")

    id: StrictInt = Field(
        ...,
        gt=0,
        le=SQLITE_MAX_INTEGER,
        description="Identity assigned by the movie-metadata source.",
    )


class FavoriteMovie(FavoriteMovieBase):
    """Read model exposed by the listing endpoint."""

    id: int = Field(..., description="Identity assigned by the movie-metadata source.")
    added_at: datetime = Field(..., description="When the movie was favorited.")


class FavoriteCreated(BaseModel):
    """Confirmation returned after a successful insert."""

    message: str = "Movie added to favorites"
    id: int = Field(..., description="Surrogate key of the new favorites row")
    movie_id: int


class FavoriteRemoved(BaseModel):
    """Confirmation returned after a successful delete."""

    message: str = "Movie removed from favorites"
    movie_id: int


class FavoriteStatus(BaseModel):
    """Membership flag for a single movie identity."""

    model_config = ConfigDict(populate_by_name=True)

    is_favorite: bool = Field(..., alias="isFavorite")


class FavoriteCount(BaseModel):
    """Total number of rows in the favorites table."""

    count: int = Field(..., ge=0)


class HealthStatus(BaseModel):
    """Liveness payload returned by the health check."""

    status: str = "OK"
    timestamp: datetime
