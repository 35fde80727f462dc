"""FastAPI router exposing CRUD operations for the favorites list."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from favorites_api.schemas.favorites import (
    FavoriteCount,
    FavoriteCreated,
    FavoriteMovie,
    FavoriteMovieCreate,
    FavoriteRemoved,
    FavoriteStatus,
    SQLITE_MAX_INTEGER,
)
from favorites_api.services.favorites_service import (
    FavoritesService,
    get_favorites_service,
)

router = APIRouter()

MovieId = Annotated[
    int,
    Path(
        gt=0,
        le=SQLITE_MAX_INTEGER,
        description="Identity assigned by the movie source",
    ),
]


@router.get("", response_model=list[FavoriteMovie])
async def list_favorites(
    service: FavoritesService = Depends(get_favorites_service),
) -> list[FavoriteMovie]:
    """Return every favorite, most recently added first."""

    return await service.list_favorites()


@router.post(
    "",
    response_model=FavoriteCreated,
    status_code=status.HTTP_201_CREATED,
)
async def add_favorite(
    payload: FavoriteMovieCreate,
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteCreated:
    """Persist a movie; duplicates are rejected with 409."""

    return await service.add_favorite(payload)


# Registered ahead of ``/{movie_id}`` so "stats" is never parsed as an identity.
@router.get("/stats/count", response_model=FavoriteCount)
async def count_favorites(
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteCount:
    return await service.count_favorites()


@router.get("/{movie_id}", response_model=FavoriteStatus)
async def check_favorite(
    movie_id: MovieId,
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteStatus:
    """Report whether ``movie_id`` is in the favorites list."""

    return await service.is_favorite(movie_id)


@router.delete("/{movie_id}", response_model=FavoriteRemoved)
async def remove_favorite(
    movie_id: MovieId,
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteRemoved:
    """Delete a favorite; unknown identities yield 404."""

    return await service.remove_favorite(movie_id)
