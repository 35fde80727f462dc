"""Pydantic schemas for API requests and responses."""

from favorites_api.schemas.error import (  # noqa: F401
    ErrorResponse,
    ErrorType,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from favorites_api.schemas.favorites import (  # noqa: F401
    FavoriteCount,
    FavoriteCreated,
    FavoriteMovie,
    FavoriteMovieCreate,
    FavoriteRemoved,
    FavoriteStatus,
    HealthStatus,
)
