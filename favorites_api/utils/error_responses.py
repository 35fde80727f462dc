"""Builders for the structured error payloads returned by the API.

Handlers pass either the category, status and wording explicitly or a
favorites domain exception, which is mapped to its category and status here.
The request id and the timestamp are always filled in so every error body has
the same shape.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from favorites_api.errors import (
    FavoriteConflictError,
    FavoriteNotFoundError,
    FavoritesError,
    FavoritesStorageError,
)
from favorites_api.schemas.error import (
    ErrorResponse,
    ErrorType,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from favorites_api.utils.request_context import get_request_id

__all__ = [
    "build_error_response",
    "build_favorites_error_response",
    "favorites_error_status",
    "build_validation_error_response",
]


def _current_timestamp() -> datetime:
    """Return the current UTC time; patched by tests for stable assertions."""

    return datetime.now(UTC)


def build_validation_error_response(
    *,
    errors: Sequence[ValidationErrorDetail],
    message: str,
    detail: str,
    status_code: int,
    path: str,
    request_id: str | None = None,
) -> ValidationErrorResponse:
    """Construct a ``ValidationErrorResponse`` for rejected input."""

    return ValidationErrorResponse(
        error_type=ErrorType.VALIDATION_ERROR,
        message=message,
        detail=detail,
        status_code=status_code,
        timestamp=_current_timestamp(),
        request_id=request_id or get_request_id(),
        path=path,
        errors=list(errors),
    )


def build_error_response(
    *,
    error_type: ErrorType,
    message: str,
    detail: str | None,
    status_code: int,
    path: str,
    request_id: str | None = None,
) -> ErrorResponse:
    """Construct a generic ``ErrorResponse``."""

    return ErrorResponse(
        error_type=error_type,
        message=message,
        detail=detail,
        status_code=status_code,
        timestamp=_current_timestamp(),
        request_id=request_id or get_request_id(),
        path=path,
    )


_FAVORITES_ERROR_MAPPING: dict[type[FavoritesError], tuple[ErrorType, int]] = {
    FavoriteConflictError: (ErrorType.CONFLICT, 409),
    FavoriteNotFoundError: (ErrorType.NOT_FOUND, 404),
    FavoritesStorageError: (ErrorType.DATABASE_ERROR, 500),
}


def favorites_error_status(exc: FavoritesError) -> tuple[ErrorType, int]:
    """Return the error category and HTTP status reported for ``exc``.

    Lookups walk the exception's MRO so subclasses inherit their parent's
    mapping; unmapped favorites errors are internal errors.
    """

    for klass in type(exc).__mro__:
        if klass in _FAVORITES_ERROR_MAPPING:
            return _FAVORITES_ERROR_MAPPING[klass]
    return ErrorType.INTERNAL_ERROR, 500


def _favorites_error_detail(exc: FavoritesError) -> str | None:
    if isinstance(exc, FavoriteConflictError):
        return f"Movie {exc.movie_id} is already stored in the favorites list."
    if isinstance(exc, FavoriteNotFoundError):
        return f"Movie {exc.movie_id} is not in the favorites list."
    if isinstance(exc, FavoritesStorageError):
        return "An error occurred while accessing the favorites store."
    return None


def build_favorites_error_response(
    exc: FavoritesError,
    *,
    path: str,
    request_id: str | None = None,
) -> ErrorResponse:
    """Construct the ``ErrorResponse`` for a favorites domain exception.

    The exception message is already caller-safe, so it becomes ``message``
    verbatim; ``detail`` names the affected movie where one is known.
    """

    error_type, status_code = favorites_error_status(exc)
    return build_error_response(
        error_type=error_type,
        message=str(exc),
        detail=_favorites_error_detail(exc),
        status_code=status_code,
        path=path,
        request_id=request_id,
    )
