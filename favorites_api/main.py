import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .api import favorites
from .db.connection import attach_storage, initialize_storage, shutdown_storage
from .errors import FavoritesError
from .schemas.error import ErrorType, ValidationErrorDetail
from .schemas.favorites import HealthStatus
from .settings import AppSettings, get_settings
from .utils.error_responses import (
    build_error_response,
    build_favorites_error_response,
    build_validation_error_response,
)
from .utils.request_context import (
    REQUEST_ID_HEADER,
    get_request_id,
    resolve_request_id,
    set_request_id,
)

# Configure logging
logging.basicConfig(
    level=get_settings().log_level_numeric,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _validate_environment(active_settings: AppSettings | None = None) -> None:
    """Log warnings for optional configuration left at its defaults."""

    warnings = (active_settings or get_settings()).optional_config_warnings()
    if warnings:
        logger.warning("=" * 60)
        logger.warning("Environment Configuration Warnings:")
        for warning in warnings:
            logger.warning("  • %s", warning)
        logger.warning("=" * 60)


def validate_environment(active_settings: AppSettings | None = None) -> None:
    """Public wrapper so the CLI can run the same startup diagnostics."""

    _validate_environment(active_settings=active_settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the favorites table on startup and release the engine on shutdown."""
    active_settings: AppSettings = app.state.settings
    validate_environment(active_settings)

    logger.info("=" * 60)
    logger.info("Movie Favorites API - Storage Preflight")
    logger.info("=" * 60)
    logger.info("Database URL: %s", active_settings.resolved_database_url)
    await initialize_storage(app, active_settings)
    logger.info("=" * 60)

    yield

    logger.info("Shutting down Movie Favorites API")
    await shutdown_storage(app)


async def add_request_id(request: Request, call_next):
    """Tag each request with an ID, reusing the caller's when it is well formed."""
    request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
    set_request_id(request_id)
    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def _validation_message(errors: list[dict]) -> str:
    """Pick the short message matching where the rejected input came from."""

    sources = {str(error["loc"][0]) for error in errors if error.get("loc")}
    if "path" in sources:
        return "Invalid movie ID"
    if "body" in sources:
        return "Invalid movie data"
    return "Request validation failed"


# Exception handlers
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed identities and movie payloads as 400 Bad Request."""
    raw_errors = list(exc.errors())
    errors = [
        ValidationErrorDetail(
            field=".".join(str(loc) for loc in error["loc"]),
            message=error["msg"],
            value=error.get("input"),
        )
        for error in raw_errors
    ]

    logger.warning(
        "Validation error for request %s to %s: %s errors",
        get_request_id(),
        request.url.path,
        len(errors),
    )

    error_response = build_validation_error_response(
        message=_validation_message(raw_errors),
        detail=f"{len(errors)} validation error(s)",
        status_code=status.HTTP_400_BAD_REQUEST,
        path=str(request.url.path),
        errors=errors,
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response.model_dump(mode="json"),
    )


async def favorites_exception_handler(request: Request, exc: FavoritesError):
    """Map favorites domain errors to 409, 404 or an opaque 500."""
    error_response = build_favorites_error_response(exc, path=str(request.url.path))

    if error_response.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "Storage error for request %s to %s: %s",
            get_request_id(),
            request.url.path,
            exc,
        )
    else:
        logger.info(
            "Favorites request %s to %s rejected: %s",
            get_request_id(),
            request.url.path,
            exc,
        )

    return JSONResponse(
        status_code=error_response.status_code,
        content=error_response.model_dump(mode="json"),
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Handle database errors that escaped the persistence layer."""
    logger.error(
        "Database error for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        str(exc),
    )

    error_response = build_error_response(
        error_type=ErrorType.DATABASE_ERROR,
        message="Database operation failed",
        detail="An error occurred while accessing the favorites store.",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        path=str(request.url.path),
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json"),
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle all other unhandled exceptions."""
    logger.exception(
        "Unhandled exception for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        type(exc).__name__,
    )

    error_response = build_error_response(
        error_type=ErrorType.INTERNAL_ERROR,
        message="Internal server error",
        detail=None,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        path=str(request.url.path),
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json"),
    )


async def healthcheck() -> HealthStatus:
    """Liveness check reporting the current server time."""
    return HealthStatus(status="OK", timestamp=datetime.now(UTC))


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Build an application bound to its own favorites store."""

    active_settings = settings or get_settings()
    prefix = active_settings.normalized_api_prefix

    app = FastAPI(
        title="Movie Favorites API",
        version="0.1.0",
        description="Persists the movies a user marked as favorites.",
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.settings = active_settings
    attach_storage(app, active_settings)

    logger.debug(
        "Configured CORS allow_origins: %s",
        ", ".join(active_settings.cors_allow_origins),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=active_settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_origin_regex=active_settings.cors_allow_origin_regex,
    )
    app.middleware("http")(add_request_id)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(FavoritesError, favorites_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.add_api_route(
        f"{prefix}/health",
        healthcheck,
        methods=["GET"],
        response_model=HealthStatus,
        tags=["system"],
    )
    app.include_router(favorites.router, prefix=f"{prefix}/favorites", tags=["favorites"])

    return app


app = create_app()
