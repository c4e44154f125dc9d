"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with its routes, error mapping,
middleware and lifecycle handlers.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from warden.core.config import Settings, get_settings
from warden.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    new_correlation_id,
)
from warden.domain.errors import InternalError, WardenError
from warden.infrastructure.auth import JWTService
from warden.infrastructure.persistence.database import DatabaseManager
from warden.infrastructure.persistence.migrations import MigrationRunner

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Applies pending migrations before the first request is served and
    disposes of the connection pool on shutdown.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control is yielded to the application during its lifetime.
    """
    settings: Settings = app.state.settings
    db: DatabaseManager = app.state.db

    configure_logging(settings)
    logger.info(
        "Starting Warden",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    db.ensure_sqlite_directory()
    if not await db.check_connection():
        raise RuntimeError("Database is unreachable")

    if settings.run_migrations_on_startup:
        try:
            applied = await MigrationRunner(db.engine).run()
            logger.info("Startup migrations complete", applied=applied)
        except Exception as e:
            logger.error("Failed to migrate database", error=str(e))
            raise

    yield

    logger.info("Shutting down Warden")
    await db.disconnect()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to build the application from. Defaults to the
            cached environment settings.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Account registration, login and role-based access control",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db = DatabaseManager(settings)
    app.state.jwt_service = JWTService(settings.secret_key)
    if settings.secret_key is None:
        logger.warning("No token signing secret configured; logins will fail")

    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_routes(app: FastAPI) -> None:
    """Register API routes.

    Args:
        app: FastAPI application instance.
    """
    from warden.infrastructure.api.routes import auth_router, health_router

    settings: Settings = app.state.settings

    app.include_router(health_router, prefix=settings.api_prefix, tags=["health"])
    app.include_router(auth_router, prefix=f"{settings.api_prefix}/auth", tags=["auth"])


def _error(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Map errors to ``{"error": <public message>}`` responses.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(WardenError)
    async def warden_error_handler(request: Request, exc: WardenError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Request failed",
                path=request.url.path,
                method=request.method,
                error=exc.message,
                exc_type=type(exc).__name__,
            )
        return _error(exc.status_code, exc.public_message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("Invalid request body", path=request.url.path, errors=len(exc.errors()))
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid input")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error(
            "Storage error",
            path=request.url.path,
            method=request.method,
            error=str(exc),
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.public_message)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.public_message)


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware.

    Args:
        app: FastAPI application instance.
    """

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log every request under a correlation ID echoed back to the caller."""
        correlation_id = request.headers.get("X-Correlation-ID") or new_correlation_id()
        bind_correlation_id(correlation_id)

        logger.info("Request started", method=request.method, path=request.url.path)
        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()


app = create_app()
