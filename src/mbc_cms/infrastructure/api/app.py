"""FastAPI application factory and configuration.

This module provides the application factory function for creating and
configuring the FastAPI application with middleware, routes, exception
handlers and lifecycle handlers.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mbc_cms.core.config import get_settings
from mbc_cms.core.exceptions import AuthorizationError, StoreError
from mbc_cms.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)
from mbc_cms.domain.services import BootstrapService
from mbc_cms.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)

logger = get_logger(__name__)

API_TITLE = "Mountain Backpackers CMS API Documentation"
API_DESCRIPTION = "The API documentation for the Mountain Backpackers CMS."
API_CONTACT = {
    "name": "Chairman",
    "email": "chairman@mountainbackpackers.co.za",
}
API_LICENSE = {"name": "GPL-3.0"}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Configures logging, prepares the schema, bootstraps the admin identity
    and closes the connection pool on shutdown. Startup aborts if the
    database or the bootstrap fails.

    Args:
        app: FastAPI application instance.
    """
    settings = get_settings()
    configure_logging(settings)

    logger.info(
        "Starting MBC CMS API",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    try:
        await init_database()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    result = await BootstrapService(get_db_manager().session_factory, settings).run()
    logger.info(
        "Bootstrap completed",
        role_id=result.role_id,
        role_created=result.role_created,
        admin_created=result.admin_created,
    )

    yield

    logger.info("Shutting down MBC CMS API")
    await close_database()
    logger.info("Database connection closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=API_TITLE,
        version=settings.app_version,
        description=API_DESCRIPTION,
        contact=API_CONTACT,
        license_info=API_LICENSE,
        servers=[{"url": f"http://localhost:{settings.port}", "description": "Development Server"}],
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_url=None if settings.is_production else "/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def _service_info(status: str) -> dict[str, str]:
    settings = get_settings()
    return {"status": status, "service": settings.app_name, "version": settings.app_version}


def register_health_check(app: FastAPI) -> None:
    """Register the probes used by the container orchestrator.

    ``/health`` and ``/live`` never touch the database; ``/ready`` does.
    """

    @app.get("/health", tags=["health"])
    async def health_check():
        return _service_info("healthy")

    @app.get("/live", tags=["health"])
    async def liveness_check():
        return _service_info("alive")

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        if await get_db_manager().check_connection():
            return {**_service_info("ready"), "database": "connected"}
        return JSONResponse(
            status_code=503,
            content={**_service_info("not_ready"), "database": "disconnected"},
        )


def register_routes(app: FastAPI) -> None:
    """Register API routes.

    Args:
        app: FastAPI application instance.
    """
    from mbc_cms.infrastructure.api.routes import roles_router

    settings = get_settings()

    app.include_router(roles_router, prefix=f"{settings.api_prefix}/roles", tags=["roles"])

    @app.get(settings.api_prefix, tags=["root"])
    async def api_root():
        """API root endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
        }


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Store and authorization failures map to 503 so callers can tell them
    apart from a 403 deny.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(request: Request, exc: AuthorizationError):
        logger.error(
            "Authorization check could not be answered",
            path=str(request.url.path),
            method=request.method,
            error=exc.message,
        )
        return JSONResponse(
            status_code=503,
            content={
                "error": "Authorization unavailable",
                "detail": exc.message if get_settings().debug else "Permission store unavailable",
            },
        )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(
            "Store failure",
            path=str(request.url.path),
            method=request.method,
            error=exc.message,
        )
        return JSONResponse(
            status_code=503,
            content={
                "error": "Store unavailable",
                "detail": exc.message if get_settings().debug else "The data store failed",
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=422,
            content={"error": "Invalid request", "detail": str(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=str(request.url),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if get_settings().debug else "An unexpected error occurred",
            },
        )


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware.

    Args:
        app: FastAPI application instance.
    """

    @app.middleware("http")
    async def tracing_middleware(request: Request, call_next):
        """Log every request with a correlation ID and its duration."""
        correlation_id = request.headers.get("X-Correlation-ID", f"cid_{uuid.uuid4().hex[:12]}")
        bind_correlation_id(correlation_id)
        started = time.perf_counter()

        logger.info(
            "Request started",
            method=request.method,
            path=str(request.url.path),
        )

        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=str(request.url.path),
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()


# Create the application instance
app = create_app()
