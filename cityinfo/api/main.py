"""FastAPI application factory and lifecycle management.

Handles:
- Application lifecycle (database check on startup, engine disposal on shutdown)
- Exception handler registration
- Middleware registration in the correct order
- Router registration under ``/api`` and the health endpoint
- OpenTelemetry instrumentation
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from cityinfo.api.middleware.error_handler import register_exception_handlers
from cityinfo.api.middleware.request_context import RequestContextMiddleware
from cityinfo.api.middleware.request_logging import RequestLoggingMiddleware
from cityinfo.api.middleware.security_headers import SecurityHeadersMiddleware
from cityinfo.api.routes import api_router
from cityinfo.api.utils.responses import ORJSONResponse
from cityinfo.core.config import Settings, get_settings
from cityinfo.core.logging import setup_logging
from cityinfo.core.observability import instrument_app, setup_tracing
from cityinfo.infrastructure.database.session import (
    check_database_connection,
    close_database,
)


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Args:
        app_instance: The FastAPI application instance.

    Yields:
        None: Nothing is yielded, this is just a lifespan context.

    Raises:
        RuntimeError: If database connection fails during startup.
    """
    is_healthy, error_msg = await check_database_connection()

    if is_healthy:
        logger.info("Database connection successful")
    else:
        logger.error("Database connection failed during startup: {}", error_msg)
        msg = f"Database connection failed: {error_msg}"
        raise RuntimeError(msg)

    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    logger.info("Application shutdown initiated")
    await close_database()
    logger.info("Application shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)
    setup_tracing(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    register_exception_handlers(application)

    # Middleware run in reverse order of registration
    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)
    application.add_middleware(RequestContextMiddleware)
    application.add_middleware(SecurityHeadersMiddleware)

    application.include_router(api_router)

    @application.get("/health", tags=["health"])
    async def health() -> dict[str, object]:
        """Report service status and database connectivity.

        Returns:
            dict[str, object]: ``status`` is ``healthy`` or ``degraded``.
        """
        is_healthy, error_msg = await check_database_connection()
        if not is_healthy:
            logger.warning("Database health check failed: {}", error_msg)

        return {
            "status": "healthy" if is_healthy else "degraded",
            "database": is_healthy,
        }

    instrument_app(application, settings)

    return application


app = create_app()
