"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mro.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from mro.api.middleware.error_handler import setup_exception_handlers
from mro.api.routes import (
    health_router,
    stock_inventory_router,
    user_activity_router,
    wheel_rotation_router,
)
from mro.application.activity_dispatcher import get_activity_dispatcher
from mro.config import configure_logging, get_logger, get_settings
from mro.core.exceptions import ConfigurationError

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Initializes resources on startup and cleans up on shutdown.
    """
    settings = get_settings()
    configure_logging()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        environment=settings.environment,
    )

    if settings.uses_dev_secret:
        if settings.environment == "production":
            raise ConfigurationError("AUTH_SECRET_KEY must be set in production")
        logger.warning("auth_using_dev_secret")

    from mro.infrastructure.storage.sqlite import close_connection_pool, get_connection_pool
    from mro.infrastructure.storage.sqlite.migrations.migrator import run_migrations

    results = await run_migrations()
    failed = [r for r in results if not r.success]
    if failed:
        logger.error("database_init_failed", versions=[r.version for r in failed])
        raise ConfigurationError(f"Migration {failed[0].version} failed: {failed[0].error}")
    logger.info("database_initialized", applied=len(results))

    await get_connection_pool()
    logger.info("connection_pool_ready")

    dispatcher = get_activity_dispatcher()
    await dispatcher.start()

    logger.info("application_started")

    yield

    logger.info("application_stopping")

    await dispatcher.stop()
    await close_connection_pool()

    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title="MRO Maintenance API",
        description="Company-scoped stock consumption ledger and wheel rotation scheduling",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    # CORS
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(stock_inventory_router)
    app.include_router(wheel_rotation_router)
    app.include_router(user_activity_router)

    # Root health endpoint (for k8s/docker health checks)
    @app.get("/health")
    async def root_health() -> dict[str, str]:
        """Simple health check at root level."""
        return {"status": "healthy", "version": settings.app_version}

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "mro.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
