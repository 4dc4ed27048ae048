"""
FastAPI application factory.

Startup migrates the database, opens the connection pool, loads the
product catalog and, when enabled, starts the periodic reminder tick.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from renewals.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from renewals.api.middleware.error_handler import setup_exception_handlers
from renewals.api.routes import (
    catalog_router,
    health_router,
    preferences_router,
    reminders_router,
)
from renewals.config import Settings, configure_logging, get_logger, get_settings

logger = get_logger(__name__)


async def _open_storage() -> None:
    from renewals.infrastructure.storage.sqlite import get_pool
    from renewals.infrastructure.storage.sqlite.migrations import run_migrations

    results = await run_migrations()
    failed = [r for r in results if not r.success]
    if failed:
        raise RuntimeError(f"Migration {failed[0].version} failed: {failed[0].error}")

    pool = await get_pool()
    logger.info(
        "storage_ready",
        db_path=str(pool.db_path),
        migrations_applied=len(results),
        pool_size=pool.pool_size,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open storage, load the catalog and start the scheduler; undo on exit."""
    from renewals.application.scheduler import shutdown_scheduler, start_scheduler
    from renewals.infrastructure.catalog import get_product_catalog
    from renewals.infrastructure.storage.sqlite import close_pool

    settings = get_settings()
    configure_logging()
    logger.info("application_starting", environment=settings.environment)

    try:
        await _open_storage()
    except Exception as e:
        logger.error("storage_init_failed", error=str(e))
        raise

    # A malformed catalog table fails startup rather than the first tick
    app.state.catalog = get_product_catalog()
    app.state.scheduler = start_scheduler()
    logger.info(
        "application_started",
        catalog_version=app.state.catalog.version,
        scheduler=app.state.scheduler is not None,
    )

    yield

    logger.info("application_stopping")
    shutdown_scheduler()
    try:
        await close_pool()
    except Exception as e:
        logger.warning("connection_pool_close_failed", error=str(e))
    logger.info("application_stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Overrides the global settings, mainly for tests.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Renewal Reminder API",
        description="Renewal reminder scheduling, preferences and delivery ledger",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    for router in (health_router, preferences_router, reminders_router, catalog_router):
        app.include_router(router)

    # Liveness probe for container orchestrators
    @app.get("/health", include_in_schema=False)
    async def root_health() -> dict[str, str]:
        return {"status": "healthy", "version": settings.app_version}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "renewals.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
