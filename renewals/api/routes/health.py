"""
Health check endpoints.

`/api/health` reports what the reminder tick depends on: the catalog
version in use and whether (and when) the in-process scheduler fires.
`/api/health/db` probes SQLite and lists migrations not yet applied.
"""

import time

from fastapi import APIRouter

from renewals.application.dto.responses import ComponentHealthResponse, HealthResponse
from renewals.application.scheduler import next_tick_time
from renewals.config import get_logger, get_settings
from renewals.infrastructure.catalog import get_product_catalog

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

_started = time.monotonic()


def _uptime() -> float:
    return round(time.monotonic() - _started, 3)


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        uptime_seconds=_uptime(),
        scheduler_enabled=settings.reminders.scheduler_enabled,
        catalog_version=get_product_catalog().version,
        next_tick_at=next_tick_time(),
    )


async def _probe_sqlite() -> ComponentHealthResponse:
    from renewals.infrastructure.storage.sqlite import get_pool

    try:
        pool = await get_pool()
        start = time.perf_counter()
        available = await pool.ping()
    except Exception as e:
        logger.warning("db_health_probe_failed", error=str(e))
        return ComponentHealthResponse(name="sqlite", available=False, error=str(e))

    return ComponentHealthResponse(
        name="sqlite",
        available=available,
        latency_ms=round((time.perf_counter() - start) * 1000, 2),
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    Unhealthy when SQLite is unreachable, degraded while migrations are
    pending since the ledger tables may be missing columns.
    """
    from renewals.infrastructure.storage.sqlite.migrations import get_migration_status

    database = await _probe_sqlite()
    pending: list[str] | None = None
    if database.available:
        pending = (await get_migration_status())["pending_migrations"]

    if not database.available:
        status = "unhealthy"
    elif pending:
        status = "degraded"
    else:
        status = "healthy"

    return HealthResponse(
        status=status,
        version=get_settings().app_version,
        uptime_seconds=_uptime(),
        database=database,
        pending_migrations=pending,
    )
