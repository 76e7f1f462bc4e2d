"""
Health check endpoints.
"""

import time

import aiosqlite
from fastapi import APIRouter

from mro.application.activity_dispatcher import get_activity_dispatcher
from mro.application.dto.responses import ComponentHealthResponse, HealthResponse
from mro.config import get_settings

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    Tests SQLite connectivity and reports store operation totals.
    """
    from mro.infrastructure.storage.sqlite import get_connection_pool, get_store_metrics

    totals = {k: v for k, v in get_store_metrics().snapshot().items() if k != "companies"}

    try:
        pool = await get_connection_pool()
        start = time.time()
        available = await pool.ping()
        latency = (time.time() - start) * 1000

        db_status = ComponentHealthResponse(
            name="sqlite",
            status="up" if available else "down",
            latency_ms=latency,
            details=totals,
        )

    except (aiosqlite.Error, OSError) as e:
        db_status = ComponentHealthResponse(
            name="sqlite",
            status="down",
            details=totals,
            error=str(e),
        )

    dispatcher = get_activity_dispatcher()
    stats = dispatcher.stats()
    activity_status = ComponentHealthResponse(
        name="activity_log",
        status="up" if stats["running"] or not dispatcher.enabled else "down",
        details=stats,
    )

    healthy = db_status.status == "up"
    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
        activity_log=activity_status,
    )
