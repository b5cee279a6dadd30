"""Health check endpoint with dependency validation and caching."""

import secrets
import time
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator

from src.roomsync.core.config import get_settings
from src.roomsync.core.db import get_session
from src.roomsync.models.base import utc_now
from src.roomsync.repositories import AccountRepository
from src.roomsync.temporal.client import get_temporal_client

_health_cache: dict[str, Any] | None = None
_health_cache_time: float = 0
HEALTH_CACHE_TTL = 10  # seconds


def reset_health_cache() -> None:
    """Reset health cache (for testing)."""
    global _health_cache, _health_cache_time
    _health_cache = None
    _health_cache_time = 0


async def _check_database(report: dict[str, Any]) -> None:
    """The database is required. Overdue grace periods are reported, not fatal."""
    try:
        async with get_session() as session:
            overdue = await AccountRepository(session).count_overdue_grace_periods(utc_now())
        report["database"] = "healthy"
        report["overdue_grace_periods"] = overdue
    except Exception as e:
        report["database"] = f"unhealthy: {e!s}"
        report["status"] = "unhealthy"


async def _check_temporal(report: dict[str, Any]) -> None:
    """Without Temporal, grace timers wait for the next resume scan."""
    try:
        await get_temporal_client()
        report["temporal"] = "healthy"
    except Exception as e:
        report["temporal"] = f"unhealthy: {e!s}"
        if report["status"] == "healthy":
            report["status"] = "degraded"


def _respond(report: dict[str, Any]) -> JSONResponse:
    return JSONResponse(
        content=report,
        status_code=200 if report["status"] == "healthy" else 503,
    )


def setup_health_endpoint(app: FastAPI) -> None:
    @app.get("/health")
    async def health() -> JSONResponse:
        global _health_cache, _health_cache_time

        now = time.time()
        if _health_cache and (now - _health_cache_time) < HEALTH_CACHE_TTL:
            cached = _health_cache.copy()
            cached["cached"] = True
            cached["cache_age_seconds"] = round(now - _health_cache_time, 1)
            return _respond(cached)

        report: dict[str, Any] = {
            "status": "healthy",
            "database": "unknown",
            "temporal": "unknown",
            "cached": False,
            "timestamp": now,
        }
        await _check_database(report)
        await _check_temporal(report)

        _health_cache = report
        _health_cache_time = now
        return _respond(report)


def setup_metrics(app: FastAPI) -> None:
    """Expose Prometheus metrics, behind X-Metrics-Key when one is configured."""
    settings = get_settings()
    instrumentator = Instrumentator(excluded_handlers=["/health", "/metrics"]).instrument(app)

    if not settings.metrics_api_key:
        instrumentator.expose(app, endpoint="/metrics")
        return

    async def verify_metrics_key(
        api_key: str | None = Depends(APIKeyHeader(name="X-Metrics-Key", auto_error=False)),
    ) -> None:
        expected = settings.metrics_api_key
        if api_key is None or expected is None or not secrets.compare_digest(api_key, expected):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing metrics API key",
            )

    instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(verify_metrics_key)])
