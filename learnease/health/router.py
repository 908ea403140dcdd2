"""Liveness and readiness probes."""

from typing import Any

from fastapi import APIRouter, Request

from learnease.config import get_settings
from learnease.core.database import AsyncCassandraConnection
from learnease.core.redis import redis_available


router = APIRouter(prefix="/health", tags=["health"])

REQUIRED_SERVICES = ("course_service", "progress_service")


@router.get("/live")
async def liveness() -> dict[str, str]:
    return {"status": "alive"}


@router.get("/ready")
async def readiness(request: Request) -> dict[str, Any]:
    """Ready once the course and progress services are wired.

    The course cache is reported but never gates readiness.
    """
    settings = get_settings()
    missing = [
        name
        for name in REQUIRED_SERVICES
        if getattr(request.app.state, name, None) is None
    ]

    if not settings.course_cache_enabled:
        cache = "disabled"
    else:
        cache = "up" if await redis_available() else "down"

    return {
        "status": "degraded" if missing else "ready",
        "missing_services": missing,
        "cassandra": AsyncCassandraConnection.is_connected(),
        "course_cache": cache,
        "environment": settings.environment,
    }


@router.get("")
async def health() -> dict[str, str]:
    settings = get_settings()
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }
