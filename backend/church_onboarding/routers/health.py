"""Health check endpoints for load balancers and monitoring."""

import os
from datetime import datetime, timezone

import httpx
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from church_onboarding.config import settings
from church_onboarding.utils.cache import get_redis

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Lightweight health check for load balancer (no GraphQL/Redis check)."""
    return {
        "status": "ok",
        "service": "church-onboarding",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": os.getenv("ENVIRONMENT", settings.environment),
    }


@router.get("/health/ready")
async def readiness_check():
    """Readiness check: the GraphQL API answers and Redis pings.

    Returns 200 only if all dependencies are healthy.
    """
    checks = {
        "service": "ok",
        "graphql": "unknown",
        "redis": "unknown",
    }
    overall_healthy = True

    try:
        async with httpx.AsyncClient(timeout=5.0) as client:
            response = await client.post(
                settings.graphql_endpoint, json={"query": "{ __typename }"}
            )
            response.raise_for_status()
        checks["graphql"] = "ok"
    except httpx.HTTPError as e:
        checks["graphql"] = f"error: {str(e)[:100]}"
        overall_healthy = False

    if settings.cache_enabled:
        try:
            redis_client = await get_redis()
            await redis_client.ping()
            checks["redis"] = "ok"
        except Exception as e:
            checks["redis"] = f"error: {str(e)[:100]}"
            overall_healthy = False
    else:
        checks["redis"] = "disabled"

    return JSONResponse(
        status_code=status.HTTP_200_OK if overall_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if overall_healthy else "unhealthy",
            "service": "church-onboarding",
            "checks": checks,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
