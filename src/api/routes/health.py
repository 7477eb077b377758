"""Liveness and readiness probes."""

import time

from fastapi import APIRouter, Response, status

from src.core.supabase import check_database_connection
from src.schemas.common import CheckResult, HealthResponse, HealthStatus, ReadinessResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Liveness check")
async def health_check() -> HealthResponse:
    return HealthResponse(status=HealthStatus.HEALTHY)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "User tables unreachable"}},
    summary="Readiness check",
)
async def readiness_check(response: Response) -> ReadinessResponse:
    """Report whether the database holding the user tables answers.

    A sync cannot succeed without it, so an unreachable database turns the
    probe into a 503.
    """
    started = time.perf_counter()
    outcome = await check_database_connection()
    database = CheckResult(
        name="database",
        healthy=outcome["healthy"],
        latency_ms=round((time.perf_counter() - started) * 1000, 2),
        error=outcome.get("error"),
    )

    overall = HealthStatus.HEALTHY if database.healthy else HealthStatus.UNHEALTHY
    if overall is HealthStatus.UNHEALTHY:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(status=overall, checks=[database])
