"""Schemas shared by the health and error responses."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

API_VERSION = "0.1.0"


def utc_timestamp() -> datetime:
    return datetime.now(timezone.utc)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Liveness probe body. Says nothing about dependencies."""

    status: HealthStatus
    timestamp: datetime = Field(default_factory=utc_timestamp)
    version: str = API_VERSION


class CheckResult(BaseModel):
    """Outcome of probing one dependency."""

    name: str = Field(description="Probed dependency")
    healthy: bool
    latency_ms: float | None = Field(default=None, description="Probe round trip in milliseconds")
    error: str | None = Field(default=None, description="Failure reason when unhealthy")


class ReadinessResponse(BaseModel):
    """Readiness probe body."""

    status: HealthStatus
    timestamp: datetime = Field(default_factory=utc_timestamp)
    checks: list[CheckResult] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    loc: list[str] | None = None
    msg: str
    type: str = "error"


class ErrorResponse(BaseModel):
    """Body of every error the API returns.

    `error` is a stable machine-readable category (validation_error,
    authentication_error, internal_error, ...); `message` is for humans.
    """

    error: str
    message: str
    details: list[ErrorDetail] | None = None
    request_id: str | None = None
    timestamp: datetime = Field(default_factory=utc_timestamp)

    @classmethod
    def from_exception(
        cls,
        error_type: str,
        message: str,
        details: list[dict[str, Any]] | None = None,
        request_id: str | None = None,
    ) -> "ErrorResponse":
        """Build the body from an error's category, message and raw details."""
        parsed = [
            ErrorDetail(loc=d.get("loc"), msg=d.get("msg", str(d)), type=d.get("type", "error"))
            for d in details or []
        ]
        return cls(error=error_type, message=message, details=parsed or None, request_id=request_id)
