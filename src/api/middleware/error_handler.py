"""Global error handling middleware for consistent error responses."""

import logging
import traceback
from typing import Any, Callable

from fastapi import HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from src.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for errors returned to the caller as ErrorResponse.

    Subclasses pick the HTTP status and error type; raising one from a route
    or dependency short-circuits the request.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type: str = "api_error"
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None, details: list[dict[str, Any]] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(APIError):
    """Webhook delivery is well formed but cannot be processed."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_type = "validation_error"
    default_message = "Validation error"


class AuthenticationError(APIError):
    """Webhook sender did not prove it knows the shared secret."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "authentication_error"
    default_message = "Authentication required"


def create_error_response(
    error_type: str,
    message: str,
    status_code: int,
    details: list[dict[str, Any]] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Render an ErrorResponse body with the given status code."""
    body = ErrorResponse.from_exception(error_type, message, details=details, request_id=request_id)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


async def error_handler_middleware(request: Request, call_next: Callable[[Request], Any]) -> Response:
    """Turn exceptions escaping a handler into ErrorResponse bodies.

    APIError keeps its own status. Anything else, a failed store write
    during a sync included, is logged with its traceback and answered with
    a 500 so the webhook sender treats the delivery as failed.

    Args:
        request: The incoming request.
        call_next: Next middleware or route handler.

    Returns:
        Response: The handler's response or a formatted error response.
    """
    request_id = request.headers.get("X-Request-ID")
    log_extra = {"request_id": request_id, "path": request.url.path}

    try:
        return await call_next(request)
    except APIError as e:
        logger.warning("%s on %s: %s", e.error_type, request.url.path, e.message, extra=log_extra)
        return create_error_response(e.error_type, e.message, e.status_code, e.details, request_id)
    except HTTPException as e:
        logger.warning("HTTP %s on %s: %s", e.status_code, request.url.path, e.detail, extra=log_extra)
        return create_error_response("http_error", str(e.detail), e.status_code, request_id=request_id)
    except Exception as e:
        logger.error(
            "Unhandled exception on %s %s: %s\n%s",
            request.method,
            request.url.path,
            str(e),
            traceback.format_exc(),
            extra=log_extra,
        )
        return create_error_response(
            "internal_error",
            "An unexpected error occurred",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            request_id=request_id,
        )
