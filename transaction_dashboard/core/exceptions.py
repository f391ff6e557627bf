"""Application-wide exception classes and handlers.

This module provides a consistent exception hierarchy for the application
and registers global exception handlers with FastAPI.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base exception for application errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class ValidationError(AppError):
    """Validation error (400)."""

    def __init__(self, message: str = "Validation failed", field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class InvalidMonthError(AppError):
    """Month designator (or year) that does not resolve to a calendar month (400)."""

    def __init__(self, month: str | None, year: int | None = None):
        details: dict[str, Any] = {"month": month}
        if year is not None:
            details["year"] = year
        super().__init__(
            message=f"Invalid month: {month!r}",
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="INVALID_MONTH",
            details=details,
        )


class InvalidPriceRangeError(AppError):
    """Malformed or inverted price range (400)."""

    def __init__(self, message: str, price_range: str | None = None):
        details = {"range": price_range} if price_range else {}
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="INVALID_PRICE_RANGE",
            details=details,
        )


class StoreUnavailableError(AppError):
    """Transaction store cannot be reached (503)."""

    def __init__(self, operation: str, params: dict[str, Any] | None = None):
        super().__init__(
            message=f"Transaction store unavailable during {operation}",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code="STORE_UNAVAILABLE",
            details={"operation": operation, **(params or {})},
        )


class QueryFailedError(AppError):
    """Query against the transaction store failed (500)."""

    def __init__(self, operation: str, params: dict[str, Any] | None = None):
        super().__init__(
            message=f"Query failed during {operation}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="QUERY_FAILED",
            details={"operation": operation, **(params or {})},
        )


class PartialAggregationError(AppError):
    """One or more branches of a combined aggregation failed (500).

    ``causes`` maps the failed section name to the underlying error code, so
    callers can tell a store outage from a bad query.
    """

    def __init__(self, causes: dict[str, str], params: dict[str, Any] | None = None):
        self.causes = causes
        super().__init__(
            message=f"Combined aggregation failed: {', '.join(causes)}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="AGGREGATION_FAILED",
            details={"failed": list(causes), "causes": causes, **(params or {})},
        )


async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle AppError and return consistent JSON response."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "app_error",
        code=exc.error_code,
        status=exc.status_code,
        message=exc.message,
        details=exc.details,
        path=request.url.path,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {
                "code": exc.error_code,
                "message": exc.message,
                "details": exc.details if exc.details else None,
            },
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions with a generic error response."""
    logger.exception("unhandled_exception", path=request.url.path, error=str(exc))

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "details": None,
            },
        },
    )


def register_exception_handlers(app: FastAPI, *, debug: bool = False) -> None:
    """Register exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
        debug: If True, unhandled exceptions propagate with stack traces.
    """
    app.add_exception_handler(AppError, app_exception_handler)  # type: ignore[arg-type]
    if not debug:
        app.add_exception_handler(Exception, unhandled_exception_handler)
