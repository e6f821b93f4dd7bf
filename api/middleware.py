"""
Consolidated middleware for the DietPlan API
"""

import time
import logging
from datetime import datetime
from uuid import uuid4

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from sqlalchemy.exc import IntegrityError

from app.exceptions import ConflictError, DietPlanError, NotFoundError, ServiceValidationError

logger = logging.getLogger("dietplan.middleware")


# ============================================================================
# Helper Functions
# ============================================================================


def make_serializable(obj):
    """
    Convert error payloads to JSON-safe values.

    Pydantic puts the offending input and the raised exception into error
    entries; ids become strings and anything unknown is rendered with str().
    """
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, dict):
        return {str(k): make_serializable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [make_serializable(item) for item in obj]
    return str(obj)


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request and tags the response with a request id"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id
        route = f"{request.method} {request.url.path}"

        logger.debug("%s started [%s]", route, request_id)
        started = time.perf_counter()

        try:
            response: Response = await call_next(request)
        except Exception:
            elapsed = time.perf_counter() - started
            logger.error("%s failed after %.4fs [%s]", route, elapsed, request_id, exc_info=True)
            raise

        elapsed = time.perf_counter() - started
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "%s -> %d in %.4fs [%s]",
            route,
            response.status_code,
            elapsed,
            request_id,
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        return response


# ============================================================================
# Error Handlers
# ============================================================================


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors"""
    logger.warning(f"Validation error on {request.url}: {exc.errors()}")

    # ctx may hold the raised exception instance
    serializable_errors = make_serializable(exc.errors())

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content={
            "success": False,
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": serializable_errors,
            },
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP {exc.status_code} on {request.url}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {
                "code": f"HTTP_{exc.status_code}",
                "message": exc.detail,
            },
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


def _error_body(code: str, exc: DietPlanError) -> dict:
    error = {"code": exc.code or code, "message": exc.message}
    if exc.details:
        error["details"] = make_serializable(dict(exc.details))
    return {
        "success": False,
        "error": error,
        "timestamp": datetime.utcnow().isoformat(),
    }


async def service_validation_exception_handler(
    request: Request, exc: ServiceValidationError
):
    """Handle service validation errors"""
    logger.warning(f"Service validation error on {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("SERVICE_VALIDATION_ERROR", exc),
    )


async def not_found_exception_handler(request: Request, exc: NotFoundError):
    """Handle not found errors"""
    logger.warning(f"Resource not found on {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=_error_body("NOT_FOUND", exc),
    )


async def conflict_exception_handler(request: Request, exc: ConflictError):
    """Handle write conflicts"""
    logger.warning(f"Conflict on {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=_error_body("CONFLICT", exc),
    )


async def integrity_error_exception_handler(request: Request, exc: IntegrityError):
    """Handle unique and foreign key violations that reach the API"""
    logger.warning(f"Integrity error on {request.url}: {exc.orig}")

    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "success": False,
            "error": {
                "code": "CONFLICT",
                "message": "The write conflicts with existing data",
            },
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


async def dietplan_exception_handler(request: Request, exc: DietPlanError):
    """Handle any other service error with its own status code"""
    logger.warning(f"Service error on {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=exc.http_status,
        content=_error_body("SERVICE_ERROR", exc),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": {
                "code": "INTERNAL_SERVER_ERROR",
                "message": "An unexpected error occurred",
            },
            "timestamp": datetime.utcnow().isoformat(),
        },
    )
