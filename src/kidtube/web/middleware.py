"""Middleware and exception handlers for the FastAPI application."""

import time
import uuid
from typing import Callable

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from kidtube.auth import AuthenticationError
from kidtube.common.logging_config import bind_context, clear_context
from kidtube.core.db.exceptions import DatabaseError, DuplicateRecordError
from kidtube.services.base import (
    ConflictError,
    DuplicateVideoError,
    InvalidUrlError,
    NotFoundError,
    ServiceError,
    UpstreamUnavailableError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers for the FastAPI application.

    Maps service and database exceptions to HTTP status codes:
    - ValidationError (including InvalidUrlError) -> 400
    - AuthenticationError -> 401
    - NotFoundError -> 404
    - ConflictError (including DuplicateVideoError), DuplicateRecordError -> 409
    - RequestValidationError -> 422
    - DatabaseError, other ServiceError, anything unexpected -> 500
    - UpstreamUnavailableError -> 503

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
        logger.warning(
            "request_rejected",
            error=exc.message,
            field=exc.field,
            path=str(request.url.path),
        )
        return JSONResponse(
            status_code=400,
            content={
                "detail": exc.message,
                "error_type": "invalid_url" if isinstance(exc, InvalidUrlError) else "validation_error",
            },
        )

    @app.exception_handler(AuthenticationError)
    async def authentication_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
        logger.warning("authentication_failed", error=exc.message, path=str(request.url.path))
        return JSONResponse(
            status_code=401,
            content={
                "detail": exc.message,
                "error_type": "authentication_error",
            },
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        logger.warning(
            "resource_not_found",
            resource_type=exc.resource_type,
            resource_id=exc.resource_id,
            path=str(request.url.path),
        )
        return JSONResponse(
            status_code=404,
            content={
                "detail": exc.message,
                "error_type": f"{exc.resource_type}_not_found",
            },
        )

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
        logger.warning(
            "resource_conflict",
            conflicting_id=exc.conflicting_id,
            path=str(request.url.path),
        )
        return JSONResponse(
            status_code=409,
            content={
                "detail": exc.message,
                "error_type": "duplicate_video" if isinstance(exc, DuplicateVideoError) else "conflict",
            },
        )

    @app.exception_handler(UpstreamUnavailableError)
    async def upstream_handler(request: Request, exc: UpstreamUnavailableError) -> JSONResponse:
        logger.error(
            "upstream_unavailable",
            upstream=exc.upstream,
            error=exc.message,
            path=str(request.url.path),
        )
        return JSONResponse(
            status_code=503,
            content={
                "detail": exc.message,
                "error_type": "upstream_unavailable",
            },
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        logger.error("service_error", error=exc.message, path=str(request.url.path))
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "error_type": "service_error",
            },
        )

    @app.exception_handler(DuplicateRecordError)
    async def duplicate_record_handler(request: Request, exc: DuplicateRecordError) -> JSONResponse:
        logger.warning(
            "duplicate_record",
            table=exc.table,
            key=exc.key,
            value=exc.value,
            path=str(request.url.path),
        )
        return JSONResponse(
            status_code=409,
            content={
                "detail": str(exc),
                "error_type": "duplicate_record",
            },
        )

    @app.exception_handler(DatabaseError)
    async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
        logger.error(
            "database_error",
            error=str(exc),
            path=str(request.url.path),
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Database error occurred",
                "error_type": "database_error",
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(
            "validation_error",
            errors=exc.errors(),
            path=str(request.url.path),
        )
        return JSONResponse(
            status_code=422,
            content={
                "detail": "Validation error",
                "error_type": "validation_error",
                "errors": [
                    {
                        "loc": [str(part) for part in err["loc"]],
                        "msg": err["msg"],
                        "type": err["type"],
                    }
                    for err in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", path=str(request.url.path))
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "error_type": "internal_error",
            },
        )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        """Log request details and response status, tagged with a request id."""
        start_time = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        bind_context(request_id=request_id)

        logger.info(
            "request_started",
            method=request.method,
            path=str(request.url.path),
            query=str(request.url.query) if request.url.query else None,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            duration = time.perf_counter() - start_time
            logger.error(
                "request_failed",
                method=request.method,
                path=str(request.url.path),
                error=str(exc),
                duration_ms=round(duration * 1000, 2),
            )
            raise
        finally:
            clear_context()

        duration = time.perf_counter() - start_time
        logger.info(
            "request_completed",
            method=request.method,
            path=str(request.url.path),
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
            request_id=request_id,
        )
        response.headers["X-Request-ID"] = request_id

        return response
