"""Application-wide exception handling middleware."""

from __future__ import annotations

import uuid
from typing import Any, Dict

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..core.context import reset_correlation_id, set_correlation_id
from ..core.errors import BarrelCoachError, InvalidArgumentError
from ..core.sentry import capture_exception

CORRELATION_HEADER = "X-Correlation-ID"


def error_response(exc: BarrelCoachError, correlation_id: str | None) -> JSONResponse:
    """Serialize an application error into the standard JSON envelope."""
    content: Dict[str, Any] = {
        "success": False,
        "error": exc.to_dict(),
        "correlation_id": correlation_id,
    }
    response = JSONResponse(status_code=exc.status_code, content=content)
    if correlation_id:
        response.headers[CORRELATION_HEADER] = correlation_id
    return response


def http_error_response(exc: StarletteHTTPException, correlation_id: str | None) -> JSONResponse:
    """Wrap an HTTPException in the standard JSON envelope."""
    content: Dict[str, Any] = {
        "success": False,
        "error": {"code": "http_error", "message": str(exc.detail)},
        "correlation_id": correlation_id,
    }
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


def validation_error(exc: RequestValidationError) -> InvalidArgumentError:
    """Map FastAPI request validation failures to invalid_argument."""
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    return InvalidArgumentError("Request validation failed.", details={"errors": errors})


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Transforms uncaught exceptions into structured API responses."""

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)
        self.logger = structlog.get_logger("barrelcoach.error")

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        token = set_correlation_id(correlation_id)
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)
        request.state.correlation_id = correlation_id

        try:
            response = await call_next(request)
        except BarrelCoachError as exc:
            response = self._handle_app_error(exc, correlation_id, request)
        except RequestValidationError as exc:
            response = self._handle_app_error(validation_error(exc), correlation_id, request)
        except StarletteHTTPException as exc:
            response = self._handle_http_exception(exc, correlation_id, request)
        except Exception as exc:
            self.logger.exception(
                "unhandled_application_error",
                path=str(request.url.path),
            )
            capture_exception(exc)
            response = JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "success": False,
                    "error": {
                        "code": "internal_server_error",
                        "message": "An unexpected error occurred.",
                        "details": {"type": exc.__class__.__name__},
                    },
                    "correlation_id": correlation_id,
                },
            )
        finally:
            reset_correlation_id(token)
            structlog.contextvars.unbind_contextvars("correlation_id")

        response.headers.setdefault(CORRELATION_HEADER, correlation_id)
        return response

    def _handle_app_error(
        self,
        exc: BarrelCoachError,
        correlation_id: str,
        request: Request,
    ) -> JSONResponse:
        log_method = self.logger.warning if exc.status_code < 500 else self.logger.error
        log_method(
            "handled_application_error",
            code=exc.code,
            message=exc.message,
            path=str(request.url.path),
        )
        if exc.status_code >= 500:
            capture_exception(exc)
        return error_response(exc, correlation_id)

    def _handle_http_exception(
        self,
        exc: StarletteHTTPException,
        correlation_id: str,
        request: Request,
    ) -> JSONResponse:
        """Normalize FastAPI HTTPException responses."""
        log_method = self.logger.warning if exc.status_code < 500 else self.logger.error
        log_method("http_exception", status=exc.status_code, detail=str(exc.detail))
        if exc.status_code >= 500:
            capture_exception(exc)
        return http_error_response(exc, correlation_id)


__all__ = [
    "CORRELATION_HEADER",
    "ErrorHandlingMiddleware",
    "error_response",
    "http_error_response",
    "validation_error",
]
