"""Error taxonomy and the handlers that render it as the JSON envelope.

Every response, failed or not, has the shape
``{"success": bool, "message": str, "data": ..., "error": ...}``.
Services raise the exceptions below; routers let them propagate.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, data: Any = None):
        self.message = message or self.default_message
        self.data = data
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class AuthError(AppError):
    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Admin privileges required"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource already exists"


def envelope(
    success: bool,
    message: Optional[str] = None,
    data: Any = None,
    error: Any = None,
) -> dict:
    body: dict = {"success": success}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if error is not None:
        body["error"] = error
    return body


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = first.get("msg", ValidationError.default_message)
    return f"{location}: {message}" if location else message


def install_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        return JSONResponse(
            status_code=exc.status_code,
            content=envelope(False, exc.message, data=exc.data),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=envelope(False, _first_validation_message(exc)))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content=envelope(False, str(exc.detail)))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        error = str(exc)
        if not settings.is_production:
            error = {"message": str(exc), "stack": traceback.format_exception(type(exc), exc, exc.__traceback__)}
        return JSONResponse(status_code=500, content=envelope(False, "Internal server error", error=error))
