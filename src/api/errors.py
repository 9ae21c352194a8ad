"""Centralized error translation.

Every failure, whether a ServiceResult error, an HTTPException, a request
validation error or an unexpected exception, is rendered as the same
envelope with `error: true`.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ApiResponse
from domain.model.errors import ServiceResult

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Error forwarded to the centralized handler."""

    def __init__(self, message: str, status_code: int, errors: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or []


def raise_for_result(result: ServiceResult) -> None:
    """Map a failed service result to its HTTP status. No-op on success."""
    if result.error:
        raise ApiError(result.message, result.code, [result.message])


def envelope(data=None, message: str = "", status_code: int = status.HTTP_200_OK) -> ApiResponse:
    return ApiResponse(error=False, errors=[], data=data, message=message, status=status_code)


def error_response(
    message: str,
    status_code: int,
    errors: list[str] | None = None,
    headers: dict | None = None,
) -> JSONResponse:
    body = ApiResponse(
        error=True,
        errors=errors or [],
        data=None,
        message=message,
        status=status_code,
    )
    return JSONResponse(content=body.model_dump(), status_code=status_code, headers=headers)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed", extra={"path": request.url.path, "status": exc.status_code, "error": exc.message})
    return error_response(exc.message, exc.status_code, exc.errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Error"
    return error_response(message, exc.status_code, [message], headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        errors.append(f"{location}: {err.get('msg')}" if location else err.get("msg", "Invalid request"))
    return error_response("Invalid request body", status.HTTP_400_BAD_REQUEST, errors)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        extra={"path": request.url.path, "method": request.method},
        exc_info=exc,
    )
    return error_response("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
