"""
Error handling middleware.

Every error leaves the API as an `ErrorResponse` envelope carrying a
machine-readable `error_code`, a message, a recovery hint and the
request id bound by the logging middleware.
"""

from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from renewals.application.dto.responses import ErrorResponse
from renewals.config import get_logger
from renewals.core.exceptions import (
    ConfigurationError,
    DuplicateKeyError,
    LedgerEntryNotFoundError,
    NotifierError,
    RenewalsError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Checked in order, so subclasses sit above their bases
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    LedgerEntryNotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateKeyError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    NotifierError: status.HTTP_503_SERVICE_UNAVAILABLE,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

HINTS: dict[str, str] = {
    "VALIDATION_ERROR": "Offsets must be positive, unique and in descending order; 'acted' needs an outcome.",
    "LEDGER_ENTRY_NOT_FOUND": "Use the ledger entry id returned by the tick or the history endpoint.",
    "DUPLICATE_REMINDER": "This reminder is already in the ledger; nothing to do.",
    "NOTIFIER_FAILURE": "The notification provider rejected the request. The next tick retries it.",
    "NOTIFIER_TIMEOUT": "The notification provider did not answer in time. The next tick retries it.",
    "CONFIGURATION_ERROR": "The item's renewal cycle or catalog data is malformed.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "NOT_FOUND": "Check the identifier in the path.",
}

# Codes for bare HTTPExceptions raised by routes or by routing itself
HTTP_ERROR_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "UNPROCESSABLE_ENTITY",
}


def _envelope(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    detail: str | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=HINTS.get(error_code),
        detail=detail,
        path=request.url.path,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert a domain or unexpected exception to the error envelope."""
    status_code = _status_for(exc)
    if isinstance(exc, RenewalsError):
        error_code, message = exc.code, exc.message
        detail = str(exc.details) if exc.details else None
    else:
        error_code, message, detail = "INTERNAL_ERROR", str(exc), None
        if status_code < 500:
            error_code = "BAD_REQUEST"

    # Client errors are routine; only server errors carry a traceback
    if status_code >= 500:
        logger.error("request_exception", error_code=error_code, error=message, exc_info=exc)
    else:
        logger.warning("request_rejected", error_code=error_code, error=message)

    return _envelope(request, status_code, error_code, message, detail)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Catches anything the exception handlers below did not."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return build_error_response(request, e)


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error["loc"] if p != "body")
        parts.append(f"{loc}: {error['msg']}" if loc else error["msg"])
    return "; ".join(parts)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the envelope handlers on the app."""

    @app.exception_handler(RenewalsError)
    async def domain_exception_handler(request: Request, exc: RenewalsError) -> JSONResponse:
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _envelope(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "VALIDATION_ERROR",
            "Request validation failed",
            _describe_validation(exc),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        error_code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
        return _envelope(request, exc.status_code, error_code, str(exc.detail or error_code))
