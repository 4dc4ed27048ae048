"""
Request logging middleware.

Binds a request id to structlog's contextvars for the duration of the
request, so ledger, preference and notifier events logged by the handler
carry it too.
"""

import time
import uuid
from collections.abc import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from renewals.config import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Liveness probes hit these every few seconds
_QUIET_PATHS = frozenset({"/health", "/api/health"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs one event per request with status and timing."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        log = logger.debug if request.url.path in _QUIET_PATHS else logger.info

        start = time.perf_counter()
        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        ):
            try:
                response = await call_next(request)
            except Exception:
                logger.exception(
                    "request_failed",
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                )
                raise

            duration_ms = (time.perf_counter() - start) * 1000
            log("request_completed", status=response.status_code, duration_ms=round(duration_ms, 2))

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response
