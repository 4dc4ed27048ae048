"""API middleware."""

from renewals.api.middleware.error_handler import ErrorHandlerMiddleware
from renewals.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
