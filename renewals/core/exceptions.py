"""
Domain exceptions for the renewal reminder engine.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class RenewalsError(Exception):
    """Base exception for all renewal engine errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(RenewalsError):
    """Base exception for storage operations."""

    pass


class DuplicateKeyError(StorageError):
    """A ledger entry already exists for the reminder key.

    Raised when a concurrent tick already recorded the same reminder.
    Callers treat it as a no-op.
    """

    def __init__(
        self,
        item_id: int,
        user_id: int,
        offset_days: int,
        renewal_date: str,
    ):
        super().__init__(
            f"Reminder already recorded for item {item_id} "
            f"(offset {offset_days}, renewal {renewal_date})",
            code="DUPLICATE_REMINDER",
            details={
                "item_id": item_id,
                "user_id": user_id,
                "offset_days": offset_days,
                "renewal_date": renewal_date,
            },
        )


class LedgerEntryNotFoundError(StorageError):
    """Ledger entry not found."""

    def __init__(self, entry_id: int):
        super().__init__(
            f"Ledger entry not found: {entry_id}",
            code="LEDGER_ENTRY_NOT_FOUND",
            details={"entry_id": entry_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Notifier Exceptions
class NotifierError(RenewalsError):
    """Notification dispatch failed."""

    def __init__(self, channel: str, reason: str, item_id: int | None = None):
        super().__init__(
            f"Notifier failed on {channel}: {reason}",
            code="NOTIFIER_FAILURE",
            details={"channel": channel, "reason": reason, "item_id": item_id},
        )


class NotifierTimeoutError(NotifierError):
    """Notifier did not answer within the configured bound."""

    def __init__(self, channel: str, timeout: float, item_id: int | None = None):
        super().__init__(channel, f"timed out after {timeout}s", item_id=item_id)
        self.code = "NOTIFIER_TIMEOUT"
        self.details["timeout"] = timeout


# Validation Exceptions
class ValidationError(RenewalsError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class ConfigurationError(RenewalsError):
    """Malformed catalog or renewal data.

    Fatal to the single item being processed, never to a whole tick.
    """

    def __init__(
        self,
        message: str,
        item_id: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        merged = dict(details or {})
        if item_id is not None:
            merged["item_id"] = item_id
        super().__init__(message, code="CONFIGURATION_ERROR", details=merged)
