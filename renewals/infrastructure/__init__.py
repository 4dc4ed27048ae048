"""Infrastructure layer implementations."""

from renewals.infrastructure import catalog, notifier, storage

__all__ = ["catalog", "notifier", "storage"]
