"""Core interfaces (ports) for dependency injection."""

from renewals.core.interfaces.notifier import INotifier, NotificationResult
from renewals.core.interfaces.storage import (
    ICategoryStore,
    IItemStore,
    ILedgerStore,
    IPreferenceStore,
)

__all__ = [
    # Storage interfaces
    "IItemStore",
    "ICategoryStore",
    "IPreferenceStore",
    "ILedgerStore",
    # Notifier interfaces
    "INotifier",
    "NotificationResult",
]
