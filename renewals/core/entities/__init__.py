"""Core domain entities."""

from renewals.core.entities.catalog import CatalogEntry, ProductCatalog
from renewals.core.entities.ledger import (
    OVERDUE_LEDGER_OFFSET,
    ContentSnapshot,
    Interaction,
    InteractionOutcome,
    InteractionType,
    LedgerStatus,
    ReminderKind,
    ReminderLedgerEntry,
)
from renewals.core.entities.preference import (
    NotificationChannel,
    NotificationSettings,
    PartialNotificationSettings,
    UserPreference,
)
from renewals.core.entities.reminder import (
    ComplianceWarning,
    DueReminder,
    ReminderContent,
    ReminderStats,
)
from renewals.core.entities.renewal import (
    Category,
    EndDateType,
    RenewalCycle,
    RenewalInfo,
    TrackedItem,
    UrgencyLevel,
)

__all__ = [
    # Catalog
    "CatalogEntry",
    "ProductCatalog",
    # Items
    "Category",
    "EndDateType",
    "RenewalCycle",
    "RenewalInfo",
    "TrackedItem",
    "UrgencyLevel",
    # Preferences
    "NotificationChannel",
    "NotificationSettings",
    "PartialNotificationSettings",
    "UserPreference",
    # Ledger
    "OVERDUE_LEDGER_OFFSET",
    "ContentSnapshot",
    "Interaction",
    "InteractionOutcome",
    "InteractionType",
    "LedgerStatus",
    "ReminderKind",
    "ReminderLedgerEntry",
    # Reminders
    "ComplianceWarning",
    "DueReminder",
    "ReminderContent",
    "ReminderStats",
]
