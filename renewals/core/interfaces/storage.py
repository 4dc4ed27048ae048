"""
Abstract interfaces for storage providers.

Defines contracts for item, category, preference, and ledger stores.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime

from renewals.core.entities.ledger import (
    ContentSnapshot,
    InteractionOutcome,
    InteractionType,
    ReminderKind,
    ReminderLedgerEntry,
)
from renewals.core.entities.preference import (
    NotificationChannel,
    PartialNotificationSettings,
    UserPreference,
)
from renewals.core.entities.renewal import Category, TrackedItem


class IItemStore(ABC):
    """
    Read access to tracked items.

    Items are owned by the CRUD surface; the engine never writes them.
    """

    @abstractmethod
    async def list_active_items(self) -> list[TrackedItem]:
        """List items with renewal tracking enabled, across all users."""
        pass

    @abstractmethod
    async def list_items_for_user(
        self, user_id: int, active_only: bool = True
    ) -> list[TrackedItem]:
        """List a user's items."""
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> TrackedItem | None:
        """Get item by ID."""
        pass


class ICategoryStore(ABC):
    """Read access to the category tree."""

    @abstractmethod
    async def get_category(self, category_id: int) -> Category | None:
        """Get category by ID."""
        pass

    @abstractmethod
    async def get_ancestors(self, category_id: int) -> list[int]:
        """Return parent ids of a category, nearest first."""
        pass


class IPreferenceStore(ABC):
    """
    Abstract interface for user preference storage.

    One preference record per user.
    """

    @abstractmethod
    async def get_by_user(self, user_id: int) -> UserPreference | None:
        """Get a user's preference without creating it."""
        pass

    @abstractmethod
    async def get_or_create(
        self, user_id: int, seed: PartialNotificationSettings
    ) -> UserPreference:
        """
        Return the stored preference or create one with the given global seed.

        Safe under concurrent calls for the same user.
        """
        pass

    @abstractmethod
    async def save(self, preference: UserPreference) -> UserPreference:
        """Persist global settings and category overrides."""
        pass


class ILedgerStore(ABC):
    """
    Abstract interface for the reminder ledger.

    Append-mostly; the composite key is the deduplication unit.
    """

    @abstractmethod
    async def was_reminder_sent(
        self,
        item_id: int,
        user_id: int,
        offset_days: int,
        renewal_date: date,
    ) -> bool:
        """Check whether an entry exists for the key."""
        pass

    @abstractmethod
    async def record_sent(
        self,
        item_id: int,
        user_id: int,
        offset_days: int,
        renewal_date: date,
        channel: NotificationChannel,
        content_snapshot: ContentSnapshot,
        kind: ReminderKind = ReminderKind.LEAD_TIME,
    ) -> ReminderLedgerEntry:
        """
        Create the entry for a dispatched reminder.

        Raises DuplicateKeyError if the key already exists.
        """
        pass

    @abstractmethod
    async def track_interaction(
        self,
        entry_id: int,
        interaction_type: InteractionType,
        outcome: InteractionOutcome | None = None,
        occurred_at: datetime | None = None,
    ) -> ReminderLedgerEntry:
        """Append an interaction, ignoring same-minute repeats."""
        pass

    @abstractmethod
    async def mark_failed(self, entry_id: int, error_message: str) -> ReminderLedgerEntry:
        """Flag a reported delivery failure."""
        pass

    @abstractmethod
    async def get_entry(self, entry_id: int) -> ReminderLedgerEntry | None:
        """Get entry by ID with its interactions."""
        pass

    @abstractmethod
    async def list_by_user(self, user_id: int) -> list[ReminderLedgerEntry]:
        """List a user's entries with interactions, newest first."""
        pass
