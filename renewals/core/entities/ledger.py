"""Reminder ledger entities: the audit and deduplication record."""

from datetime import UTC, date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from renewals.core.entities.preference import NotificationChannel

# Overdue reminders are ledgered under this offset. User offsets are
# strictly positive, so it never collides with a lead-time reminder.
OVERDUE_LEDGER_OFFSET = 0


class ReminderKind(str, Enum):
    """Class of reminder."""

    LEAD_TIME = "lead_time"
    OVERDUE = "overdue"


class LedgerStatus(str, Enum):
    """Delivery status of a ledger entry."""

    SENT = "sent"
    FAILED = "failed"


class InteractionType(str, Enum):
    """User interaction with a delivered reminder."""

    OPENED = "opened"
    CLICKED = "clicked"
    ACTED = "acted"


class InteractionOutcome(str, Enum):
    """What the user did after acting on a reminder."""

    RENEWED = "renewed"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"
    IGNORED = "ignored"


class Interaction(BaseModel):
    """A single interaction event."""

    type: InteractionType
    outcome: InteractionOutcome | None = None
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def minute_bucket(self) -> str:
        return self.occurred_at.replace(second=0, microsecond=0).isoformat()


class ContentSnapshot(BaseModel):
    """Denormalized content at the time of sending, for audit."""

    title: str
    provider: str | None = None
    renewal_cycle: str | None = None
    subject: str | None = None
    reminder_type: str | None = None


class ReminderLedgerEntry(BaseModel):
    """
    One delivered reminder.

    Identity is (item_id, user_id, offset_days, renewal_date). Immutable
    once created except for the append-only interaction list and the
    status flip on a reported delivery failure.
    """

    id: int | None = None
    item_id: int
    user_id: int
    offset_days: int
    renewal_date: date
    kind: ReminderKind = ReminderKind.LEAD_TIME
    status: LedgerStatus = LedgerStatus.SENT
    channel: NotificationChannel
    content_snapshot: ContentSnapshot
    interactions: list[Interaction] = Field(default_factory=list)
    error_message: str | None = None
    sent_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def dedup_key(self) -> tuple[int, int, int, date]:
        return (self.item_id, self.user_id, self.offset_days, self.renewal_date)
