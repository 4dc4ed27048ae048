"""Due reminder and reminder content entities."""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field

from renewals.core.entities.ledger import OVERDUE_LEDGER_OFFSET, ReminderKind
from renewals.core.entities.preference import NotificationChannel
from renewals.core.entities.renewal import EndDateType, TrackedItem, UrgencyLevel


class DueReminder(BaseModel):
    """
    An (item, offset) pair that fires on a given tick.

    Pure Pydantic model, not persisted. Produced by the due-reminder
    finder and consumed by the tick.
    """

    item: TrackedItem
    user_id: int
    offset_days: int
    renewal_date: date
    days_until_renewal: int
    kind: ReminderKind = ReminderKind.LEAD_TIME
    channels: list[NotificationChannel] = Field(default_factory=list)
    urgency_level: UrgencyLevel = UrgencyLevel.STANDARD
    end_date_type: EndDateType = EndDateType.HARD_END

    @property
    def ledger_offset(self) -> int:
        """Offset under which this reminder is deduplicated."""
        if self.kind == ReminderKind.OVERDUE:
            return OVERDUE_LEDGER_OFFSET
        return self.offset_days


class ComplianceWarning(BaseModel):
    """Regulatory or contractual warning attached to a reminder."""

    type: str
    severity: str
    message: str


class ReminderContent(BaseModel):
    """Content handed to the notifier."""

    subject: str
    reminder_type: str
    priority: UrgencyLevel
    item: dict[str, Any]
    timeline: dict[str, Any]
    actions: list[str] = Field(default_factory=list)
    warnings: list[ComplianceWarning] = Field(default_factory=list)
    guidance: str | None = None
    links: dict[str, str | None] = Field(default_factory=dict)


class ReminderStats(BaseModel):
    """Rollup of a user's ledger."""

    user_id: int
    total_sent: int = 0
    by_status: dict[str, int] = Field(default_factory=dict)
    by_channel: dict[str, int] = Field(default_factory=dict)
    by_outcome: dict[str, int] = Field(default_factory=dict)
    opened: int = 0
    clicked: int = 0
    acted: int = 0
    engagement_rate: float = 0.0
