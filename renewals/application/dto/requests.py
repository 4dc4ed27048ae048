"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from renewals.core.entities.ledger import InteractionOutcome, InteractionType
from renewals.core.entities.preference import NotificationChannel, PartialNotificationSettings


class NotificationSettingsRequest(BaseModel):
    """Partial notification settings.

    Omitted or null fields inherit from the next layer. Offsets must be
    positive, unique, and ordered largest first.
    """

    enabled: bool | None = Field(default=None, description="Reminders on or off")
    offsets: list[int] | None = Field(
        default=None,
        description="Lead times in days before renewal, descending",
        examples=[[60, 30, 7]],
    )
    channels: list[NotificationChannel] | None = Field(
        default=None,
        description="Delivery channels in order of preference",
        examples=[["email", "in_app"]],
    )

    def to_partial(self) -> PartialNotificationSettings:
        return PartialNotificationSettings(
            enabled=self.enabled,
            offsets=self.offsets,
            channels=self.channels,
        )


class ProcessRemindersRequest(BaseModel):
    """Request to run one reminder tick."""

    as_of: date | None = Field(
        default=None,
        description="Evaluation day (defaults to today)",
    )


class TrackInteractionRequest(BaseModel):
    """Interaction event from click tracking or a delivery receipt."""

    type: InteractionType = Field(..., description="opened, clicked or acted")
    outcome: InteractionOutcome | None = Field(
        default=None,
        description="Required when type is 'acted'",
    )
    occurred_at: datetime | None = Field(
        default=None,
        description="Event time (defaults to now)",
    )


class MarkFailedRequest(BaseModel):
    """Delivery failure reported after the notifier accepted a reminder."""

    error_message: str = Field(..., min_length=1, max_length=1000)
