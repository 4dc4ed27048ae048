"""User notification preference entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class NotificationChannel(str, Enum):
    """Delivery channel for a reminder."""

    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"
    IN_APP = "in_app"


class PartialNotificationSettings(BaseModel):
    """
    One layer of notification settings.

    Unset (None) fields fall through to the next layer.
    """

    enabled: bool | None = None
    offsets: list[int] | None = None
    channels: list[NotificationChannel] | None = None

    def is_empty(self) -> bool:
        return self.enabled is None and self.offsets is None and self.channels is None


class NotificationSettings(BaseModel):
    """Fully resolved notification policy."""

    enabled: bool
    offsets: list[int]
    channels: list[NotificationChannel]


class UserPreference(BaseModel):
    """
    Reminder preferences of one user.

    Global settings apply to every item; category overrides are keyed
    by category id and take precedence field by field.
    """

    id: int | None = None
    user_id: int
    global_settings: PartialNotificationSettings = Field(
        default_factory=PartialNotificationSettings
    )
    category_overrides: dict[int, PartialNotificationSettings] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def override_for(self, category_id: int | None) -> PartialNotificationSettings | None:
        if category_id is None:
            return None
        return self.category_overrides.get(category_id)
