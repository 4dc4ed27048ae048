"""
Abstract interface for reminder delivery.

The transport itself is outside the engine; implementations only
report whether dispatch succeeded.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from renewals.core.entities.preference import NotificationChannel
from renewals.core.entities.reminder import ReminderContent


@dataclass
class NotificationResult:
    """Outcome of a single dispatch."""

    success: bool
    channel: NotificationChannel
    provider_message_id: str | None = None
    error: str | None = None


class INotifier(ABC):
    """Abstract interface for notifiers."""

    @abstractmethod
    async def send(
        self,
        user_id: int,
        item_id: int,
        offset_days: int,
        content: ReminderContent,
        channel: NotificationChannel,
    ) -> NotificationResult:
        """Dispatch a reminder on one channel."""
        pass

    def supports(self, channel: NotificationChannel) -> bool:
        """Whether this notifier can deliver on the channel."""
        return True
