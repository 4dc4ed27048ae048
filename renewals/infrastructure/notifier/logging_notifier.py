"""Notifier that records reminders in the application log."""

import uuid
from collections.abc import Iterable

from renewals.config import get_logger
from renewals.core.entities.preference import NotificationChannel
from renewals.core.entities.reminder import ReminderContent
from renewals.core.interfaces.notifier import INotifier, NotificationResult

logger = get_logger(__name__)


class LoggingNotifier(INotifier):
    """
    Logs each reminder and reports success.

    Serves the in-app channel, where the client polls the ledger, and
    stands in for every channel when no outbound transport is configured.
    """

    def __init__(self, channels: Iterable[NotificationChannel] | None = None) -> None:
        self._channels = frozenset(channels) if channels is not None else None

    def supports(self, channel: NotificationChannel) -> bool:
        return self._channels is None or channel in self._channels

    async def send(
        self,
        user_id: int,
        item_id: int,
        offset_days: int,
        content: ReminderContent,
        channel: NotificationChannel,
    ) -> NotificationResult:
        message_id = uuid.uuid4().hex
        logger.info(
            "reminder_dispatched",
            channel=channel.value,
            user_id=user_id,
            item_id=item_id,
            offset_days=offset_days,
            subject=content.subject,
            priority=content.priority.value,
            message_id=message_id,
        )
        return NotificationResult(success=True, channel=channel, provider_message_id=message_id)
