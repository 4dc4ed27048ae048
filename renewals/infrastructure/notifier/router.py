"""Dispatches each channel to the notifier configured for it."""

from collections.abc import Mapping

from renewals.core.entities.preference import NotificationChannel
from renewals.core.entities.reminder import ReminderContent
from renewals.core.exceptions import NotifierError
from renewals.core.interfaces.notifier import INotifier, NotificationResult


class ChannelRouter(INotifier):
    """Routes by channel, falling back to a default notifier."""

    def __init__(
        self,
        routes: Mapping[NotificationChannel, INotifier],
        default: INotifier | None = None,
    ) -> None:
        self._routes = dict(routes)
        self._default = default

    def _target(self, channel: NotificationChannel) -> INotifier | None:
        notifier = self._routes.get(channel, self._default)
        if notifier is not None and notifier.supports(channel):
            return notifier
        return None

    def supports(self, channel: NotificationChannel) -> bool:
        return self._target(channel) is not None

    async def send(
        self,
        user_id: int,
        item_id: int,
        offset_days: int,
        content: ReminderContent,
        channel: NotificationChannel,
    ) -> NotificationResult:
        notifier = self._target(channel)
        if notifier is None:
            raise NotifierError(channel.value, "no notifier configured", item_id=item_id)
        return await notifier.send(user_id, item_id, offset_days, content, channel)
