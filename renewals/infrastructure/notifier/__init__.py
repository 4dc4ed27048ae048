"""Notifier adapters."""

from renewals.config import Settings, get_logger, get_settings
from renewals.core.entities.preference import NotificationChannel
from renewals.core.interfaces.notifier import INotifier
from renewals.infrastructure.notifier.logging_notifier import LoggingNotifier
from renewals.infrastructure.notifier.router import ChannelRouter
from renewals.infrastructure.notifier.webhook import WebhookNotifier

logger = get_logger(__name__)

_notifier: INotifier | None = None


def build_notifier(settings: Settings | None = None) -> INotifier:
    """
    Compose the notifier from settings.

    With a webhook URL, email, SMS and push go out through the webhook;
    in-app reminders are always handled locally.
    """
    settings = settings or get_settings()
    local = LoggingNotifier()

    if not settings.notifier.webhook_url:
        return ChannelRouter({}, default=local)

    webhook = WebhookNotifier(
        url=settings.notifier.webhook_url,
        timeout=settings.notifier.timeout,
        max_retries=settings.notifier.max_retries,
        retry_delay=settings.notifier.retry_delay,
    )
    routes: dict[NotificationChannel, INotifier] = {
        NotificationChannel.EMAIL: webhook,
        NotificationChannel.SMS: webhook,
        NotificationChannel.PUSH: webhook,
        NotificationChannel.IN_APP: local,
    }
    return ChannelRouter(routes)


def get_notifier() -> INotifier:
    """Get singleton notifier instance."""
    global _notifier
    if _notifier is None:
        _notifier = build_notifier()
        logger.info("notifier_configured", notifier=type(_notifier).__name__)
    return _notifier


def reset_notifier() -> None:
    """Reset the notifier singleton (for testing)."""
    global _notifier
    _notifier = None


__all__ = [
    "ChannelRouter",
    "LoggingNotifier",
    "WebhookNotifier",
    "build_notifier",
    "get_notifier",
    "reset_notifier",
]
