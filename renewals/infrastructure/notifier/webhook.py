"""
Webhook notifier.

Posts reminder content as JSON to an outbound delivery service, which
owns templates and providers. Transport errors are retried with
exponential backoff; the caller bounds the whole call with its own
timeout.
"""

from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from renewals.config import get_logger
from renewals.core.entities.preference import NotificationChannel
from renewals.core.entities.reminder import ReminderContent
from renewals.core.exceptions import NotifierError
from renewals.core.interfaces.notifier import INotifier, NotificationResult

logger = get_logger(__name__)

_RETRYABLE = (httpx.TransportError,)


class WebhookNotifier(INotifier):
    """HTTP POST delivery with tenacity retries."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        max_retries: int = 2,
        retry_delay: float = 0.5,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._client = client

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.retry_delay, min=self.retry_delay),
            retry=retry_if_exception_type(_RETRYABLE),
            before_sleep=self._log_retry,
            reraise=False,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "webhook_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    def _payload(
        self,
        user_id: int,
        item_id: int,
        offset_days: int,
        content: ReminderContent,
        channel: NotificationChannel,
    ) -> dict[str, Any]:
        return {
            "user_id": user_id,
            "item_id": item_id,
            "offset_days": offset_days,
            "channel": channel.value,
            "content": content.model_dump(mode="json"),
        }

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(self.url, json=payload, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.url, json=payload)

    async def send(
        self,
        user_id: int,
        item_id: int,
        offset_days: int,
        content: ReminderContent,
        channel: NotificationChannel,
    ) -> NotificationResult:
        payload = self._payload(user_id, item_id, offset_days, content, channel)

        try:
            async for attempt in self._retrying():
                with attempt:
                    response = await self._post(payload)
        except RetryError as e:
            cause = e.last_attempt.exception()
            raise NotifierError(channel.value, str(cause), item_id=item_id) from cause

        if response.status_code >= 400:
            logger.warning(
                "webhook_rejected",
                channel=channel.value,
                item_id=item_id,
                status=response.status_code,
            )
            return NotificationResult(
                success=False,
                channel=channel,
                error=f"HTTP {response.status_code}: {response.text[:200]}",
            )

        message_id = None
        if response.headers.get("content-type", "").startswith("application/json"):
            message_id = response.json().get("id")

        return NotificationResult(
            success=True,
            channel=channel,
            provider_message_id=str(message_id) if message_id is not None else None,
        )
