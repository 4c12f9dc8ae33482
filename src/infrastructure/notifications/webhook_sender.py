"""
Webhook notification sender.

POSTs one JSON document per recipient. Transport failures are retried
with exponential backoff; any non-2xx answer is a delivery failure.
"""

from datetime import datetime
from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.config import get_logger, get_settings
from src.core.exceptions import ConfigurationError, NotificationError
from src.core.interfaces.notification import INotificationSender

logger = get_logger(__name__)


class WebhookNotificationSender(INotificationSender):
    """
    Delivers reminder notifications to an HTTP endpoint.

    Args:
        url: Endpoint receiving the POST
        timeout: Per-request timeout in seconds
        max_retries: Attempts per notification on transport errors
        retry_delay: Base delay for exponential backoff
        transport: Optional httpx transport (tests pass a MockTransport)
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        max_retries: int = 3,
        retry_delay: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not url:
            raise ConfigurationError("Webhook notifications need NOTIFY_WEBHOOK_URL")
        self.url = url
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.transport = transport

    def _get_retry_decorator(self) -> Any:
        return retry(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(
                multiplier=self.retry_delay,
                min=self.retry_delay,
                max=self.retry_delay * 8,
            ),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "webhook_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _post(self, payload: dict) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            return await client.post(self.url, json=payload)

    async def send_reminder_notification(
        self,
        recipient: str,
        work_item_title: str,
        message: str,
        due_date: datetime | None,
    ) -> None:
        payload = {
            "recipient": recipient,
            "work_item_title": work_item_title,
            "message": message,
            "due_date": due_date.isoformat() if due_date else None,
        }

        try:
            response = await self._get_retry_decorator()(self._post)(payload)
        except httpx.HTTPError as e:
            raise NotificationError(recipient, f"{type(e).__name__}: {e}") from e

        if response.status_code >= 300:
            raise NotificationError(
                recipient, f"HTTP {response.status_code}: {response.text[:200]}"
            )

        logger.info(
            "webhook_notification_sent",
            recipient=recipient,
            status_code=response.status_code,
        )


def get_webhook_sender() -> WebhookNotificationSender:
    """Build a webhook sender from settings."""
    settings = get_settings().notifications
    return WebhookNotificationSender(
        url=settings.webhook_url,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
        retry_delay=settings.retry_delay,
    )
