"""Notification delivery implementations."""

from src.infrastructure.notifications.factory import get_notification_sender
from src.infrastructure.notifications.log_sender import LogNotificationSender
from src.infrastructure.notifications.webhook_sender import (
    WebhookNotificationSender,
    get_webhook_sender,
)

__all__ = [
    "LogNotificationSender",
    "WebhookNotificationSender",
    "get_webhook_sender",
    "get_notification_sender",
]
