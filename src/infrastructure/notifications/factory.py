"""
Notification sender factory.

Creates the sender named by configuration.
"""

from src.config import get_settings
from src.core.exceptions import ConfigurationError
from src.core.interfaces import INotificationSender


def get_notification_sender(provider: str | None = None) -> INotificationSender:
    """
    Get a notification sender instance.

    Args:
        provider: "log" or "webhook" (default from settings)
    """
    provider = provider or get_settings().notifications.provider

    if provider == "log":
        from src.infrastructure.notifications.log_sender import LogNotificationSender

        return LogNotificationSender()

    elif provider == "webhook":
        from src.infrastructure.notifications.webhook_sender import get_webhook_sender

        return get_webhook_sender()

    else:
        raise ConfigurationError(f"Unknown notification provider: {provider}")
