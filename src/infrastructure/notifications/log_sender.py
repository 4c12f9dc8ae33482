"""Notification sender that writes reminders to the structured log."""

from datetime import datetime

from src.config import get_logger
from src.core.interfaces.notification import INotificationSender

logger = get_logger(__name__)


class LogNotificationSender(INotificationSender):
    """Default sender for development and single-node installs."""

    async def send_reminder_notification(
        self,
        recipient: str,
        work_item_title: str,
        message: str,
        due_date: datetime | None,
    ) -> None:
        logger.info(
            "reminder_notification",
            recipient=recipient,
            work_item_title=work_item_title,
            message=message,
            due_date=due_date.isoformat() if due_date else None,
        )
