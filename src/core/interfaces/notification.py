"""Notification delivery port."""

from abc import ABC, abstractmethod
from datetime import datetime


class INotificationSender(ABC):
    """
    Delivers reminder notifications to users.

    Retry policy belongs to the implementation; callers treat a raised
    exception as a failed delivery.
    """

    @abstractmethod
    async def send_reminder_notification(
        self,
        recipient: str,
        work_item_title: str,
        message: str,
        due_date: datetime | None,
    ) -> None:
        """Send one reminder notification."""
        pass
