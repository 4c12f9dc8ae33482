"""Data Transfer Objects for the command use cases."""

from src.application.dto.requests import (
    ChangeWorkItemStateRequest,
    CreateWorkItemRequest,
    ListDueRemindersRequest,
    RescheduleReminderRequest,
    ScheduleReminderRequest,
    TriggerReminderRequest,
)

__all__ = [
    "CreateWorkItemRequest",
    "ChangeWorkItemStateRequest",
    "ScheduleReminderRequest",
    "RescheduleReminderRequest",
    "TriggerReminderRequest",
    "ListDueRemindersRequest",
]
