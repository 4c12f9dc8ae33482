"""Application use cases."""

from src.application.use_cases.cancel_reminder import CancelReminderUseCase
from src.application.use_cases.change_work_item_state import ChangeWorkItemStateUseCase
from src.application.use_cases.create_work_item import CreateWorkItemUseCase
from src.application.use_cases.fire_reminder import ReminderFirer, notification_recipients
from src.application.use_cases.list_due_reminders import ListDueRemindersUseCase
from src.application.use_cases.process_due_sweep import ProcessDueSweepUseCase, SweepReport
from src.application.use_cases.reschedule_reminder import RescheduleReminderUseCase
from src.application.use_cases.schedule_reminder import (
    ScheduleReminderResult,
    ScheduleReminderUseCase,
)
from src.application.use_cases.trigger_reminder import TriggerReminderUseCase

__all__ = [
    # Work items
    "CreateWorkItemUseCase",
    "ChangeWorkItemStateUseCase",
    # Reminders
    "ScheduleReminderUseCase",
    "ScheduleReminderResult",
    "RescheduleReminderUseCase",
    "TriggerReminderUseCase",
    "CancelReminderUseCase",
    "ListDueRemindersUseCase",
    # Fire path and sweep
    "ReminderFirer",
    "notification_recipients",
    "ProcessDueSweepUseCase",
    "SweepReport",
]
