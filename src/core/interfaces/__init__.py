"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.events import IDomainEventDispatcher
from src.core.interfaces.job_dispatch import (
    SWEEP_JOB_ID,
    IJobDispatchGateway,
    reminder_job_id,
)
from src.core.interfaces.notification import INotificationSender
from src.core.interfaces.storage import IReminderStore, IWorkItemStore, WriteOutcome

__all__ = [
    # Storage interfaces
    "IWorkItemStore",
    "IReminderStore",
    "WriteOutcome",
    # Notification interfaces
    "INotificationSender",
    # Scheduler interfaces
    "IJobDispatchGateway",
    "SWEEP_JOB_ID",
    "reminder_job_id",
    # Event interfaces
    "IDomainEventDispatcher",
]
