"""Core domain entities."""

from src.core.entities.base import AuditableEntity, new_id
from src.core.entities.events import (
    DomainEvent,
    ReminderCancelled,
    ReminderFailed,
    ReminderScheduled,
    ReminderTriggered,
    WorkItemCreated,
    WorkItemStateChanged,
)
from src.core.entities.reminder import (
    DEFAULT_LEAD_TIME,
    Reminder,
    ReminderStatus,
)
from src.core.entities.work_item import (
    ALLOWED_TRANSITIONS,
    WorkItem,
    WorkItemPriority,
    WorkItemState,
    is_transition_allowed,
)

__all__ = [
    # Base
    "AuditableEntity",
    "new_id",
    # Work item entities
    "WorkItem",
    "WorkItemState",
    "WorkItemPriority",
    "ALLOWED_TRANSITIONS",
    "is_transition_allowed",
    # Reminder entities
    "Reminder",
    "ReminderStatus",
    "DEFAULT_LEAD_TIME",
    # Domain events
    "DomainEvent",
    "WorkItemCreated",
    "WorkItemStateChanged",
    "ReminderScheduled",
    "ReminderTriggered",
    "ReminderFailed",
    "ReminderCancelled",
]
