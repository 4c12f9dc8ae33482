"""
Domain events raised by work items and reminders.

Events are buffered on the aggregate that raised them and handed to a
dispatcher only after the surrounding write has committed.
"""

from datetime import datetime
from typing import ClassVar

from pydantic import BaseModel, Field

from src.core.clock import utcnow


class DomainEvent(BaseModel):
    """Base class for all domain events."""

    event_type: ClassVar[str] = "domain_event"

    tenant_id: str
    occurred_at: datetime = Field(default_factory=utcnow)


class WorkItemCreated(DomainEvent):
    event_type: ClassVar[str] = "work_item_created"

    work_item_id: str
    title: str
    created_by: str


class WorkItemStateChanged(DomainEvent):
    event_type: ClassVar[str] = "work_item_state_changed"

    work_item_id: str
    previous_state: str
    new_state: str
    changed_by: str


class ReminderScheduled(DomainEvent):
    event_type: ClassVar[str] = "reminder_scheduled"

    reminder_id: str
    work_item_id: str
    trigger_at: datetime
    message: str
    scheduled_by: str


class ReminderTriggered(DomainEvent):
    event_type: ClassVar[str] = "reminder_triggered"

    reminder_id: str
    work_item_id: str
    triggered_at: datetime
    message: str


class ReminderFailed(DomainEvent):
    event_type: ClassVar[str] = "reminder_failed"

    reminder_id: str
    work_item_id: str
    error_message: str


class ReminderCancelled(DomainEvent):
    event_type: ClassVar[str] = "reminder_cancelled"

    reminder_id: str
    work_item_id: str
    cancelled_by: str
