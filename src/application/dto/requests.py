"""Request DTOs for the command use cases.

Pydantic v2 models carrying command input. Only shapes and types are
checked here; business rules (lengths, lead time, limits) are enforced by
the entities so that every caller gets the same ValidationError.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from src.core.entities.work_item import WorkItemPriority, WorkItemState


class CreateWorkItemRequest(BaseModel):
    """Request to create a Draft work item."""

    title: str = Field(..., description="Unique within the tenant, up to 200 characters")
    description: str | None = Field(default=None, description="Free text, up to 2000 characters")
    priority: WorkItemPriority = WorkItemPriority.MEDIUM
    due_date: datetime | None = Field(default=None, description="UTC due date")
    estimated_hours: int = Field(default=0, description="0 to 1000")
    tags: list[str] = Field(default_factory=list, description="Up to 10 tags")


class ChangeWorkItemStateRequest(BaseModel):
    """Request to move a work item to another lifecycle state."""

    work_item_id: str
    target_state: WorkItemState
    actual_hours: int | None = Field(
        default=None,
        description="Hours spent, recorded when completing",
    )


class ScheduleReminderRequest(BaseModel):
    """Request to attach a reminder to a work item."""

    work_item_id: str
    trigger_at: datetime = Field(..., description="UTC trigger time, beyond the lead time")
    message: str = Field(..., description="Up to 500 characters")


class RescheduleReminderRequest(BaseModel):
    """Request to move a Scheduled reminder, optionally replacing its message."""

    reminder_id: str
    new_trigger_at: datetime
    message: str | None = None


class TriggerReminderRequest(BaseModel):
    """Request to fire a reminder now, or to record it as failed.

    With error_message set the reminder is marked Failed without notifying.
    """

    reminder_id: str
    error_message: str | None = None


class ListDueRemindersRequest(BaseModel):
    """Query for reminders due at a point in time."""

    as_of: datetime | None = Field(default=None, description="Defaults to now")
    limit: int = 100
