"""
Work item aggregate.

Owns the work item lifecycle and its reminder collection. The allowed
transitions live in ALLOWED_TRANSITIONS; the imperative methods below and
the scheduling policy both read that table, so "may I" and "do it" cannot
disagree.
"""

from collections.abc import Iterable
from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator

from src.core.clock import ensure_utc, utcnow
from src.core.entities.base import AuditableEntity, require_actor
from src.core.entities.events import (
    ReminderScheduled,
    WorkItemCreated,
    WorkItemStateChanged,
)
from src.core.entities.reminder import Reminder
from src.core.exceptions import InvalidStateError, ValidationError

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 2000
MAX_HOURS = 1000
MAX_TAGS = 10
MAX_TAG_LENGTH = 50


class WorkItemState(str, Enum):
    """Work item lifecycle state."""

    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"
    CANCELLED = "cancelled"
    ARCHIVED = "archived"


class WorkItemPriority(str, Enum):
    """Work item priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


ALLOWED_TRANSITIONS: dict[WorkItemState, frozenset[WorkItemState]] = {
    WorkItemState.DRAFT: frozenset(
        {
            WorkItemState.IN_PROGRESS,
            WorkItemState.ON_HOLD,
            WorkItemState.CANCELLED,
            WorkItemState.ARCHIVED,
        }
    ),
    WorkItemState.IN_PROGRESS: frozenset(
        {
            WorkItemState.DRAFT,
            WorkItemState.COMPLETED,
            WorkItemState.ON_HOLD,
            WorkItemState.CANCELLED,
            WorkItemState.ARCHIVED,
        }
    ),
    WorkItemState.COMPLETED: frozenset({WorkItemState.DRAFT, WorkItemState.ARCHIVED}),
    WorkItemState.ON_HOLD: frozenset(
        {
            WorkItemState.IN_PROGRESS,
            WorkItemState.CANCELLED,
            WorkItemState.ARCHIVED,
        }
    ),
    WorkItemState.CANCELLED: frozenset({WorkItemState.DRAFT, WorkItemState.ARCHIVED}),
    WorkItemState.ARCHIVED: frozenset(),
}

# States in which an open due date no longer counts as overdue
RESOLVED_STATES = frozenset(
    {WorkItemState.COMPLETED, WorkItemState.ARCHIVED, WorkItemState.CANCELLED}
)


def is_transition_allowed(current: WorkItemState, target: WorkItemState) -> bool:
    """Check the transition table."""
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def _validate_title(title: str) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("title", "Title is required")
    if len(cleaned) > MAX_TITLE_LENGTH:
        raise ValidationError(
            "title", f"Title must not exceed {MAX_TITLE_LENGTH} characters", value=cleaned
        )
    return cleaned


def _validate_description(description: str | None) -> str | None:
    if description is not None and len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            "description",
            f"Description must not exceed {MAX_DESCRIPTION_LENGTH} characters",
        )
    return description


def _validate_hours(field: str, hours: int) -> int:
    if hours < 0 or hours > MAX_HOURS:
        raise ValidationError(field, f"Must be between 0 and {MAX_HOURS}", value=hours)
    return hours


class WorkItem(AuditableEntity):
    """A unit of work tracked per tenant."""

    title: str
    description: str | None = None
    priority: WorkItemPriority = WorkItemPriority.MEDIUM
    state: WorkItemState = WorkItemState.DRAFT
    due_date: datetime | None = None
    completed_at: datetime | None = None
    estimated_hours: int = 0
    actual_hours: int = 0
    tags: list[str] = Field(default_factory=list)

    # Soft delete
    deleted_by: str | None = None
    deleted_at: datetime | None = None

    reminders: list[Reminder] = Field(default_factory=list)

    @field_validator("due_date", "completed_at", "deleted_at", mode="after")
    @classmethod
    def _normalize_times(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None

    @classmethod
    def create(
        cls,
        *,
        tenant_id: str,
        title: str,
        actor: str,
        description: str | None = None,
        priority: WorkItemPriority = WorkItemPriority.MEDIUM,
        due_date: datetime | None = None,
        estimated_hours: int = 0,
        tags: Iterable[str] = (),
        now: datetime | None = None,
    ) -> "WorkItem":
        """Create a Draft work item and raise WorkItemCreated."""
        if not tenant_id:
            raise ValidationError("tenant_id", "Tenant id is required")
        actor = require_actor(actor)
        now = ensure_utc(now) if now is not None else utcnow()

        item = cls(
            tenant_id=tenant_id,
            title=_validate_title(title),
            description=_validate_description(description),
            priority=priority,
            due_date=due_date,
            estimated_hours=_validate_hours("estimated_hours", estimated_hours),
            created_by=actor,
            created_at=now,
        )
        for tag in tags:
            item._add_tag(tag)
        item.record_event(
            WorkItemCreated(
                tenant_id=tenant_id,
                work_item_id=item.id,
                title=item.title,
                created_by=actor,
                occurred_at=now,
            )
        )
        return item

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def is_overdue(self, as_of: datetime | None = None) -> bool:
        if self.due_date is None:
            return False
        as_of = ensure_utc(as_of) if as_of is not None else utcnow()
        return self.due_date < as_of and self.state not in RESOLVED_STATES

    def pending_reminders(self) -> list[Reminder]:
        return [r for r in self.reminders if r.is_pending()]

    def can_transition_to(self, target: WorkItemState) -> bool:
        """Mirror of the guard in _transition (deleted items never move)."""
        return not self.is_deleted and is_transition_allowed(self.state, target)

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def _ensure_mutable(self, operation: str) -> None:
        if self.state == WorkItemState.ARCHIVED:
            raise InvalidStateError("work item", self.id, self.state.value, operation)
        if self.is_deleted:
            raise InvalidStateError("work item", self.id, "deleted", operation)

    def _transition(
        self, target: WorkItemState, actor: str, now: datetime | None
    ) -> datetime:
        operation = f"move to {target.value}"
        self._ensure_mutable(operation)
        if not is_transition_allowed(self.state, target):
            raise InvalidStateError("work item", self.id, self.state.value, operation)
        actor = require_actor(actor)
        now = ensure_utc(now) if now is not None else utcnow()

        previous = self.state
        self.state = target
        self._stamp_updated(actor, now)
        self.record_event(
            WorkItemStateChanged(
                tenant_id=self.tenant_id,
                work_item_id=self.id,
                previous_state=previous.value,
                new_state=target.value,
                changed_by=actor,
                occurred_at=now,
            )
        )
        return now

    def _cancel_pending_reminders(self, actor: str, now: datetime) -> list[Reminder]:
        cancelled = []
        for reminder in self.pending_reminders():
            reminder.cancel(actor, now=now)
            cancelled.append(reminder)
        return cancelled

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self, actor: str, *, now: datetime | None = None) -> None:
        self._transition(WorkItemState.IN_PROGRESS, actor, now)

    def complete(
        self,
        actor: str,
        actual_hours: int = 0,
        *,
        now: datetime | None = None,
    ) -> list[Reminder]:
        """Complete the item; returns the pending reminders it cancelled."""
        _validate_hours("actual_hours", actual_hours)
        now = self._transition(WorkItemState.COMPLETED, actor, now)
        self.completed_at = now
        self.actual_hours = actual_hours
        return self._cancel_pending_reminders(actor, now)

    def hold(self, actor: str, *, now: datetime | None = None) -> None:
        self._transition(WorkItemState.ON_HOLD, actor, now)

    def cancel(self, actor: str, *, now: datetime | None = None) -> None:
        self._transition(WorkItemState.CANCELLED, actor, now)

    def archive(self, actor: str, *, now: datetime | None = None) -> list[Reminder]:
        """Archive the item; returns the pending reminders it cancelled."""
        now = self._transition(WorkItemState.ARCHIVED, actor, now)
        return self._cancel_pending_reminders(actor, now)

    def reopen(self, actor: str, *, now: datetime | None = None) -> None:
        self._transition(WorkItemState.DRAFT, actor, now)
        self.completed_at = None

    def transition_to(
        self,
        target: WorkItemState,
        actor: str,
        *,
        actual_hours: int | None = None,
        now: datetime | None = None,
    ) -> list[Reminder]:
        """Move to target via the matching operation; returns cancelled reminders."""
        if target == WorkItemState.IN_PROGRESS:
            self.start(actor, now=now)
        elif target == WorkItemState.COMPLETED:
            return self.complete(actor, actual_hours or 0, now=now)
        elif target == WorkItemState.ON_HOLD:
            self.hold(actor, now=now)
        elif target == WorkItemState.CANCELLED:
            self.cancel(actor, now=now)
        elif target == WorkItemState.ARCHIVED:
            return self.archive(actor, now=now)
        elif target == WorkItemState.DRAFT:
            self.reopen(actor, now=now)
        return []

    # ------------------------------------------------------------------
    # Field mutation
    # ------------------------------------------------------------------

    def update_details(
        self,
        *,
        title: str,
        actor: str,
        description: str | None = None,
        priority: WorkItemPriority | None = None,
        due_date: datetime | None = None,
        estimated_hours: int | None = None,
        now: datetime | None = None,
    ) -> None:
        self._ensure_mutable("update")
        require_actor(actor)
        title = _validate_title(title)
        description = _validate_description(description)
        if estimated_hours is not None:
            _validate_hours("estimated_hours", estimated_hours)

        self.title = title
        self.description = description
        if priority is not None:
            self.priority = priority
        self.due_date = ensure_utc(due_date) if due_date is not None else None
        if estimated_hours is not None:
            self.estimated_hours = estimated_hours
        self._stamp_updated(actor, ensure_utc(now) if now is not None else utcnow())

    def _add_tag(self, tag: str) -> bool:
        cleaned = (tag or "").strip()
        if not cleaned:
            raise ValidationError("tag", "Tag is required")
        if len(cleaned) > MAX_TAG_LENGTH:
            raise ValidationError(
                "tag", f"Tag must not exceed {MAX_TAG_LENGTH} characters", value=cleaned
            )
        if cleaned in self.tags:
            return False
        if len(self.tags) >= MAX_TAGS:
            raise ValidationError("tags", f"Cannot have more than {MAX_TAGS} tags")
        self.tags.append(cleaned)
        return True

    def add_tag(self, tag: str, actor: str, *, now: datetime | None = None) -> None:
        self._ensure_mutable("add tag to")
        require_actor(actor)
        if self._add_tag(tag):
            self._stamp_updated(actor, ensure_utc(now) if now is not None else utcnow())

    def remove_tag(self, tag: str, actor: str, *, now: datetime | None = None) -> None:
        self._ensure_mutable("remove tag from")
        require_actor(actor)
        if tag in self.tags:
            self.tags.remove(tag)
            self._stamp_updated(actor, ensure_utc(now) if now is not None else utcnow())

    def add_reminder(
        self, reminder: Reminder, actor: str, *, now: datetime | None = None
    ) -> None:
        self._ensure_mutable("add reminder to")
        if reminder.work_item_id != self.id or reminder.tenant_id != self.tenant_id:
            raise ValidationError(
                "reminder", "Reminder belongs to a different work item", value=reminder.id
            )
        if any(r.id == reminder.id for r in self.reminders):
            raise ValidationError("reminder", "Reminder already exists", value=reminder.id)

        now = ensure_utc(now) if now is not None else utcnow()
        self._stamp_updated(actor, now)
        self.reminders.append(reminder)
        self.record_event(
            ReminderScheduled(
                tenant_id=self.tenant_id,
                reminder_id=reminder.id,
                work_item_id=self.id,
                trigger_at=reminder.trigger_at,
                message=reminder.message,
                scheduled_by=reminder.created_by,
                occurred_at=now,
            )
        )

    def mark_as_deleted(self, actor: str, *, now: datetime | None = None) -> None:
        """Soft delete; the lifecycle state is left untouched."""
        self._ensure_mutable("delete")
        now = ensure_utc(now) if now is not None else utcnow()
        self._stamp_updated(actor, now)
        self.deleted_by = self.updated_by
        self.deleted_at = now
