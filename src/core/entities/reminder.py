"""
Reminder entity and its lifecycle.

A reminder starts Scheduled and leaves that state exactly once, to
Triggered, Failed or Cancelled. Every transition checks the current status
first; that check, repeated by the store's conditional write on status and
row_version, is what keeps a reminder from firing twice. Before delivery a
firer claims the reminder, so other firers leave it alone while the
notification is out.
"""

from datetime import datetime, timedelta
from enum import Enum

from pydantic import field_validator

from src.core.clock import ensure_utc, utcnow
from src.core.entities.base import AuditableEntity, require_actor
from src.core.entities.events import (
    ReminderCancelled,
    ReminderFailed,
    ReminderTriggered,
)
from src.core.exceptions import InvalidStateError, ValidationError

DEFAULT_LEAD_TIME = timedelta(minutes=5)
DEFAULT_OVERDUE_GRACE = timedelta(minutes=5)
DEFAULT_CLAIM_TIMEOUT = timedelta(minutes=5)
MAX_MESSAGE_LENGTH = 500
MAX_ERROR_LENGTH = 1000


class ReminderStatus(str, Enum):
    """Reminder lifecycle status."""

    SCHEDULED = "scheduled"
    TRIGGERED = "triggered"
    CANCELLED = "cancelled"
    FAILED = "failed"


def validate_message(message: str) -> str:
    """Trim and check a reminder message."""
    cleaned = (message or "").strip()
    if not cleaned:
        raise ValidationError("message", "Message is required")
    if len(cleaned) > MAX_MESSAGE_LENGTH:
        raise ValidationError(
            "message",
            f"Message must not exceed {MAX_MESSAGE_LENGTH} characters",
            value=cleaned,
        )
    return cleaned


def validate_trigger_time(
    trigger_at: datetime,
    now: datetime | None = None,
    lead_time: timedelta = DEFAULT_LEAD_TIME,
) -> datetime:
    """Require trigger_at to be strictly later than now + lead_time."""
    trigger_at = ensure_utc(trigger_at)
    now = ensure_utc(now) if now is not None else utcnow()
    if trigger_at <= now + lead_time:
        minutes = int(lead_time.total_seconds() // 60)
        raise ValidationError(
            "trigger_at",
            f"Reminder time must be at least {minutes} minutes in the future",
            value=trigger_at.isoformat(),
        )
    return trigger_at


class Reminder(AuditableEntity):
    """A scheduled notification attached to a work item."""

    work_item_id: str
    trigger_at: datetime
    message: str
    status: ReminderStatus = ReminderStatus.SCHEDULED
    triggered_at: datetime | None = None
    error_message: str | None = None
    claimed_by: str | None = None
    claimed_at: datetime | None = None

    @field_validator("trigger_at", "triggered_at", "claimed_at", mode="after")
    @classmethod
    def _normalize_times(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None

    @classmethod
    def schedule(
        cls,
        *,
        tenant_id: str,
        work_item_id: str,
        trigger_at: datetime,
        message: str,
        actor: str,
        now: datetime | None = None,
        lead_time: timedelta = DEFAULT_LEAD_TIME,
    ) -> "Reminder":
        """Create a new Scheduled reminder, validating message and lead time."""
        now = ensure_utc(now) if now is not None else utcnow()
        return cls(
            tenant_id=tenant_id,
            work_item_id=work_item_id,
            trigger_at=validate_trigger_time(trigger_at, now, lead_time),
            message=validate_message(message),
            created_by=require_actor(actor),
            created_at=now,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_pending(self) -> bool:
        return self.status == ReminderStatus.SCHEDULED

    def is_due(self, as_of: datetime | None = None) -> bool:
        as_of = ensure_utc(as_of) if as_of is not None else utcnow()
        return self.is_pending() and self.trigger_at <= as_of

    def is_overdue(
        self,
        as_of: datetime | None = None,
        grace: timedelta = DEFAULT_OVERDUE_GRACE,
    ) -> bool:
        """Pending and past its trigger time by more than the grace period."""
        as_of = ensure_utc(as_of) if as_of is not None else utcnow()
        return self.is_pending() and self.trigger_at < as_of - grace

    def is_claimed(
        self,
        as_of: datetime | None = None,
        timeout: timedelta = DEFAULT_CLAIM_TIMEOUT,
    ) -> bool:
        """Pending and claimed by a firer within the last timeout."""
        if not self.is_pending() or self.claimed_at is None:
            return False
        as_of = ensure_utc(as_of) if as_of is not None else utcnow()
        return self.claimed_at > as_of - timeout

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _require_scheduled(self, operation: str, actor: str) -> None:
        if self.status != ReminderStatus.SCHEDULED:
            raise InvalidStateError("reminder", self.id, self.status.value, operation)
        require_actor(actor)

    def _release_claim(self) -> None:
        # A moved reminder is due again at its new time
        self.claimed_by = None
        self.claimed_at = None

    def reschedule(
        self,
        new_trigger_at: datetime,
        actor: str,
        *,
        now: datetime | None = None,
        lead_time: timedelta = DEFAULT_LEAD_TIME,
    ) -> None:
        self._require_scheduled("reschedule", actor)
        now = ensure_utc(now) if now is not None else utcnow()
        self.trigger_at = validate_trigger_time(new_trigger_at, now, lead_time)
        self._release_claim()
        self._stamp_updated(actor, now)

    def update(
        self,
        new_trigger_at: datetime,
        new_message: str,
        actor: str,
        *,
        now: datetime | None = None,
        lead_time: timedelta = DEFAULT_LEAD_TIME,
    ) -> None:
        """Reschedule and replace the message in one step."""
        self._require_scheduled("update", actor)
        now = ensure_utc(now) if now is not None else utcnow()
        trigger_at = validate_trigger_time(new_trigger_at, now, lead_time)
        message = validate_message(new_message)
        self.trigger_at = trigger_at
        self.message = message
        self._release_claim()
        self._stamp_updated(actor, now)

    def claim(self, actor: str, *, now: datetime | None = None) -> None:
        """
        Take the reminder for delivery.

        The status stays Scheduled. The claim stamp keeps other firers off
        until it expires, and the moved row_version makes a conditional
        write of the claim admit one firer.
        """
        self._require_scheduled("claim", actor)
        now = ensure_utc(now) if now is not None else utcnow()
        self.claimed_by = require_actor(actor)
        self.claimed_at = now
        self._stamp_updated(actor, now)

    def mark_as_triggered(self, actor: str, *, now: datetime | None = None) -> None:
        self._require_scheduled("trigger", actor)
        now = ensure_utc(now) if now is not None else utcnow()
        self.status = ReminderStatus.TRIGGERED
        self.triggered_at = now
        self._stamp_updated(actor, now)
        self.record_event(
            ReminderTriggered(
                tenant_id=self.tenant_id,
                reminder_id=self.id,
                work_item_id=self.work_item_id,
                triggered_at=now,
                message=self.message,
                occurred_at=now,
            )
        )

    def mark_as_failed(
        self, error_message: str, actor: str, *, now: datetime | None = None
    ) -> None:
        self._require_scheduled("fail", actor)
        cleaned = (error_message or "").strip()
        if not cleaned:
            raise ValidationError("error_message", "Error message is required")
        if len(cleaned) > MAX_ERROR_LENGTH:
            raise ValidationError(
                "error_message",
                f"Error message must not exceed {MAX_ERROR_LENGTH} characters",
                value=cleaned,
            )
        now = ensure_utc(now) if now is not None else utcnow()
        self.status = ReminderStatus.FAILED
        self.error_message = cleaned
        self._stamp_updated(actor, now)
        self.record_event(
            ReminderFailed(
                tenant_id=self.tenant_id,
                reminder_id=self.id,
                work_item_id=self.work_item_id,
                error_message=cleaned,
                occurred_at=now,
            )
        )

    def cancel(self, actor: str, *, now: datetime | None = None) -> None:
        self._require_scheduled("cancel", actor)
        now = ensure_utc(now) if now is not None else utcnow()
        self.status = ReminderStatus.CANCELLED
        self._stamp_updated(actor, now)
        self.record_event(
            ReminderCancelled(
                tenant_id=self.tenant_id,
                reminder_id=self.id,
                work_item_id=self.work_item_id,
                cancelled_by=self.updated_by or actor,
                occurred_at=now,
            )
        )
