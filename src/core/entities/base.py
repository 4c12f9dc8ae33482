"""Shared identity, audit and pending-event plumbing for aggregates."""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field, PrivateAttr, field_validator

from src.core.clock import ensure_utc, utcnow
from src.core.entities.events import DomainEvent
from src.core.exceptions import ValidationError


def new_id() -> str:
    """Generate a globally unique entity id."""
    return str(uuid4())


def require_actor(actor: str) -> str:
    """Reject blank actor names; every mutation is attributed."""
    if not actor or not actor.strip():
        raise ValidationError("actor", "Actor is required")
    return actor.strip()


class AuditableEntity(BaseModel):
    """
    Base for tenant-scoped aggregates.

    Carries created/updated stamps, an optimistic row version and a buffer
    of domain events that the persistence boundary drains after commit.
    """

    id: str = Field(default_factory=new_id)
    tenant_id: str

    created_by: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    updated_by: str | None = None
    updated_at: datetime | None = None
    row_version: int = 0

    _pending_events: list[DomainEvent] = PrivateAttr(default_factory=list)

    @field_validator("created_at", "updated_at", mode="after")
    @classmethod
    def _normalize_audit_times(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None

    @property
    def pending_events(self) -> list[DomainEvent]:
        """Events raised since the last drain (read-only copy)."""
        return list(self._pending_events)

    def record_event(self, event: DomainEvent) -> None:
        self._pending_events.append(event)

    def drain_events(self) -> list[DomainEvent]:
        """Return and clear the pending events."""
        events = self._pending_events
        self._pending_events = []
        return events

    def _stamp_updated(self, actor: str, now: datetime) -> None:
        self.updated_by = require_actor(actor)
        self.updated_at = now
        self.row_version += 1
