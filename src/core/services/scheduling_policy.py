"""
Scheduling Policy.

Pure decisions over work item snapshots: whether a reminder may be
scheduled, how far along a work item is, and which state moves are legal.
No I/O and no mutation.
"""

from datetime import datetime, timedelta

from src.core.clock import ensure_utc, utcnow
from src.core.entities.reminder import DEFAULT_LEAD_TIME
from src.core.entities.work_item import WorkItem, WorkItemState


class SchedulingPolicy:
    """
    Reminder scheduling and work item transition rules.

    Args:
        lead_time: Minimum gap between now and a reminder's trigger time.
        max_active_reminders: Cap on pending reminders per work item;
            0 means unlimited.
    """

    def __init__(
        self,
        lead_time: timedelta = DEFAULT_LEAD_TIME,
        max_active_reminders: int = 0,
    ) -> None:
        self.lead_time = lead_time
        self.max_active_reminders = max_active_reminders

    def can_schedule_reminder(
        self,
        work_item: WorkItem,
        trigger_at: datetime,
        now: datetime | None = None,
    ) -> bool:
        if work_item.state == WorkItemState.ARCHIVED or work_item.is_deleted:
            return False

        now = ensure_utc(now) if now is not None else utcnow()
        if ensure_utc(trigger_at) <= now + self.lead_time:
            return False

        if (
            self.max_active_reminders > 0
            and len(work_item.pending_reminders()) >= self.max_active_reminders
        ):
            return False

        return True

    @staticmethod
    def calculate_progress_percentage(work_item: WorkItem) -> int:
        """Actual vs estimated hours as a percentage in [0, 100], halves rounded up."""
        estimated = work_item.estimated_hours
        if estimated <= 0:
            return 0
        # Integer half-up; round() would send 12.5 to 12
        percentage = (200 * work_item.actual_hours + estimated) // (2 * estimated)
        return max(0, min(100, percentage))

    @staticmethod
    def can_transition_to_state(work_item: WorkItem, target: WorkItemState) -> bool:
        return work_item.can_transition_to(target)
