"""
Change Work Item State Use Case.

Completing or archiving a work item cancels its pending reminders. The
work item write fails with ConcurrencyError if another command changed the
item since it was loaded. Each cancellation is written conditionally too; a
reminder that fired or moved in the meantime keeps its newer state.
"""

from src.application.dto.requests import ChangeWorkItemStateRequest
from src.application.events import publish_events
from src.application.use_cases.base import ReminderUseCaseBase
from src.config import get_logger
from src.core.entities.reminder import ReminderStatus
from src.core.entities.work_item import WorkItem
from src.core.interfaces import WriteOutcome

logger = get_logger(__name__)


class ChangeWorkItemStateUseCase(ReminderUseCaseBase):
    """Apply a lifecycle transition to a work item."""

    async def execute(
        self,
        request: ChangeWorkItemStateRequest,
        tenant_id: str,
        actor: str,
    ) -> WorkItem:
        work_item = await self._load_work_item(tenant_id, request.work_item_id)
        previous = work_item.state
        loaded_version = work_item.row_version
        reminder_versions = {r.id: r.row_version for r in work_item.reminders}

        cancelled = work_item.transition_to(
            request.target_state, actor, actual_hours=request.actual_hours
        )

        work_item_store = await self._get_work_item_store()
        await work_item_store.update(work_item, loaded_version)

        reminder_store = await self._get_reminder_store()
        events = work_item.drain_events()
        for reminder in cancelled:
            outcome = await reminder_store.update(
                reminder, ReminderStatus.SCHEDULED, reminder_versions[reminder.id]
            )
            if outcome != WriteOutcome.APPLIED:
                logger.info(
                    "reminder_cancel_skipped",
                    reminder_id=reminder.id,
                    outcome=outcome.value,
                )
                reminder.drain_events()
                continue
            events.extend(reminder.drain_events())
            await self._delete_job(reminder.id)

        logger.info(
            "work_item_state_changed",
            work_item_id=work_item.id,
            previous_state=previous.value,
            new_state=work_item.state.value,
            reminders_cancelled=len(cancelled),
        )
        await publish_events(self._get_event_dispatcher(), events)
        return work_item
