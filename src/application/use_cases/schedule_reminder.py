"""
Schedule Reminder Use Case.

Validates the reminder against the scheduling policy, stores it together
with its work item in one conditional write, and asks the job gateway for
a one-shot job at the trigger time. The stored reminder is authoritative:
if the gateway call fails the sweep still fires it.
"""

from dataclasses import dataclass

from src.application.dto.requests import ScheduleReminderRequest
from src.application.events import publish_events
from src.application.use_cases.base import ReminderUseCaseBase
from src.config import get_logger
from src.core.clock import utcnow
from src.core.entities.reminder import Reminder
from src.core.entities.work_item import WorkItemState
from src.core.exceptions import GatewayError, InvalidStateError, ValidationError

logger = get_logger(__name__)


@dataclass
class ScheduleReminderResult:
    """Result of scheduling a reminder."""

    reminder: Reminder
    job_id: str | None = None  # None when the gateway call failed

    @property
    def reminder_id(self) -> str:
        return self.reminder.id


class ScheduleReminderUseCase(ReminderUseCaseBase):
    """Attach a new Scheduled reminder to a work item."""

    async def execute(
        self,
        request: ScheduleReminderRequest,
        tenant_id: str,
        actor: str,
    ) -> ScheduleReminderResult:
        work_item = await self._load_work_item(tenant_id, request.work_item_id)
        loaded_version = work_item.row_version
        policy = self._get_policy()
        now = utcnow()

        reminder = Reminder.schedule(
            tenant_id=tenant_id,
            work_item_id=work_item.id,
            trigger_at=request.trigger_at,
            message=request.message,
            actor=actor,
            now=now,
            lead_time=policy.lead_time,
        )

        if not policy.can_schedule_reminder(work_item, reminder.trigger_at, now):
            if work_item.state == WorkItemState.ARCHIVED or work_item.is_deleted:
                state = "deleted" if work_item.is_deleted else work_item.state.value
                raise InvalidStateError("work item", work_item.id, state, "add reminder to")
            raise ValidationError(
                "reminders",
                f"Work item already has {policy.max_active_reminders} pending reminders",
            )

        work_item.add_reminder(reminder, actor, now=now)

        # Raises ConcurrencyError if the item changed since it was loaded
        work_item_store = await self._get_work_item_store()
        await work_item_store.add_reminder(work_item, reminder, loaded_version)

        job_id = None
        gateway = self._get_job_gateway()
        try:
            job_id = await gateway.schedule_at(reminder.id, reminder.trigger_at)
        except GatewayError as e:
            logger.warning("reminder_job_not_scheduled", reminder_id=reminder.id, error=e.message)

        logger.info(
            "reminder_scheduled",
            reminder_id=reminder.id,
            work_item_id=work_item.id,
            trigger_at=reminder.trigger_at.isoformat(),
        )
        await publish_events(self._get_event_dispatcher(), work_item.drain_events())
        return ScheduleReminderResult(reminder=reminder, job_id=job_id)
