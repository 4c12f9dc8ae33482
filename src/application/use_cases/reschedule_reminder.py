"""Reschedule Reminder Use Case."""

from src.application.dto.requests import RescheduleReminderRequest
from src.application.use_cases.base import ReminderUseCaseBase
from src.application.use_cases.fire_reminder import write_scheduled
from src.config import get_logger
from src.core.entities.reminder import Reminder
from src.core.exceptions import GatewayError

logger = get_logger(__name__)


class RescheduleReminderUseCase(ReminderUseCaseBase):
    """
    Move a Scheduled reminder to a new trigger time.

    With a message in the request the message is replaced as well. Losing
    the race against the sweep, or against another command on the same
    reminder, is reported as a ConcurrencyError.
    """

    async def execute(
        self,
        request: RescheduleReminderRequest,
        tenant_id: str,
        actor: str,
    ) -> Reminder:
        reminder = await self._load_reminder(tenant_id, request.reminder_id)
        loaded_version = reminder.row_version
        lead_time = self._get_policy().lead_time

        if request.message is not None:
            reminder.update(request.new_trigger_at, request.message, actor, lead_time=lead_time)
        else:
            reminder.reschedule(request.new_trigger_at, actor, lead_time=lead_time)

        store = await self._get_reminder_store()
        await write_scheduled(store, reminder, loaded_version)

        await self._move_job(reminder)
        logger.info(
            "reminder_rescheduled",
            reminder_id=reminder.id,
            trigger_at=reminder.trigger_at.isoformat(),
        )
        return reminder

    async def _move_job(self, reminder: Reminder) -> None:
        gateway = self._get_job_gateway()
        job_id = gateway.job_id_for(reminder.id)
        try:
            if not await gateway.reschedule(job_id, reminder.trigger_at):
                await gateway.schedule_at(reminder.id, reminder.trigger_at)
        except GatewayError as e:
            logger.warning("reminder_job_not_moved", job_id=job_id, error=e.message)
