"""Cancel Reminder Use Case."""

from src.application.events import publish_events
from src.application.use_cases.base import ReminderUseCaseBase
from src.application.use_cases.fire_reminder import write_scheduled
from src.config import get_logger
from src.core.entities.reminder import Reminder

logger = get_logger(__name__)


class CancelReminderUseCase(ReminderUseCaseBase):
    """Cancel a Scheduled reminder and drop its job."""

    async def execute(self, reminder_id: str, tenant_id: str, actor: str) -> Reminder:
        reminder = await self._load_reminder(tenant_id, reminder_id)
        loaded_version = reminder.row_version
        reminder.cancel(actor)

        store = await self._get_reminder_store()
        await write_scheduled(store, reminder, loaded_version)

        logger.info("reminder_cancelled", reminder_id=reminder_id)
        await publish_events(self._get_event_dispatcher(), reminder.drain_events())
        await self._delete_job(reminder_id)
        return reminder
