"""
Trigger Reminder Use Case.

Manual counterpart of the sweep. Unlike the sweep, a lost race is an
error for the caller here.
"""

from src.application.dto.requests import TriggerReminderRequest
from src.application.events import publish_events
from src.application.use_cases.base import ReminderUseCaseBase
from src.application.use_cases.fire_reminder import ReminderFirer, write_scheduled
from src.config import get_logger
from src.core.entities.reminder import Reminder

logger = get_logger(__name__)


class TriggerReminderUseCase(ReminderUseCaseBase):
    """Fire a reminder now, or record it as failed when an error is given."""

    def __init__(self, *args, firer: ReminderFirer | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._firer = firer

    def _get_firer(self) -> ReminderFirer:
        if self._firer is None:
            self._firer = ReminderFirer(
                work_item_store=self._work_item_store,
                reminder_store=self._reminder_store,
                job_gateway=self._job_gateway,
                event_dispatcher=self._event_dispatcher,
                notification_sender=self._notification_sender,
            )
        return self._firer

    async def execute(
        self,
        request: TriggerReminderRequest,
        tenant_id: str,
        actor: str,
    ) -> Reminder:
        """
        Raises:
            ReminderNotFoundError: Unknown reminder or another tenant's
            InvalidStateError: Reminder is no longer Scheduled
            ConcurrencyError: The sweep or another trigger got there first
        """
        if request.error_message is None:
            # require_due=False never skips, so a reminder always comes back
            return await self._get_firer().fire(  # type: ignore[return-value]
                request.reminder_id,
                actor,
                tenant_id=tenant_id,
                require_due=False,
            )

        reminder = await self._load_reminder(tenant_id, request.reminder_id)
        loaded_version = reminder.row_version
        reminder.mark_as_failed(request.error_message, actor)

        store = await self._get_reminder_store()
        await write_scheduled(store, reminder, loaded_version)

        logger.info("reminder_marked_failed", reminder_id=reminder.id)
        await publish_events(self._get_event_dispatcher(), reminder.drain_events())
        await self._delete_job(reminder.id)
        return reminder
