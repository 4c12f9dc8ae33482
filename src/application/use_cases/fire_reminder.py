"""
Reminder fire path.

Shared by the due-reminder sweep, the scheduler's per-reminder date job
and the manual trigger command:

1. reload the reminder and skip it if it is no longer due
2. claim it with a write conditional on the loaded status and row_version;
   a claim younger than the claim timeout means another firer has it
3. load its work item and notify the recipients
4. mark it Triggered, or Failed with the delivery error
5. persist, conditional on the claim still being the latest write
6. dispatch the drained events and drop the scheduler job

Only the firer whose claim is applied sends notifications, so a sweep and
a manual trigger racing on one reminder deliver it once.
"""

from datetime import datetime

from src.application.events import publish_events
from src.application.use_cases.base import ReminderUseCaseBase
from src.config import bound_context, get_logger, get_settings
from src.core.clock import ensure_utc, utcnow
from src.core.entities.reminder import MAX_ERROR_LENGTH, Reminder, ReminderStatus
from src.core.entities.work_item import WorkItem
from src.core.exceptions import ConcurrencyError, InvalidStateError, ReminderNotFoundError
from src.core.interfaces import IReminderStore, WriteOutcome

logger = get_logger(__name__)

WORK_ITEM_MISSING = "Work item not found"


def notification_recipients(work_item: WorkItem, reminder: Reminder) -> list[str]:
    """Work item owner first, then whoever scheduled the reminder."""
    recipients: list[str] = []
    for candidate in (work_item.created_by, reminder.created_by):
        if candidate and candidate not in recipients:
            recipients.append(candidate)
    return recipients


async def write_scheduled(
    store: IReminderStore, reminder: Reminder, expected_version: int
) -> None:
    """Persist a change to a reminder loaded as Scheduled at expected_version."""
    outcome = await store.update(reminder, ReminderStatus.SCHEDULED, expected_version)
    if outcome == WriteOutcome.NOT_FOUND:
        raise ReminderNotFoundError(reminder.id)
    if outcome == WriteOutcome.CONFLICT:
        raise ConcurrencyError(
            "reminder",
            reminder.id,
            ReminderStatus.SCHEDULED.value,
            expected_version=expected_version,
        )


class ReminderFirer(ReminderUseCaseBase):
    """Runs the fire path for one reminder at a time."""

    async def fire(
        self,
        reminder_id: str,
        actor: str,
        *,
        tenant_id: str | None = None,
        as_of: datetime | None = None,
        require_due: bool = True,
    ) -> Reminder | None:
        """
        Fire a reminder.

        Args:
            reminder_id: Reminder to fire
            actor: Recorded as the updater of the reminder
            tenant_id: When given, reminders of other tenants are not found
            as_of: Due-check instant (default now)
            require_due: Skip reminders whose trigger time is after as_of

        Returns:
            The persisted reminder (Triggered or Failed), or None when skipped
            because it was rescheduled past as_of.

        Raises:
            ReminderNotFoundError: Reminder missing or in another tenant
            InvalidStateError: Reminder already left Scheduled
            ConcurrencyError: Another writer changed the reminder first
        """
        with bound_context(reminder_id=reminder_id):
            reminder_store = await self._get_reminder_store()
            reminder = await reminder_store.get(reminder_id)
            if reminder is None or (tenant_id is not None and reminder.tenant_id != tenant_id):
                raise ReminderNotFoundError(reminder_id)

            if not reminder.is_pending():
                raise InvalidStateError(
                    "reminder", reminder_id, reminder.status.value, "trigger"
                )

            as_of = ensure_utc(as_of) if as_of is not None else utcnow()
            if require_due and not reminder.is_due(as_of):
                logger.info(
                    "reminder_not_due",
                    trigger_at=reminder.trigger_at.isoformat(),
                    as_of=as_of.isoformat(),
                )
                return None

            now = utcnow()
            if reminder.is_claimed(now, get_settings().scheduling.claim_timeout):
                # Another firer is delivering it right now
                logger.info("reminder_already_claimed", claimed_by=reminder.claimed_by)
                raise ConcurrencyError("reminder", reminder_id, ReminderStatus.SCHEDULED.value)

            loaded_version = reminder.row_version
            reminder.claim(actor, now=now)
            await write_scheduled(reminder_store, reminder, loaded_version)
            claimed_version = reminder.row_version

            work_item_store = await self._get_work_item_store()
            work_item = await work_item_store.get(reminder.work_item_id)

            if work_item is None or work_item.tenant_id != reminder.tenant_id:
                reminder.mark_as_failed(WORK_ITEM_MISSING, actor)
            else:
                error = await self._notify(work_item, reminder)
                if error is None:
                    reminder.mark_as_triggered(actor)
                else:
                    reminder.mark_as_failed(error[:MAX_ERROR_LENGTH], actor)

            try:
                await write_scheduled(reminder_store, reminder, claimed_version)
            except ConcurrencyError:
                # Rescheduled or cancelled while the notification was out
                logger.warning("reminder_changed_during_delivery", status=reminder.status.value)
                raise

            logger.info("reminder_fired", status=reminder.status.value)
            await publish_events(self._get_event_dispatcher(), reminder.drain_events())
            await self._delete_job(reminder_id)
            return reminder

    async def _notify(self, work_item: WorkItem, reminder: Reminder) -> str | None:
        """Send to every recipient; returns the first delivery error, if any."""
        sender = self._get_notification_sender()
        for recipient in notification_recipients(work_item, reminder):
            try:
                await sender.send_reminder_notification(
                    recipient=recipient,
                    work_item_title=work_item.title,
                    message=reminder.message,
                    due_date=work_item.due_date,
                )
            except Exception as e:
                logger.warning(
                    "reminder_notification_failed",
                    recipient=recipient,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return f"Notification to {recipient} failed: {e}"
        return None
