"""
Process Due Sweep Use Case.

Finds Scheduled reminders whose trigger time has passed and runs each one
through the fire path. Reminders are independent: a lost race is skipped,
a failed delivery is recorded on that reminder, and an unexpected error
leaves the reminder Scheduled for the next run. None of them stop the batch.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime

from src.application.use_cases.base import ReminderUseCaseBase
from src.application.use_cases.fire_reminder import ReminderFirer
from src.config import get_logger, get_settings
from src.core.clock import ensure_utc, utcnow
from src.core.entities.reminder import ReminderStatus
from src.core.exceptions import ConcurrencyError, InvalidStateError, NotFoundError

logger = get_logger(__name__)


@dataclass
class SweepReport:
    """Counts for one sweep run."""

    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    cancelled: bool = False  # stop_event ended the batch early


class ProcessDueSweepUseCase(ReminderUseCaseBase):
    """
    Trigger every due reminder, one at a time.

    Each reminder commits in its own transaction, so a cancelled sweep
    keeps whatever it already fired.
    """

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
        as_of: datetime | None = None,
        batch_limit: int | None = None,
        stop_event: asyncio.Event | None = None,
    ) -> SweepReport:
        """
        Run one sweep.

        Args:
            as_of: Reminders due at or before this instant are fired (default now)
            batch_limit: Maximum reminders per run (default from settings)
            stop_event: When set, the batch ends before the next reminder

        Returns:
            SweepReport with attempted/succeeded/failed/skipped counts
        """
        settings = get_settings()
        as_of = ensure_utc(as_of) if as_of is not None else utcnow()
        batch_limit = batch_limit or settings.scheduling.sweep_batch_limit

        reminder_store = await self._get_reminder_store()
        due = await reminder_store.find_due_before(as_of, limit=batch_limit)

        report = SweepReport()
        if not due:
            logger.debug("sweep_nothing_due", as_of=as_of.isoformat())
            return report

        overdue = [r for r in due if r.is_overdue(as_of, settings.scheduling.overdue_grace)]
        if overdue:
            logger.warning("overdue_reminders_found", count=len(overdue))

        firer = self._get_firer()
        actor = settings.system_actor

        for reminder in due:
            if stop_event is not None and stop_event.is_set():
                report.cancelled = True
                logger.info("sweep_stopped", remaining=len(due) - report.attempted)
                break

            report.attempted += 1
            try:
                fired = await firer.fire(reminder.id, actor, as_of=as_of)
            except (InvalidStateError, ConcurrencyError, NotFoundError) as e:
                # Someone else already handled it
                report.skipped += 1
                logger.info("sweep_reminder_skipped", reminder_id=reminder.id, reason=e.code)
                continue
            except Exception as e:
                report.failed += 1
                logger.error(
                    "sweep_reminder_error",
                    reminder_id=reminder.id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue

            if fired is None:
                report.skipped += 1
            elif fired.status == ReminderStatus.TRIGGERED:
                report.succeeded += 1
            else:
                report.failed += 1

        logger.info(
            "sweep_complete",
            as_of=as_of.isoformat(),
            attempted=report.attempted,
            succeeded=report.succeeded,
            failed=report.failed,
            skipped=report.skipped,
            cancelled=report.cancelled,
        )
        return report
