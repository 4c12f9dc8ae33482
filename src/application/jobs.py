"""
Scheduler job callbacks.

APScheduler calls these with nothing but a reminder id (or nothing at all
for the sweep); everything else is reloaded from storage.
"""

from src.application.use_cases.fire_reminder import ReminderFirer
from src.application.use_cases.process_due_sweep import ProcessDueSweepUseCase
from src.config import bound_context, get_logger, get_settings
from src.core.exceptions import ConcurrencyError, InvalidStateError, NotFoundError
from src.core.interfaces import reminder_job_id

logger = get_logger(__name__)


async def run_reminder_job(reminder_id: str) -> None:
    """Date job: fire one reminder if it is still Scheduled and due."""
    with bound_context(job_id=reminder_job_id(reminder_id)):
        try:
            await ReminderFirer().fire(reminder_id, get_settings().system_actor)
        except (InvalidStateError, ConcurrencyError, NotFoundError) as e:
            # Stale job: the reminder was handled or removed elsewhere
            logger.info("reminder_job_skipped", reason=e.code)


async def run_sweep_job() -> None:
    """Interval job: one due-reminder sweep."""
    await ProcessDueSweepUseCase().execute()
