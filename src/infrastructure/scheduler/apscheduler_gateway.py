"""
APScheduler-backed job dispatch gateway.

Each Scheduled reminder gets a one-shot date job named reminder_<id>; the
due-reminder sweep runs as a single interval job. Jobs only carry the
reminder id, and the callbacks reload state from storage, so a stale job
firing late is harmless.
"""

from collections.abc import Awaitable, Callable
from datetime import datetime

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from src.config import get_logger
from src.core.clock import ensure_utc, utcnow
from src.core.exceptions import GatewayError
from src.core.interfaces.job_dispatch import SWEEP_JOB_ID, IJobDispatchGateway

logger = get_logger(__name__)

FireReminder = Callable[[str], Awaitable[None]]
RunSweep = Callable[[], Awaitable[None]]


class APSchedulerJobGateway(IJobDispatchGateway):
    """
    Job gateway over an AsyncIOScheduler.

    Args:
        scheduler: Scheduler instance (started by the worker)
        fire_reminder: Coroutine run with the reminder id when a date job fires
        run_sweep: Coroutine run by the recurring sweep job
        misfire_grace_seconds: How late a date job may still run
    """

    def __init__(
        self,
        scheduler: AsyncIOScheduler,
        fire_reminder: FireReminder,
        run_sweep: RunSweep,
        misfire_grace_seconds: int = 300,
    ):
        self.scheduler = scheduler
        self.fire_reminder = fire_reminder
        self.run_sweep = run_sweep
        self.misfire_grace_seconds = misfire_grace_seconds

    async def schedule_at(self, reminder_id: str, trigger_at: datetime) -> str:
        job_id = self.job_id_for(reminder_id)
        try:
            self.scheduler.add_job(
                self.fire_reminder,
                trigger="date",
                run_date=ensure_utc(trigger_at),
                args=[reminder_id],
                id=job_id,
                replace_existing=True,
                max_instances=1,
                coalesce=True,
                misfire_grace_time=self.misfire_grace_seconds,
            )
        except Exception as e:
            raise GatewayError("schedule", job_id, str(e)) from e

        logger.info("reminder_job_scheduled", job_id=job_id, run_at=trigger_at.isoformat())
        return job_id

    async def schedule_recurring(self, interval_seconds: int) -> str:
        try:
            self.scheduler.add_job(
                self.run_sweep,
                trigger="interval",
                seconds=interval_seconds,
                id=SWEEP_JOB_ID,
                replace_existing=True,
                max_instances=1,  # Sweeps never overlap
                coalesce=True,
            )
        except Exception as e:
            raise GatewayError("schedule_recurring", SWEEP_JOB_ID, str(e)) from e

        logger.info("sweep_job_scheduled", interval_seconds=interval_seconds)
        return SWEEP_JOB_ID

    async def delete(self, job_id: str) -> bool:
        try:
            self.scheduler.remove_job(job_id)
        except JobLookupError:
            return False
        except Exception as e:
            raise GatewayError("delete", job_id, str(e)) from e

        logger.info("job_deleted", job_id=job_id)
        return True

    async def reschedule(self, job_id: str, new_trigger_at: datetime) -> bool:
        try:
            self.scheduler.reschedule_job(
                job_id, trigger="date", run_date=ensure_utc(new_trigger_at)
            )
        except JobLookupError:
            return False
        except Exception as e:
            raise GatewayError("reschedule", job_id, str(e)) from e

        logger.info("job_rescheduled", job_id=job_id, run_at=new_trigger_at.isoformat())
        return True

    async def trigger_now(self, job_id: str) -> bool:
        job = self.scheduler.get_job(job_id)
        if job is None:
            return False
        try:
            job.modify(next_run_time=utcnow())
        except JobLookupError:
            return False
        except Exception as e:
            raise GatewayError("trigger_now", job_id, str(e)) from e

        logger.info("job_triggered", job_id=job_id)
        return True


def create_scheduler() -> AsyncIOScheduler:
    """Scheduler configured for UTC with in-memory job store."""
    return AsyncIOScheduler(timezone="UTC")
