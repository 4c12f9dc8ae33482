"""
Reminder worker runtime.

Owns the AsyncIOScheduler for one process: installs the gateway used by
the use cases, registers the recurring sweep, and restores a date job for
every future Scheduled reminder (jobs live in memory only).
"""

import asyncio

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from src.application.jobs import run_reminder_job, run_sweep_job
from src.application.services import set_job_gateway
from src.config import get_logger, get_settings
from src.core.clock import utcnow
from src.core.exceptions import GatewayError
from src.core.interfaces import IReminderStore
from src.infrastructure.scheduler import APSchedulerJobGateway, create_scheduler

logger = get_logger(__name__)


class ReminderWorker:
    """
    Background process that fires reminders.

    Usage:
        worker = ReminderWorker()
        await worker.start()
        await worker.run_until(stop_event)
    """

    def __init__(
        self,
        scheduler: AsyncIOScheduler | None = None,
        reminder_store: IReminderStore | None = None,
    ):
        settings = get_settings().scheduling
        self.scheduler = scheduler or create_scheduler()
        self.gateway = APSchedulerJobGateway(
            scheduler=self.scheduler,
            fire_reminder=run_reminder_job,
            run_sweep=run_sweep_job,
            misfire_grace_seconds=settings.misfire_grace_seconds,
        )
        self.sweep_interval = settings.sweep_interval_seconds
        self._reminder_store = reminder_store

    async def _get_reminder_store(self) -> IReminderStore:
        if self._reminder_store is None:
            from src.infrastructure.storage.sqlite import get_reminder_store

            self._reminder_store = await get_reminder_store()
        return self._reminder_store

    async def start(self) -> int:
        """Start scheduling; returns how many reminder jobs were restored."""
        set_job_gateway(self.gateway)
        await self.gateway.schedule_recurring(self.sweep_interval)
        restored = await self.restore_jobs()
        self.scheduler.start()
        logger.info(
            "worker_started",
            sweep_interval_seconds=self.sweep_interval,
            restored_jobs=restored,
        )
        return restored

    async def restore_jobs(self) -> int:
        """Schedule date jobs for Scheduled reminders still in the future."""
        store = await self._get_reminder_store()
        now = utcnow()
        restored = 0
        for reminder in await store.list_scheduled():
            if reminder.trigger_at <= now:
                # Already due; the first sweep picks it up
                continue
            try:
                await self.gateway.schedule_at(reminder.id, reminder.trigger_at)
            except GatewayError as e:
                logger.warning("job_restore_failed", reminder_id=reminder.id, error=e.message)
                continue
            restored += 1
        return restored

    async def run_until(self, stop_event: asyncio.Event) -> None:
        """Keep the scheduler running until stop_event is set."""
        try:
            await stop_event.wait()
        finally:
            self.stop()

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        set_job_gateway(None)
        logger.info("worker_stopped")
