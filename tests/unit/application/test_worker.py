"""Tests for ReminderWorker and the scheduler job callbacks."""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.application import jobs
from src.application.services import get_job_gateway
from src.application.worker import ReminderWorker
from src.core.exceptions import ConcurrencyError, InvalidStateError, ReminderNotFoundError
from src.core.interfaces import SWEEP_JOB_ID


@pytest.fixture
def scheduler() -> MagicMock:
    scheduler = MagicMock()
    scheduler.running = True
    return scheduler


class TestReminderWorker:
    """Tests for worker start-up and shutdown."""

    async def test_start_registers_sweep_and_restores_future_jobs(
        self, scheduler, reminder_store, make_work_item, make_reminder, now
    ):
        item = make_work_item()
        future = make_reminder(item, trigger_at=now + timedelta(hours=1))
        overdue = make_reminder(item, trigger_at=now - timedelta(minutes=1))
        await reminder_store.create(future)
        await reminder_store.create(overdue)

        worker = ReminderWorker(scheduler=scheduler, reminder_store=reminder_store)
        restored = await worker.start()

        assert restored == 1
        job_ids = [c.kwargs["id"] for c in scheduler.add_job.call_args_list]
        assert job_ids == [SWEEP_JOB_ID, f"reminder_{future.id}"]
        scheduler.start.assert_called_once()
        assert get_job_gateway() is worker.gateway

    async def test_restore_skips_gateway_failures(
        self, scheduler, reminder_store, make_work_item, make_reminder, now
    ):
        item = make_work_item()
        for hours in (1, 2):
            await reminder_store.create(make_reminder(item, trigger_at=now + timedelta(hours=hours)))
        scheduler.add_job.side_effect = [RuntimeError("jobstore full"), None]

        worker = ReminderWorker(scheduler=scheduler, reminder_store=reminder_store)

        assert await worker.restore_jobs() == 1

    async def test_run_until_stops_scheduler(self, scheduler, reminder_store):
        worker = ReminderWorker(scheduler=scheduler, reminder_store=reminder_store)
        await worker.start()
        stop_event = asyncio.Event()
        stop_event.set()

        await worker.run_until(stop_event)

        scheduler.shutdown.assert_called_once_with(wait=False)
        assert get_job_gateway() is not worker.gateway

    def test_interval_from_settings(self, monkeypatch, scheduler, reminder_store):
        from src.config import reset_settings

        monkeypatch.setenv("SCHEDULING_SWEEP_INTERVAL_SECONDS", "15")
        reset_settings()

        assert ReminderWorker(scheduler=scheduler, reminder_store=reminder_store).sweep_interval == 15


class TestJobCallbacks:
    """Tests for the functions APScheduler invokes."""

    async def test_reminder_job_fires_as_system(self, monkeypatch):
        fire = AsyncMock()
        monkeypatch.setattr(jobs.ReminderFirer, "fire", fire)

        await jobs.run_reminder_job("r-1")

        fire.assert_awaited_once_with("r-1", "system")

    @pytest.mark.parametrize(
        "error",
        [
            InvalidStateError("reminder", "r-1", "triggered", "trigger"),
            ConcurrencyError("reminder", "r-1", "scheduled"),
            ReminderNotFoundError("r-1"),
        ],
    )
    async def test_stale_jobs_are_skipped(self, monkeypatch, error):
        """A job for a reminder handled elsewhere ends quietly."""
        monkeypatch.setattr(jobs.ReminderFirer, "fire", AsyncMock(side_effect=error))

        await jobs.run_reminder_job("r-1")

    async def test_unexpected_errors_propagate(self, monkeypatch):
        monkeypatch.setattr(jobs.ReminderFirer, "fire", AsyncMock(side_effect=RuntimeError("boom")))

        with pytest.raises(RuntimeError):
            await jobs.run_reminder_job("r-1")

    async def test_sweep_job(self, monkeypatch):
        execute = AsyncMock()
        monkeypatch.setattr(jobs.ProcessDueSweepUseCase, "execute", execute)

        await jobs.run_sweep_job()

        execute.assert_awaited_once_with()
