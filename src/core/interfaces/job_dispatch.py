"""
Job dispatch gateway port.

Boundary to the external scheduler that fires reminders at their trigger
time and runs the recurring due-reminder sweep.
"""

from abc import ABC, abstractmethod
from datetime import datetime

SWEEP_JOB_ID = "due_reminders_sweep"


def reminder_job_id(reminder_id: str) -> str:
    """Deterministic scheduler job id for a reminder."""
    return f"reminder_{reminder_id}"


class IJobDispatchGateway(ABC):
    """
    Abstract interface for the external job scheduler.

    Job ids are derived from reminder ids, so no lookup table is kept.
    Implementations raise GatewayError on scheduler failures and return
    False when the referenced job does not exist.
    """

    def job_id_for(self, reminder_id: str) -> str:
        return reminder_job_id(reminder_id)

    @abstractmethod
    async def schedule_at(self, reminder_id: str, trigger_at: datetime) -> str:
        """Schedule a reminder to fire at trigger_at. Returns the job id."""
        pass

    @abstractmethod
    async def schedule_recurring(self, interval_seconds: int) -> str:
        """Schedule the due-reminder sweep every interval_seconds."""
        pass

    @abstractmethod
    async def delete(self, job_id: str) -> bool:
        """Remove a job. False if it did not exist."""
        pass

    @abstractmethod
    async def reschedule(self, job_id: str, new_trigger_at: datetime) -> bool:
        """Move a job to a new run time. False if it did not exist."""
        pass

    @abstractmethod
    async def trigger_now(self, job_id: str) -> bool:
        """Run a job as soon as possible. False if it did not exist."""
        pass
