"""
Service factory functions for dependency injection.

Wires infrastructure implementations to the ports the use cases consume.
Use cases fall back to these when no dependency is injected.
"""

from typing import TYPE_CHECKING

from src.application.events import LoggingEventDispatcher
from src.config import get_settings
from src.core.services import SchedulingPolicy

if TYPE_CHECKING:
    from src.core.interfaces import (
        IDomainEventDispatcher,
        IJobDispatchGateway,
        INotificationSender,
    )


# Singleton service instances
_scheduling_policy: SchedulingPolicy | None = None
_event_dispatcher: "IDomainEventDispatcher | None" = None
_notification_sender: "INotificationSender | None" = None
_job_gateway: "IJobDispatchGateway | None" = None


def get_scheduling_policy() -> SchedulingPolicy:
    """Get the scheduling policy built from settings."""
    global _scheduling_policy
    if _scheduling_policy is None:
        settings = get_settings().scheduling
        _scheduling_policy = SchedulingPolicy(
            lead_time=settings.lead_time,
            max_active_reminders=settings.max_active_reminders,
        )
    return _scheduling_policy


def get_event_dispatcher() -> "IDomainEventDispatcher":
    """Get the domain event dispatcher."""
    global _event_dispatcher
    if _event_dispatcher is None:
        _event_dispatcher = LoggingEventDispatcher()
    return _event_dispatcher


def get_notification_sender() -> "INotificationSender":
    """Get the notification sender named by settings."""
    global _notification_sender
    if _notification_sender is None:
        # Lazy import infrastructure to avoid circular imports
        from src.infrastructure.notifications import get_notification_sender as build

        _notification_sender = build()
    return _notification_sender


def get_job_gateway() -> "IJobDispatchGateway":
    """
    Get the job dispatch gateway.

    The worker installs its running gateway with set_job_gateway(); outside
    a worker this builds one over an idle scheduler, so deletes find no jobs
    and new jobs wait for the next worker start to be restored.
    """
    global _job_gateway
    if _job_gateway is None:
        from src.application.jobs import run_reminder_job, run_sweep_job
        from src.infrastructure.scheduler import APSchedulerJobGateway, create_scheduler

        _job_gateway = APSchedulerJobGateway(
            scheduler=create_scheduler(),
            fire_reminder=run_reminder_job,
            run_sweep=run_sweep_job,
            misfire_grace_seconds=get_settings().scheduling.misfire_grace_seconds,
        )
    return _job_gateway


def set_job_gateway(gateway: "IJobDispatchGateway | None") -> None:
    """Install the gateway shared by all use cases."""
    global _job_gateway
    _job_gateway = gateway


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _scheduling_policy
    global _event_dispatcher
    global _notification_sender
    global _job_gateway

    _scheduling_policy = None
    _event_dispatcher = None
    _notification_sender = None
    _job_gateway = None


__all__ = [
    "get_scheduling_policy",
    "get_event_dispatcher",
    "get_notification_sender",
    "get_job_gateway",
    "set_job_gateway",
    "reset_services",
]
