"""Job scheduler implementations."""

from src.infrastructure.scheduler.apscheduler_gateway import (
    APSchedulerJobGateway,
    create_scheduler,
)

__all__ = ["APSchedulerJobGateway", "create_scheduler"]
