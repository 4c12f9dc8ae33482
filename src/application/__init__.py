"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates the domain by:
1. Defining request DTOs for command input
2. Implementing use cases that coordinate entities, stores and the job gateway
3. Providing factory functions for dependency injection
"""

from src.application.dto.requests import (
    ChangeWorkItemStateRequest,
    CreateWorkItemRequest,
    ListDueRemindersRequest,
    RescheduleReminderRequest,
    ScheduleReminderRequest,
    TriggerReminderRequest,
)
from src.application.events import LoggingEventDispatcher, publish_events
from src.application.services import (
    get_event_dispatcher,
    get_job_gateway,
    get_notification_sender,
    get_scheduling_policy,
    reset_services,
    set_job_gateway,
)
from src.application.use_cases import (
    CancelReminderUseCase,
    ChangeWorkItemStateUseCase,
    CreateWorkItemUseCase,
    ListDueRemindersUseCase,
    ProcessDueSweepUseCase,
    ReminderFirer,
    RescheduleReminderUseCase,
    ScheduleReminderResult,
    ScheduleReminderUseCase,
    SweepReport,
    TriggerReminderUseCase,
)

__all__ = [
    # Request DTOs
    "CreateWorkItemRequest",
    "ChangeWorkItemStateRequest",
    "ScheduleReminderRequest",
    "RescheduleReminderRequest",
    "TriggerReminderRequest",
    "ListDueRemindersRequest",
    # Events
    "LoggingEventDispatcher",
    "publish_events",
    # Use Cases
    "CreateWorkItemUseCase",
    "ChangeWorkItemStateUseCase",
    "ScheduleReminderUseCase",
    "ScheduleReminderResult",
    "RescheduleReminderUseCase",
    "TriggerReminderUseCase",
    "CancelReminderUseCase",
    "ListDueRemindersUseCase",
    "ReminderFirer",
    "ProcessDueSweepUseCase",
    "SweepReport",
    # Service factories
    "get_scheduling_policy",
    "get_event_dispatcher",
    "get_notification_sender",
    "get_job_gateway",
    "set_job_gateway",
    "reset_services",
]
