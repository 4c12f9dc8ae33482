"""Shared dependency plumbing for the work item and reminder use cases."""

from src.config import get_logger
from src.core.entities.reminder import Reminder
from src.core.entities.work_item import WorkItem
from src.core.exceptions import GatewayError, ReminderNotFoundError, WorkItemNotFoundError
from src.core.interfaces import (
    IDomainEventDispatcher,
    IJobDispatchGateway,
    INotificationSender,
    IReminderStore,
    IWorkItemStore,
)
from src.core.services import SchedulingPolicy

logger = get_logger(__name__)


class ReminderUseCaseBase:
    """
    Optional injected ports with lazy defaults.

    Anything not passed in is resolved on first use from the storage
    singletons and the application service factories.
    """

    def __init__(
        self,
        work_item_store: IWorkItemStore | None = None,
        reminder_store: IReminderStore | None = None,
        job_gateway: IJobDispatchGateway | None = None,
        event_dispatcher: IDomainEventDispatcher | None = None,
        notification_sender: INotificationSender | None = None,
        policy: SchedulingPolicy | None = None,
    ):
        self._work_item_store = work_item_store
        self._reminder_store = reminder_store
        self._job_gateway = job_gateway
        self._event_dispatcher = event_dispatcher
        self._notification_sender = notification_sender
        self._policy = policy

    async def _get_work_item_store(self) -> IWorkItemStore:
        if self._work_item_store is None:
            from src.infrastructure.storage.sqlite import get_work_item_store

            self._work_item_store = await get_work_item_store()
        return self._work_item_store

    async def _get_reminder_store(self) -> IReminderStore:
        if self._reminder_store is None:
            from src.infrastructure.storage.sqlite import get_reminder_store

            self._reminder_store = await get_reminder_store()
        return self._reminder_store

    def _get_job_gateway(self) -> IJobDispatchGateway:
        if self._job_gateway is None:
            from src.application.services import get_job_gateway

            self._job_gateway = get_job_gateway()
        return self._job_gateway

    def _get_event_dispatcher(self) -> IDomainEventDispatcher:
        if self._event_dispatcher is None:
            from src.application.services import get_event_dispatcher

            self._event_dispatcher = get_event_dispatcher()
        return self._event_dispatcher

    def _get_notification_sender(self) -> INotificationSender:
        if self._notification_sender is None:
            from src.application.services import get_notification_sender

            self._notification_sender = get_notification_sender()
        return self._notification_sender

    def _get_policy(self) -> SchedulingPolicy:
        if self._policy is None:
            from src.application.services import get_scheduling_policy

            self._policy = get_scheduling_policy()
        return self._policy

    # ------------------------------------------------------------------
    # Tenant-scoped loading
    # ------------------------------------------------------------------

    async def _load_work_item(self, tenant_id: str, work_item_id: str) -> WorkItem:
        """Load a work item; other tenants' items are reported as missing."""
        store = await self._get_work_item_store()
        work_item = await store.get(work_item_id)
        if work_item is None or work_item.tenant_id != tenant_id:
            raise WorkItemNotFoundError(work_item_id)
        return work_item

    async def _load_reminder(self, tenant_id: str, reminder_id: str) -> Reminder:
        """Load a reminder; other tenants' reminders are reported as missing."""
        store = await self._get_reminder_store()
        reminder = await store.get(reminder_id)
        if reminder is None or reminder.tenant_id != tenant_id:
            raise ReminderNotFoundError(reminder_id)
        return reminder

    # ------------------------------------------------------------------
    # Job bookkeeping (never fails the command)
    # ------------------------------------------------------------------

    async def _delete_job(self, reminder_id: str) -> None:
        gateway = self._get_job_gateway()
        job_id = gateway.job_id_for(reminder_id)
        try:
            await gateway.delete(job_id)
        except GatewayError as e:
            logger.warning("job_delete_failed", job_id=job_id, error=e.message)
