"""Create Work Item Use Case."""

from src.application.dto.requests import CreateWorkItemRequest
from src.application.events import publish_events
from src.application.use_cases.base import ReminderUseCaseBase
from src.config import get_logger
from src.core.entities.work_item import WorkItem
from src.core.exceptions import DuplicateTitleError

logger = get_logger(__name__)


class CreateWorkItemUseCase(ReminderUseCaseBase):
    """Create a Draft work item with a tenant-unique title."""

    async def execute(
        self,
        request: CreateWorkItemRequest,
        tenant_id: str,
        actor: str,
    ) -> WorkItem:
        work_item = WorkItem.create(
            tenant_id=tenant_id,
            title=request.title,
            actor=actor,
            description=request.description,
            priority=request.priority,
            due_date=request.due_date,
            estimated_hours=request.estimated_hours,
            tags=request.tags,
        )

        store = await self._get_work_item_store()
        if not await store.is_title_unique(tenant_id, work_item.title):
            raise DuplicateTitleError(tenant_id, work_item.title)

        # The unique index still catches a concurrent insert of the same title
        await store.create(work_item)
        await publish_events(self._get_event_dispatcher(), work_item.drain_events())
        return work_item
