"""List Due Reminders Use Case."""

from datetime import timedelta

from src.application.dto.requests import ListDueRemindersRequest
from src.application.use_cases.base import ReminderUseCaseBase
from src.core.clock import ensure_utc, utcnow
from src.core.entities.reminder import Reminder
from src.core.exceptions import ValidationError

MAX_LOOKAHEAD = timedelta(minutes=5)
MAX_LIMIT = 1000


class ListDueRemindersUseCase(ReminderUseCaseBase):
    """Scheduled reminders due at or before a point in time, oldest first."""

    async def execute(
        self,
        request: ListDueRemindersRequest,
        tenant_id: str | None = None,
    ) -> list[Reminder]:
        now = utcnow()
        as_of = ensure_utc(request.as_of) if request.as_of is not None else now
        if as_of > now + MAX_LOOKAHEAD:
            raise ValidationError(
                "as_of",
                "Cannot look more than 5 minutes into the future",
                value=as_of.isoformat(),
            )
        if request.limit < 1 or request.limit > MAX_LIMIT:
            raise ValidationError(
                "limit", f"Limit must be between 1 and {MAX_LIMIT}", value=request.limit
            )

        store = await self._get_reminder_store()
        return await store.find_due_before(as_of, limit=request.limit, tenant_id=tenant_id)
