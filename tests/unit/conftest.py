"""In-memory store fakes and mocked ports for application tests."""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from src.core.entities import Reminder, ReminderStatus, WorkItem
from src.core.exceptions import ConcurrencyError, WorkItemNotFoundError
from src.core.interfaces import (
    IDomainEventDispatcher,
    IJobDispatchGateway,
    INotificationSender,
    IReminderStore,
    IWorkItemStore,
    WriteOutcome,
    reminder_job_id,
)


def _snapshot(entity):
    copy = entity.model_copy(deep=True)
    copy.drain_events()
    return copy


class InMemoryReminderStore(IReminderStore):
    """Dict-backed reminder store with the same conditional write rules."""

    def __init__(self):
        self.rows: dict[str, Reminder] = {}

    async def create(self, reminder: Reminder) -> Reminder:
        self.rows[reminder.id] = _snapshot(reminder)
        return reminder

    async def get(self, reminder_id: str) -> Reminder | None:
        row = self.rows.get(reminder_id)
        return _snapshot(row) if row else None

    async def update(
        self,
        reminder: Reminder,
        expected_status: ReminderStatus,
        expected_version: int,
    ) -> WriteOutcome:
        row = self.rows.get(reminder.id)
        if row is None:
            return WriteOutcome.NOT_FOUND
        if row.status != expected_status or row.row_version != expected_version:
            return WriteOutcome.CONFLICT
        self.rows[reminder.id] = _snapshot(reminder)
        return WriteOutcome.APPLIED

    async def find_due_before(
        self, as_of: datetime, limit: int = 100, tenant_id: str | None = None
    ) -> list[Reminder]:
        due = [
            r for r in self.rows.values()
            if r.status == ReminderStatus.SCHEDULED
            and r.trigger_at <= as_of
            and (tenant_id is None or r.tenant_id == tenant_id)
        ]
        return [_snapshot(r) for r in sorted(due, key=lambda r: r.trigger_at)[:limit]]

    async def find_by_work_item(self, work_item_id: str) -> list[Reminder]:
        rows = [r for r in self.rows.values() if r.work_item_id == work_item_id]
        return [_snapshot(r) for r in sorted(rows, key=lambda r: r.trigger_at)]

    async def list_scheduled(self, limit: int = 1000) -> list[Reminder]:
        rows = [r for r in self.rows.values() if r.status == ReminderStatus.SCHEDULED]
        return [_snapshot(r) for r in sorted(rows, key=lambda r: r.trigger_at)[:limit]]


class InMemoryWorkItemStore(IWorkItemStore):
    """Dict-backed work item store; reminders are read from the reminder fake."""

    def __init__(self, reminders: InMemoryReminderStore):
        self.rows: dict[str, WorkItem] = {}
        self.reminders = reminders

    async def create(self, work_item: WorkItem) -> WorkItem:
        self.rows[work_item.id] = _snapshot(work_item)
        return work_item

    async def get(self, work_item_id: str) -> WorkItem | None:
        row = self.rows.get(work_item_id)
        if row is None:
            return None
        item = _snapshot(row)
        item.reminders = await self.reminders.find_by_work_item(work_item_id)
        return item

    def _check_version(self, work_item: WorkItem, expected_version: int) -> None:
        row = self.rows.get(work_item.id)
        if row is None:
            raise WorkItemNotFoundError(work_item.id)
        if row.row_version != expected_version:
            raise ConcurrencyError("work item", work_item.id, expected_version=expected_version)

    async def update(self, work_item: WorkItem, expected_version: int) -> WorkItem:
        self._check_version(work_item, expected_version)
        self.rows[work_item.id] = _snapshot(work_item)
        return work_item

    async def add_reminder(
        self, work_item: WorkItem, reminder: Reminder, expected_version: int
    ) -> WorkItem:
        self._check_version(work_item, expected_version)
        self.rows[work_item.id] = _snapshot(work_item)
        await self.reminders.create(reminder)
        return work_item

    async def is_title_unique(self, tenant_id: str, title: str, exclude_id: str | None = None) -> bool:
        return not any(
            row.tenant_id == tenant_id
            and row.title.lower() == title.strip().lower()
            and row.id != exclude_id
            for row in self.rows.values()
        )


@pytest.fixture
def reminder_store() -> InMemoryReminderStore:
    return InMemoryReminderStore()


@pytest.fixture
def work_item_store(reminder_store: InMemoryReminderStore) -> InMemoryWorkItemStore:
    return InMemoryWorkItemStore(reminder_store)


@pytest.fixture
def gateway() -> AsyncMock:
    gateway = AsyncMock(spec=IJobDispatchGateway)
    gateway.job_id_for.side_effect = reminder_job_id
    gateway.schedule_at.side_effect = lambda reminder_id, trigger_at: reminder_job_id(reminder_id)
    gateway.delete.return_value = True
    gateway.reschedule.return_value = True
    return gateway


@pytest.fixture
def dispatcher() -> AsyncMock:
    return AsyncMock(spec=IDomainEventDispatcher)


@pytest.fixture
def sender() -> AsyncMock:
    return AsyncMock(spec=INotificationSender)


@pytest.fixture
def ports(work_item_store, reminder_store, gateway, dispatcher, sender) -> dict:
    """Keyword arguments wiring every port of a use case."""
    return {
        "work_item_store": work_item_store,
        "reminder_store": reminder_store,
        "job_gateway": gateway,
        "event_dispatcher": dispatcher,
        "notification_sender": sender,
    }


@pytest.fixture
def seed(work_item_store: InMemoryWorkItemStore, reminder_store: InMemoryReminderStore):
    """Store a work item and any reminders directly."""

    async def _seed(work_item: WorkItem, *reminders: Reminder) -> None:
        await work_item_store.create(work_item)
        for reminder in reminders:
            await reminder_store.create(reminder)

    return _seed
