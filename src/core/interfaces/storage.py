"""
Abstract interfaces for storage providers.

Defines contracts for work item and reminder stores. Every update is
conditional on the row_version the caller loaded, so a write based on a
stale read never overwrites a newer commit.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum

from src.core.entities.reminder import Reminder, ReminderStatus
from src.core.entities.work_item import WorkItem


class WriteOutcome(str, Enum):
    """Result of a conditional (status and version guarded) write."""

    APPLIED = "applied"
    CONFLICT = "conflict"  # row exists but its status or version no longer matched
    NOT_FOUND = "not_found"


class IWorkItemStore(ABC):
    """
    Abstract interface for work item storage.

    Work items are returned with their reminders attached.
    """

    @abstractmethod
    async def create(self, work_item: WorkItem) -> WorkItem:
        """Insert a new work item (reminders are stored separately)."""
        pass

    @abstractmethod
    async def get(self, work_item_id: str) -> WorkItem | None:
        """Get work item by ID, reminders included."""
        pass

    @abstractmethod
    async def update(self, work_item: WorkItem, expected_version: int) -> WorkItem:
        """
        Persist work item fields if the stored row_version is expected_version.

        Raises:
            WorkItemNotFoundError: No such work item
            ConcurrencyError: The row changed since it was loaded
        """
        pass

    @abstractmethod
    async def add_reminder(
        self,
        work_item: WorkItem,
        reminder: Reminder,
        expected_version: int,
    ) -> WorkItem:
        """
        Insert a new reminder and persist its work item in one transaction.

        Nothing is written when the work item's row_version is no longer
        expected_version.

        Raises:
            WorkItemNotFoundError: No such work item
            ConcurrencyError: The work item changed since it was loaded
        """
        pass

    @abstractmethod
    async def is_title_unique(
        self,
        tenant_id: str,
        title: str,
        exclude_id: str | None = None,
    ) -> bool:
        """Check title uniqueness within a tenant (case-insensitive)."""
        pass


class IReminderStore(ABC):
    """Abstract interface for reminder storage."""

    @abstractmethod
    async def create(self, reminder: Reminder) -> Reminder:
        """Insert a new reminder."""
        pass

    @abstractmethod
    async def get(self, reminder_id: str) -> Reminder | None:
        """Get reminder by ID."""
        pass

    @abstractmethod
    async def update(
        self,
        reminder: Reminder,
        expected_status: ReminderStatus,
        expected_version: int,
    ) -> WriteOutcome:
        """
        Persist a reminder only if the stored status and row_version still
        equal the ones the caller loaded.

        The check and the write happen in one statement; a lost race
        comes back as WriteOutcome.CONFLICT.
        """
        pass

    @abstractmethod
    async def find_due_before(
        self,
        as_of: datetime,
        limit: int = 100,
        tenant_id: str | None = None,
    ) -> list[Reminder]:
        """Scheduled reminders with trigger time <= as_of, oldest first."""
        pass

    @abstractmethod
    async def find_by_work_item(self, work_item_id: str) -> list[Reminder]:
        """All reminders of a work item ordered by trigger time."""
        pass

    @abstractmethod
    async def list_scheduled(self, limit: int = 1000) -> list[Reminder]:
        """All Scheduled reminders ordered by trigger time."""
        pass
