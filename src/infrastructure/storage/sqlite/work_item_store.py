"""
SQLite implementation of work item storage.

Tags are stored as a JSON array; reminders live in their own table and are
attached on read. Updates are guarded by row_version, and a new reminder is
inserted in the same transaction as the write of its work item.
"""

import json

import aiosqlite

from src.config import get_logger
from src.core.entities.reminder import Reminder
from src.core.entities.work_item import WorkItem, WorkItemPriority, WorkItemState
from src.core.exceptions import (
    ConcurrencyError,
    DatabaseError,
    DuplicateTitleError,
    WorkItemNotFoundError,
)
from src.core.interfaces.storage import IWorkItemStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from src.infrastructure.storage.sqlite.reminder_store import SQLiteReminderStore
from src.infrastructure.storage.sqlite.timestamps import from_db_time, to_db_time

logger = get_logger(__name__)


class SQLiteWorkItemStore(IWorkItemStore):
    """SQLite implementation of work item storage."""

    async def create(self, work_item: WorkItem) -> WorkItem:
        """Insert a new work item."""
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO work_items (
                        id, tenant_id, title, description, priority, state,
                        due_date, completed_at, estimated_hours, actual_hours, tags,
                        created_by, created_at, updated_by, updated_at,
                        deleted_by, deleted_at, row_version
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        work_item.id,
                        work_item.tenant_id,
                        work_item.title,
                        work_item.description,
                        work_item.priority.value,
                        work_item.state.value,
                        to_db_time(work_item.due_date),
                        to_db_time(work_item.completed_at),
                        work_item.estimated_hours,
                        work_item.actual_hours,
                        json.dumps(work_item.tags),
                        work_item.created_by,
                        to_db_time(work_item.created_at),
                        work_item.updated_by,
                        to_db_time(work_item.updated_at),
                        work_item.deleted_by,
                        to_db_time(work_item.deleted_at),
                        work_item.row_version,
                    ),
                )
        except aiosqlite.IntegrityError as e:
            raise self._translate_integrity_error(work_item, e) from e

        logger.info(
            "work_item_created",
            work_item_id=work_item.id,
            tenant_id=work_item.tenant_id,
        )
        return work_item

    async def get(self, work_item_id: str) -> WorkItem | None:
        """Get work item by ID with its reminders."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM work_items WHERE id = ?", (work_item_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None

            work_item = self._row_to_entity(row)
            work_item.reminders = await SQLiteReminderStore.fetch_for_work_item(
                conn, work_item_id
            )
            return work_item

    async def update(self, work_item: WorkItem, expected_version: int) -> WorkItem:
        """Persist work item fields if nobody wrote the row since it was loaded."""
        try:
            async with get_transaction() as conn:
                await self._write_guarded(conn, work_item, expected_version)
        except aiosqlite.IntegrityError as e:
            raise self._translate_integrity_error(work_item, e) from e

        logger.info(
            "work_item_updated",
            work_item_id=work_item.id,
            state=work_item.state.value,
            row_version=work_item.row_version,
        )
        return work_item

    async def add_reminder(
        self,
        work_item: WorkItem,
        reminder: Reminder,
        expected_version: int,
    ) -> WorkItem:
        """Insert the reminder and write the work item atomically."""
        try:
            async with get_transaction() as conn:
                await self._write_guarded(conn, work_item, expected_version)
                await SQLiteReminderStore.insert(conn, reminder)
        except aiosqlite.IntegrityError as e:
            raise self._translate_integrity_error(work_item, e) from e

        logger.info(
            "work_item_reminder_added",
            work_item_id=work_item.id,
            reminder_id=reminder.id,
            trigger_at=reminder.trigger_at.isoformat(),
        )
        return work_item

    async def _write_guarded(
        self,
        conn: aiosqlite.Connection,
        work_item: WorkItem,
        expected_version: int,
    ) -> None:
        cursor = await conn.execute(
            """
            UPDATE work_items SET
                title = ?, description = ?, priority = ?, state = ?,
                due_date = ?, completed_at = ?, estimated_hours = ?,
                actual_hours = ?, tags = ?, updated_by = ?, updated_at = ?,
                deleted_by = ?, deleted_at = ?, row_version = ?
            WHERE id = ? AND row_version = ?
            """,
            (
                work_item.title,
                work_item.description,
                work_item.priority.value,
                work_item.state.value,
                to_db_time(work_item.due_date),
                to_db_time(work_item.completed_at),
                work_item.estimated_hours,
                work_item.actual_hours,
                json.dumps(work_item.tags),
                work_item.updated_by,
                to_db_time(work_item.updated_at),
                work_item.deleted_by,
                to_db_time(work_item.deleted_at),
                work_item.row_version,
                work_item.id,
                expected_version,
            ),
        )
        if cursor.rowcount > 0:
            return

        cursor = await conn.execute("SELECT 1 FROM work_items WHERE id = ?", (work_item.id,))
        if await cursor.fetchone() is None:
            raise WorkItemNotFoundError(work_item.id)
        logger.warning(
            "work_item_update_conflict",
            work_item_id=work_item.id,
            expected_version=expected_version,
        )
        raise ConcurrencyError("work item", work_item.id, expected_version=expected_version)

    async def is_title_unique(
        self,
        tenant_id: str,
        title: str,
        exclude_id: str | None = None,
    ) -> bool:
        """Case-insensitive title check within one tenant."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT 1 FROM work_items
                WHERE tenant_id = ? AND title = ? COLLATE NOCASE AND id != ?
                LIMIT 1
                """,
                (tenant_id, title.strip(), exclude_id or ""),
            )
            return await cursor.fetchone() is None

    @staticmethod
    def _translate_integrity_error(
        work_item: WorkItem, error: aiosqlite.IntegrityError
    ) -> Exception:
        if "idx_work_items_tenant_title" in str(error) or "work_items.title" in str(error):
            return DuplicateTitleError(work_item.tenant_id, work_item.title)
        return DatabaseError("write work item", str(error))

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> WorkItem:
        """Convert a database row to a WorkItem (reminders not loaded)."""
        return WorkItem(
            id=row["id"],
            tenant_id=row["tenant_id"],
            title=row["title"],
            description=row["description"],
            priority=WorkItemPriority(row["priority"]),
            state=WorkItemState(row["state"]),
            due_date=from_db_time(row["due_date"]),
            completed_at=from_db_time(row["completed_at"]),
            estimated_hours=row["estimated_hours"],
            actual_hours=row["actual_hours"],
            tags=json.loads(row["tags"] or "[]"),
            created_by=row["created_by"],
            created_at=from_db_time(row["created_at"]),
            updated_by=row["updated_by"],
            updated_at=from_db_time(row["updated_at"]),
            deleted_by=row["deleted_by"],
            deleted_at=from_db_time(row["deleted_at"]),
            row_version=row["row_version"],
        )
