"""
SQLite implementation of reminder storage.

Writes go through a conditional UPDATE keyed on the status and row_version
the caller loaded, so two workers racing on one reminder cannot both win
and a command based on a stale read cannot undo a newer one.
"""

from datetime import datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.reminder import Reminder, ReminderStatus
from src.core.interfaces.storage import IReminderStore, WriteOutcome
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from src.infrastructure.storage.sqlite.timestamps import from_db_time, to_db_time

logger = get_logger(__name__)


class SQLiteReminderStore(IReminderStore):
    """SQLite implementation of reminder storage."""

    async def create(self, reminder: Reminder) -> Reminder:
        """Insert a new reminder."""
        async with get_transaction() as conn:
            await self.insert(conn, reminder)
        logger.info(
            "reminder_created",
            reminder_id=reminder.id,
            work_item_id=reminder.work_item_id,
            trigger_at=reminder.trigger_at.isoformat(),
        )
        return reminder

    async def get(self, reminder_id: str) -> Reminder | None:
        """Get reminder by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM reminders WHERE id = ?", (reminder_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def update(
        self,
        reminder: Reminder,
        expected_status: ReminderStatus,
        expected_version: int,
    ) -> WriteOutcome:
        """Write the reminder if the stored status and version are still the loaded ones."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE reminders SET
                    trigger_at = ?, message = ?, status = ?,
                    triggered_at = ?, error_message = ?,
                    claimed_by = ?, claimed_at = ?,
                    updated_by = ?, updated_at = ?, row_version = ?
                WHERE id = ? AND status = ? AND row_version = ?
                """,
                (
                    to_db_time(reminder.trigger_at),
                    reminder.message,
                    reminder.status.value,
                    to_db_time(reminder.triggered_at),
                    reminder.error_message,
                    reminder.claimed_by,
                    to_db_time(reminder.claimed_at),
                    reminder.updated_by,
                    to_db_time(reminder.updated_at),
                    reminder.row_version,
                    reminder.id,
                    expected_status.value,
                    expected_version,
                ),
            )
            if cursor.rowcount > 0:
                logger.info(
                    "reminder_updated",
                    reminder_id=reminder.id,
                    status=reminder.status.value,
                    row_version=reminder.row_version,
                )
                return WriteOutcome.APPLIED

            cursor = await conn.execute("SELECT 1 FROM reminders WHERE id = ?", (reminder.id,))
            exists = await cursor.fetchone() is not None

        if not exists:
            logger.warning("reminder_update_missing", reminder_id=reminder.id)
            return WriteOutcome.NOT_FOUND

        logger.warning(
            "reminder_update_conflict",
            reminder_id=reminder.id,
            expected_status=expected_status.value,
            expected_version=expected_version,
        )
        return WriteOutcome.CONFLICT

    async def find_due_before(
        self,
        as_of: datetime,
        limit: int = 100,
        tenant_id: str | None = None,
    ) -> list[Reminder]:
        """Scheduled reminders due at or before as_of, oldest first."""
        query = "SELECT * FROM reminders WHERE status = ? AND trigger_at <= ?"
        params: list = [ReminderStatus.SCHEDULED.value, to_db_time(as_of)]
        if tenant_id is not None:
            query += " AND tenant_id = ?"
            params.append(tenant_id)
        query += " ORDER BY trigger_at ASC LIMIT ?"
        params.append(limit)

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def find_by_work_item(self, work_item_id: str) -> list[Reminder]:
        """Reminders of one work item ordered by trigger time."""
        async with get_connection() as conn:
            return await self.fetch_for_work_item(conn, work_item_id)

    async def list_scheduled(self, limit: int = 1000) -> list[Reminder]:
        """Every Scheduled reminder, soonest first."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM reminders
                WHERE status = ?
                ORDER BY trigger_at ASC
                LIMIT ?
                """,
                (ReminderStatus.SCHEDULED.value, limit),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    @staticmethod
    async def insert(conn: aiosqlite.Connection, reminder: Reminder) -> None:
        """Insert on a connection that is already inside a transaction."""
        await conn.execute(
            """
            INSERT INTO reminders (
                id, tenant_id, work_item_id, trigger_at, message, status,
                triggered_at, error_message, claimed_by, claimed_at,
                created_by, created_at, updated_by, updated_at, row_version
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                reminder.id,
                reminder.tenant_id,
                reminder.work_item_id,
                to_db_time(reminder.trigger_at),
                reminder.message,
                reminder.status.value,
                to_db_time(reminder.triggered_at),
                reminder.error_message,
                reminder.claimed_by,
                to_db_time(reminder.claimed_at),
                reminder.created_by,
                to_db_time(reminder.created_at),
                reminder.updated_by,
                to_db_time(reminder.updated_at),
                reminder.row_version,
            ),
        )

    @classmethod
    async def fetch_for_work_item(
        cls, conn: aiosqlite.Connection, work_item_id: str
    ) -> list[Reminder]:
        """Load reminders on an already acquired connection."""
        cursor = await conn.execute(
            """
            SELECT * FROM reminders
            WHERE work_item_id = ?
            ORDER BY trigger_at ASC
            """,
            (work_item_id,),
        )
        rows = await cursor.fetchall()
        return [cls._row_to_entity(row) for row in rows]

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Reminder:
        """Convert a database row to a Reminder entity."""
        return Reminder(
            id=row["id"],
            tenant_id=row["tenant_id"],
            work_item_id=row["work_item_id"],
            trigger_at=from_db_time(row["trigger_at"]),
            message=row["message"],
            status=ReminderStatus(row["status"]),
            triggered_at=from_db_time(row["triggered_at"]),
            error_message=row["error_message"],
            claimed_by=row["claimed_by"],
            claimed_at=from_db_time(row["claimed_at"]),
            created_by=row["created_by"],
            created_at=from_db_time(row["created_at"]),
            updated_by=row["updated_by"],
            updated_at=from_db_time(row["updated_at"]),
            row_version=row["row_version"],
        )
