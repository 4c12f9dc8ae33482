"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
    set_pool,
)
from src.infrastructure.storage.sqlite.reminder_store import SQLiteReminderStore
from src.infrastructure.storage.sqlite.work_item_store import SQLiteWorkItemStore

# Singleton instances
_work_item_store: SQLiteWorkItemStore | None = None
_reminder_store: SQLiteReminderStore | None = None


async def get_work_item_store() -> SQLiteWorkItemStore:
    """Get singleton work item store instance."""
    global _work_item_store
    if _work_item_store is None:
        _work_item_store = SQLiteWorkItemStore()
    return _work_item_store


async def get_reminder_store() -> SQLiteReminderStore:
    """Get singleton reminder store instance."""
    global _reminder_store
    if _reminder_store is None:
        _reminder_store = SQLiteReminderStore()
    return _reminder_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "set_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteWorkItemStore",
    "SQLiteReminderStore",
    # Factory functions
    "get_work_item_store",
    "get_reminder_store",
]
