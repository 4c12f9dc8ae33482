"""Storage infrastructure implementations."""

from src.infrastructure.storage.sqlite import (
    SQLiteReminderStore,
    SQLiteWorkItemStore,
    close_pool,
    get_connection,
    get_pool,
    get_reminder_store,
    get_transaction,
    get_work_item_store,
)

__all__ = [
    # SQLite stores
    "SQLiteWorkItemStore",
    "SQLiteReminderStore",
    "get_work_item_store",
    "get_reminder_store",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
