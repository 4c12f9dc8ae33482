"""Fixtures for end-to-end flows over a real SQLite database."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from src.core.interfaces import IJobDispatchGateway, reminder_job_id
from src.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteReminderStore,
    SQLiteWorkItemStore,
    set_pool,
)
from src.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Path, None]:
    db_path = tmp_path / "integration.db"
    await initialize_database(db_path, create_backup_before=False)
    pool = ConnectionPool(db_path, pool_size=3)
    await pool.initialize()
    set_pool(pool)
    yield db_path
    await pool.close()
    set_pool(None)


@pytest.fixture
def gateway() -> AsyncMock:
    gateway = AsyncMock(spec=IJobDispatchGateway)
    gateway.job_id_for.side_effect = reminder_job_id
    gateway.schedule_at.side_effect = lambda reminder_id, trigger_at: reminder_job_id(reminder_id)
    gateway.reschedule.return_value = True
    return gateway


@pytest.fixture
def sqlite_ports(database, gateway) -> dict:
    return {
        "work_item_store": SQLiteWorkItemStore(),
        "reminder_store": SQLiteReminderStore(),
        "job_gateway": gateway,
        "event_dispatcher": AsyncMock(),
    }
