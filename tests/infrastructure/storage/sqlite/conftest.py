"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from src.infrastructure.storage.sqlite.connection import ConnectionPool, set_pool
from src.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def sqlite_db(temp_db_path: Path) -> AsyncGenerator[Path, None]:
    """Migrated temp database installed as the global pool."""
    await initialize_database(temp_db_path, create_backup_before=False)
    pool = ConnectionPool(temp_db_path, pool_size=2)
    await pool.initialize()
    set_pool(pool)
    yield temp_db_path
    await pool.close()
    set_pool(None)
