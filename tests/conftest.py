"""Pytest configuration and fixtures."""

from collections.abc import Callable, Generator
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from src.application.services import reset_services
from src.config import reset_settings
from src.core.clock import utcnow
from src.core.entities import Reminder, ReminderStatus, WorkItem

TENANT = "tenant-a"
OTHER_TENANT = "tenant-b"
OWNER = "alice"
SCHEDULER = "bob"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point storage at a temp dir and drop cached singletons around each test."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


@pytest.fixture
def now() -> datetime:
    return utcnow()


@pytest.fixture
def make_work_item() -> Callable[..., WorkItem]:
    """Factory for Draft work items owned by OWNER in TENANT."""

    def _make(title: str = "Prepare quarterly report", **kwargs) -> WorkItem:
        item = WorkItem.create(
            tenant_id=kwargs.pop("tenant_id", TENANT),
            title=title,
            actor=kwargs.pop("actor", OWNER),
            **kwargs,
        )
        item.drain_events()
        return item

    return _make


@pytest.fixture
def make_reminder() -> Callable[..., Reminder]:
    """
    Factory for reminders built directly, bypassing the lead-time check.

    Lets tests create reminders that are already due.
    """

    def _make(
        work_item: WorkItem,
        trigger_at: datetime | None = None,
        message: str = "Report is due soon",
        status: ReminderStatus = ReminderStatus.SCHEDULED,
        created_by: str = SCHEDULER,
    ) -> Reminder:
        return Reminder(
            tenant_id=work_item.tenant_id,
            work_item_id=work_item.id,
            trigger_at=trigger_at or utcnow() - timedelta(minutes=1),
            message=message,
            status=status,
            created_by=created_by,
        )

    return _make
