"""Datetime column encoding for SQLite."""

from datetime import datetime

from src.core.clock import ensure_utc

# Fixed width so that string comparison in SQL matches time ordering
DB_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f+00:00"


def to_db_time(value: datetime | None) -> str | None:
    if value is None:
        return None
    return ensure_utc(value).strftime(DB_TIME_FORMAT)


def from_db_time(value: str | None) -> datetime | None:
    if not value:
        return None
    return ensure_utc(datetime.fromisoformat(value))
