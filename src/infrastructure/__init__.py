"""Infrastructure layer implementations."""

from src.infrastructure import notifications, scheduler, storage

__all__ = ["storage", "scheduler", "notifications"]
