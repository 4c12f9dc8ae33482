"""
Domain exceptions for the SmartTask reminder service.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class SmartTaskError(Exception):
    """Base exception for all SmartTask errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for callers that render errors."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(SmartTaskError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class DuplicateTitleError(ValidationError):
    """Work item title already used within the tenant."""

    def __init__(self, tenant_id: str, title: str):
        super().__init__(
            field="title",
            message=f"Work item with title '{title}' already exists in this tenant",
            value=title,
        )
        self.code = "DUPLICATE_TITLE"
        self.details["tenant_id"] = tenant_id


# Lookup Exceptions
class NotFoundError(SmartTaskError):
    """Referenced entity is absent or belongs to another tenant."""

    pass


class WorkItemNotFoundError(NotFoundError):
    """Work item not found (or not visible to the caller's tenant)."""

    def __init__(self, work_item_id: str):
        super().__init__(
            f"Work item not found: {work_item_id}",
            code="WORK_ITEM_NOT_FOUND",
            details={"work_item_id": work_item_id},
        )


class ReminderNotFoundError(NotFoundError):
    """Reminder not found (or not visible to the caller's tenant)."""

    def __init__(self, reminder_id: str):
        super().__init__(
            f"Reminder not found: {reminder_id}",
            code="REMINDER_NOT_FOUND",
            details={"reminder_id": reminder_id},
        )


# State machine Exceptions
class InvalidStateError(SmartTaskError):
    """Operation not allowed in the entity's current state."""

    def __init__(self, entity: str, entity_id: str, state: str, operation: str):
        super().__init__(
            f"Cannot {operation} {entity} {entity_id} in state '{state}'",
            code="INVALID_STATE",
            details={
                "entity": entity,
                "entity_id": entity_id,
                "state": state,
                "operation": operation,
            },
        )


class ConcurrencyError(SmartTaskError):
    """A conditional write lost the race against another writer."""

    def __init__(
        self,
        entity: str,
        entity_id: str,
        expected_state: str | None = None,
        *,
        expected_version: int | None = None,
    ):
        expected = []
        if expected_state is not None:
            expected.append(f"state '{expected_state}'")
        if expected_version is not None:
            expected.append(f"version {expected_version}")
        message = f"{entity.capitalize()} {entity_id} was modified concurrently"
        if expected:
            message += f" (expected {', '.join(expected)})"
        super().__init__(
            message,
            code="CONCURRENCY_CONFLICT",
            details={
                "entity": entity,
                "entity_id": entity_id,
                "expected_state": expected_state,
                "expected_version": expected_version,
            },
        )


# Storage Exceptions
class StorageError(SmartTaskError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Integration Exceptions
class GatewayError(SmartTaskError):
    """External job scheduler call failed."""

    def __init__(self, operation: str, job_id: str, reason: str):
        super().__init__(
            f"Job gateway {operation} failed for '{job_id}': {reason}",
            code="GATEWAY_ERROR",
            details={"operation": operation, "job_id": job_id, "reason": reason},
        )


class NotificationError(SmartTaskError):
    """Notification could not be delivered."""

    def __init__(self, recipient: str, reason: str):
        super().__init__(
            f"Failed to notify '{recipient}': {reason}",
            code="NOTIFICATION_FAILED",
            details={"recipient": recipient, "reason": reason},
        )


class ConfigurationError(SmartTaskError):
    """Configuration error."""

    pass
