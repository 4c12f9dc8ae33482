"""Unit tests for domain exceptions."""

import pytest

from src.core.exceptions import (
    ConcurrencyError,
    ConfigurationError,
    DatabaseError,
    DuplicateTitleError,
    GatewayError,
    InvalidStateError,
    NotFoundError,
    NotificationError,
    ReminderNotFoundError,
    SmartTaskError,
    StorageError,
    ValidationError,
    WorkItemNotFoundError,
)


class TestSmartTaskError:
    """Tests for base SmartTaskError exception."""

    def test_basic_initialization(self):
        """Code defaults to the class name."""
        error = SmartTaskError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.code == "SmartTaskError"
        assert error.details == {}

    def test_to_dict(self):
        """to_dict exposes code, message and details."""
        error = SmartTaskError("Boom", code="BOOM", details={"key": "value"})
        assert error.to_dict() == {
            "error": "BOOM",
            "message": "Boom",
            "details": {"key": "value"},
        }


class TestValidationErrors:
    """Tests for validation exceptions."""

    def test_validation_error_details(self):
        error = ValidationError("title", "Title is required", value="")
        assert error.code == "VALIDATION_ERROR"
        assert error.details["field"] == "title"
        assert "title" in error.message

    def test_validation_error_truncates_value(self):
        """Offending values are cut to 100 characters."""
        error = ValidationError("message", "too long", value="x" * 500)
        assert len(error.details["value"]) == 100

    def test_duplicate_title_is_validation_error(self):
        error = DuplicateTitleError("tenant-a", "Plan sprint")
        assert isinstance(error, ValidationError)
        assert error.code == "DUPLICATE_TITLE"
        assert error.details["tenant_id"] == "tenant-a"


class TestNotFoundErrors:
    """Tests for lookup exceptions."""

    @pytest.mark.parametrize(
        "error, code, key",
        [
            (WorkItemNotFoundError("wi-1"), "WORK_ITEM_NOT_FOUND", "work_item_id"),
            (ReminderNotFoundError("r-1"), "REMINDER_NOT_FOUND", "reminder_id"),
        ],
    )
    def test_codes(self, error: NotFoundError, code: str, key: str):
        assert isinstance(error, NotFoundError)
        assert error.code == code
        assert key in error.details


class TestStateErrors:
    """Tests for state machine and concurrency exceptions."""

    def test_invalid_state_error(self):
        error = InvalidStateError("reminder", "r-1", "triggered", "trigger")
        assert error.code == "INVALID_STATE"
        assert error.details["state"] == "triggered"
        assert "Cannot trigger reminder r-1" in error.message

    def test_concurrency_error(self):
        error = ConcurrencyError("reminder", "r-1", "scheduled")
        assert error.code == "CONCURRENCY_CONFLICT"
        assert error.details["expected_state"] == "scheduled"

    def test_concurrency_error_with_version(self):
        error = ConcurrencyError("work item", "w-1", expected_version=3)
        assert error.details["expected_version"] == 3
        assert error.details["expected_state"] is None
        assert error.message == "Work item w-1 was modified concurrently (expected version 3)"


class TestIntegrationErrors:
    """Tests for storage, gateway and notification exceptions."""

    def test_database_error_is_storage_error(self):
        error = DatabaseError("insert", "disk full")
        assert isinstance(error, StorageError)
        assert error.details == {"operation": "insert", "error": "disk full"}

    def test_gateway_error(self):
        error = GatewayError("delete", "reminder_r-1", "scheduler down")
        assert error.code == "GATEWAY_ERROR"
        assert error.details["job_id"] == "reminder_r-1"

    def test_notification_error(self):
        error = NotificationError("alice", "HTTP 500")
        assert error.code == "NOTIFICATION_FAILED"
        assert "alice" in error.message

    def test_all_inherit_from_base(self):
        for error in (
            ConfigurationError("bad"),
            GatewayError("x", "y", "z"),
            NotificationError("a", "b"),
        ):
            assert isinstance(error, SmartTaskError)
