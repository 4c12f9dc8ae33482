"""Unit tests for storage interface abstract classes."""

import pytest

from src.core.interfaces.storage import IReminderStore, IWorkItemStore, WriteOutcome


class TestIWorkItemStoreInterface:
    """Tests for IWorkItemStore abstract interface."""

    def test_is_abstract_class(self):
        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            IWorkItemStore()

    def test_operations_defined(self):
        assert set(IWorkItemStore.__abstractmethods__) == {
            "create",
            "get",
            "update",
            "add_reminder",
            "is_title_unique",
        }


class TestIReminderStoreInterface:
    """Tests for IReminderStore abstract interface."""

    def test_is_abstract_class(self):
        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            IReminderStore()

    def test_operations_defined(self):
        assert set(IReminderStore.__abstractmethods__) == {
            "create",
            "get",
            "update",
            "find_due_before",
            "find_by_work_item",
            "list_scheduled",
        }


class TestWriteOutcome:
    def test_values(self):
        assert {o.value for o in WriteOutcome} == {"applied", "conflict", "not_found"}
