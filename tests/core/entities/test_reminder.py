"""Tests for Reminder entity."""

from datetime import UTC, datetime, timedelta

import pytest

from src.core.entities.events import ReminderCancelled, ReminderFailed, ReminderTriggered
from src.core.entities.reminder import (
    MAX_ERROR_LENGTH,
    MAX_MESSAGE_LENGTH,
    Reminder,
    ReminderStatus,
    validate_trigger_time,
)
from src.core.exceptions import InvalidStateError, ValidationError

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


def _scheduled(trigger_in: timedelta = timedelta(hours=1)) -> Reminder:
    return Reminder.schedule(
        tenant_id="tenant-a",
        work_item_id="wi-1",
        trigger_at=NOW + trigger_in,
        message="Call the supplier",
        actor="alice",
        now=NOW,
    )


class TestReminderSchedule:
    """Tests for creating reminders."""

    def test_schedule_sets_defaults(self):
        """New reminders start Scheduled with audit fields stamped."""
        reminder = _scheduled()
        assert reminder.status == ReminderStatus.SCHEDULED
        assert reminder.created_by == "alice"
        assert reminder.created_at == NOW
        assert reminder.triggered_at is None
        assert reminder.row_version == 0
        assert reminder.id

    def test_schedule_trims_message(self):
        """Surrounding whitespace is not part of the message."""
        reminder = Reminder.schedule(
            tenant_id="tenant-a",
            work_item_id="wi-1",
            trigger_at=NOW + timedelta(hours=1),
            message="  Call the supplier  ",
            actor="alice",
            now=NOW,
        )
        assert reminder.message == "Call the supplier"

    def test_schedule_rejects_empty_message(self):
        """A blank message is a validation error."""
        with pytest.raises(ValidationError) as exc_info:
            Reminder.schedule(
                tenant_id="tenant-a",
                work_item_id="wi-1",
                trigger_at=NOW + timedelta(hours=1),
                message="   ",
                actor="alice",
                now=NOW,
            )
        assert exc_info.value.details["field"] == "message"

    def test_schedule_rejects_oversized_message(self):
        """Messages are capped at 500 characters."""
        with pytest.raises(ValidationError):
            Reminder.schedule(
                tenant_id="tenant-a",
                work_item_id="wi-1",
                trigger_at=NOW + timedelta(hours=1),
                message="x" * (MAX_MESSAGE_LENGTH + 1),
                actor="alice",
                now=NOW,
            )

    def test_schedule_rejects_blank_actor(self):
        """Every reminder is attributed to someone."""
        with pytest.raises(ValidationError):
            Reminder.schedule(
                tenant_id="tenant-a",
                work_item_id="wi-1",
                trigger_at=NOW + timedelta(hours=1),
                message="Call the supplier",
                actor=" ",
                now=NOW,
            )

    def test_naive_trigger_time_is_utc(self):
        """Naive datetimes are read as UTC."""
        reminder = Reminder.schedule(
            tenant_id="tenant-a",
            work_item_id="wi-1",
            trigger_at=datetime(2026, 3, 1, 12, 0),
            message="Call the supplier",
            actor="alice",
            now=NOW,
        )
        assert reminder.trigger_at == datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class TestLeadTime:
    """The trigger time must be strictly later than now plus the lead time."""

    @pytest.mark.parametrize(
        "offset, allowed",
        [
            (timedelta(minutes=-1), False),
            (timedelta(minutes=4), False),
            (timedelta(minutes=5), False),
            (timedelta(minutes=5, seconds=1), True),
            (timedelta(minutes=6), True),
        ],
    )
    def test_validate_trigger_time(self, offset: timedelta, allowed: bool):
        """Boundary is exclusive at exactly five minutes."""
        if allowed:
            assert validate_trigger_time(NOW + offset, NOW) == NOW + offset
        else:
            with pytest.raises(ValidationError):
                validate_trigger_time(NOW + offset, NOW)

    def test_custom_lead_time(self):
        """Lead time is configurable."""
        with pytest.raises(ValidationError):
            validate_trigger_time(NOW + timedelta(minutes=20), NOW, timedelta(minutes=30))

    def test_reschedule_four_minutes_fails(self):
        """Rescheduling inside the lead time is rejected and changes nothing."""
        reminder = _scheduled()
        original = reminder.trigger_at
        with pytest.raises(ValidationError):
            reminder.reschedule(NOW + timedelta(minutes=4), "alice", now=NOW)
        assert reminder.trigger_at == original
        assert reminder.row_version == 0

    def test_reschedule_six_minutes_succeeds(self):
        """Rescheduling beyond the lead time moves the trigger time."""
        reminder = _scheduled()
        reminder.reschedule(NOW + timedelta(minutes=6), "bob", now=NOW)
        assert reminder.trigger_at == NOW + timedelta(minutes=6)
        assert reminder.updated_by == "bob"
        assert reminder.updated_at == NOW
        assert reminder.row_version == 1


class TestReminderQueries:
    """Tests for is_pending, is_due and is_overdue."""

    def test_is_due_at_trigger_time(self):
        """Due exactly at the trigger time."""
        reminder = _scheduled()
        assert reminder.is_due(reminder.trigger_at) is True
        assert reminder.is_due(reminder.trigger_at - timedelta(seconds=1)) is False

    def test_not_due_once_triggered(self):
        """Only Scheduled reminders can be due."""
        reminder = _scheduled()
        reminder.mark_as_triggered("system", now=NOW)
        assert reminder.is_pending() is False
        assert reminder.is_due(NOW + timedelta(days=1)) is False

    def test_is_overdue_after_grace(self):
        """Overdue only once the grace period has passed."""
        reminder = _scheduled()
        assert reminder.is_overdue(reminder.trigger_at + timedelta(minutes=5)) is False
        assert reminder.is_overdue(reminder.trigger_at + timedelta(minutes=6)) is True


class TestReminderTransitions:
    """Tests for the Scheduled-only transitions."""

    def test_mark_as_triggered(self):
        """Triggering sets triggered_at and raises ReminderTriggered."""
        reminder = _scheduled()
        reminder.mark_as_triggered("system", now=NOW)

        assert reminder.status == ReminderStatus.TRIGGERED
        assert reminder.triggered_at == NOW
        events = reminder.drain_events()
        assert len(events) == 1
        assert isinstance(events[0], ReminderTriggered)
        assert events[0].reminder_id == reminder.id

    def test_double_trigger_fails(self):
        """A reminder fires at most once."""
        reminder = _scheduled()
        reminder.mark_as_triggered("system", now=NOW)
        with pytest.raises(InvalidStateError) as exc_info:
            reminder.mark_as_triggered("system", now=NOW)
        assert exc_info.value.details["state"] == "triggered"

    def test_mark_as_failed_records_error(self):
        """Failure keeps the error text."""
        reminder = _scheduled()
        reminder.mark_as_failed("SMTP timeout", "system", now=NOW)

        assert reminder.status == ReminderStatus.FAILED
        assert reminder.error_message == "SMTP timeout"
        assert isinstance(reminder.drain_events()[0], ReminderFailed)

    def test_mark_as_failed_requires_message(self):
        """An empty error message is rejected."""
        reminder = _scheduled()
        with pytest.raises(ValidationError):
            reminder.mark_as_failed("", "system", now=NOW)
        assert reminder.status == ReminderStatus.SCHEDULED

    def test_mark_as_failed_caps_message(self):
        """Error messages are limited to 1000 characters."""
        reminder = _scheduled()
        with pytest.raises(ValidationError):
            reminder.mark_as_failed("e" * (MAX_ERROR_LENGTH + 1), "system", now=NOW)

    def test_cancel(self):
        """Cancelling raises ReminderCancelled with the actor."""
        reminder = _scheduled()
        reminder.cancel("carol", now=NOW)

        assert reminder.status == ReminderStatus.CANCELLED
        event = reminder.drain_events()[0]
        assert isinstance(event, ReminderCancelled)
        assert event.cancelled_by == "carol"

    @pytest.mark.parametrize(
        "terminal", [ReminderStatus.TRIGGERED, ReminderStatus.CANCELLED, ReminderStatus.FAILED]
    )
    def test_terminal_states_are_immutable(self, terminal: ReminderStatus):
        """Nothing leaves a terminal state, and trigger time and message stay put."""
        reminder = _scheduled()
        reminder.status = terminal
        trigger_at, message = reminder.trigger_at, reminder.message

        with pytest.raises(InvalidStateError):
            reminder.reschedule(NOW + timedelta(hours=2), "alice", now=NOW)
        with pytest.raises(InvalidStateError):
            reminder.update(NOW + timedelta(hours=2), "New text", "alice", now=NOW)
        with pytest.raises(InvalidStateError):
            reminder.mark_as_triggered("system", now=NOW)
        with pytest.raises(InvalidStateError):
            reminder.mark_as_failed("boom", "system", now=NOW)
        with pytest.raises(InvalidStateError):
            reminder.cancel("alice", now=NOW)
        with pytest.raises(InvalidStateError):
            reminder.claim("system", now=NOW)

        assert reminder.trigger_at == trigger_at
        assert reminder.message == message

    def test_update_replaces_time_and_message(self):
        """Update changes both fields in one step."""
        reminder = _scheduled()
        reminder.update(NOW + timedelta(hours=3), "Call again", "bob", now=NOW)
        assert reminder.trigger_at == NOW + timedelta(hours=3)
        assert reminder.message == "Call again"

    def test_update_with_bad_message_changes_nothing(self):
        """Validation happens before any field is written."""
        reminder = _scheduled()
        original = reminder.trigger_at
        with pytest.raises(ValidationError):
            reminder.update(NOW + timedelta(hours=3), "", "bob", now=NOW)
        assert reminder.trigger_at == original

    def test_transition_with_blank_actor_changes_nothing(self):
        """Blank actors are rejected before the status changes."""
        reminder = _scheduled()
        with pytest.raises(ValidationError):
            reminder.mark_as_triggered("", now=NOW)
        assert reminder.status == ReminderStatus.SCHEDULED


class TestDeliveryClaim:
    """Claims mark a reminder as being delivered without leaving Scheduled."""

    def test_claim_keeps_status(self):
        reminder = _scheduled()
        reminder.claim("system", now=NOW)

        assert reminder.status == ReminderStatus.SCHEDULED
        assert reminder.claimed_by == "system"
        assert reminder.claimed_at == NOW
        assert reminder.row_version == 1
        assert reminder.drain_events() == []

    def test_is_claimed_until_timeout(self):
        reminder = _scheduled()
        assert reminder.is_claimed(NOW) is False

        reminder.claim("system", now=NOW)

        assert reminder.is_claimed(NOW + timedelta(minutes=4)) is True
        assert reminder.is_claimed(NOW + timedelta(minutes=5)) is False
        assert reminder.is_claimed(NOW + timedelta(seconds=30), timedelta(seconds=10)) is False

    def test_claim_ends_with_the_transition(self):
        """A fired reminder is no longer considered claimed."""
        reminder = _scheduled()
        reminder.claim("system", now=NOW)
        reminder.mark_as_triggered("system", now=NOW)

        assert reminder.is_claimed(NOW) is False

    def test_reschedule_releases_claim(self):
        reminder = _scheduled()
        reminder.claim("system", now=NOW)
        reminder.reschedule(NOW + timedelta(hours=2), "alice", now=NOW)

        assert reminder.claimed_by is None
        assert reminder.claimed_at is None
        assert reminder.is_claimed(NOW) is False
