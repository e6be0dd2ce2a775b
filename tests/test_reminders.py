"""
Tests for the reminder lifecycle: create, fire, cancel.
"""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from commandbot.core.result import ErrorCategory
from commandbot.core.scheduler import TaskScheduler
from commandbot.modules.reminders import RemindersModule
from factories import ReminderFactory


@pytest.fixture
def reminders(storage, notify, clock) -> RemindersModule:
    return RemindersModule(storage, notify=notify, clock=clock)


@pytest.mark.unit
class TestCreateReminder:

    @pytest.mark.asyncio
    async def test_stores_and_schedules(self, reminders, storage, fixed_now):
        result = reminders.create_reminder("alice", "stretch", 600)

        assert result.success
        reminder = result.payload
        assert reminder.user_id == "alice"
        assert reminder.text == "stretch"
        assert reminder.created_at == fixed_now
        assert reminder.due_at == fixed_now + timedelta(seconds=600)
        assert storage.get_reminders("alice") == [reminder]
        assert reminders.pending_handle(reminder.id).pending

        reminders.shutdown()

    @pytest.mark.asyncio
    async def test_accepts_timedelta(self, reminders, fixed_now):
        result = reminders.create_reminder("alice", "tea", timedelta(minutes=3))
        assert result.payload.due_at == fixed_now + timedelta(minutes=3)
        reminders.shutdown()

    @pytest.mark.asyncio
    async def test_negative_delay_rejected(self, reminders, storage):
        result = reminders.create_reminder("alice", "too late", -1)

        assert result.failed
        assert result.category == ErrorCategory.VALIDATION
        assert storage.get_reminders("alice") == []
        assert len(reminders.scheduler) == 0

    @pytest.mark.asyncio
    async def test_zero_delay_fires_once_then_disappears(self, reminders, notify):
        reminder = reminders.create_reminder("alice", "now", 0).payload

        await reminders.pending_handle(reminder.id).wait()

        notify.assert_called_once_with(reminder)
        fired = notify.call_args.args[0]
        assert fired.text == "now"
        assert fired.user_id == "alice"
        assert reminders.list_reminders("alice").payload == []
        assert reminders.pending_handle(reminder.id) is None

    @pytest.mark.asyncio
    async def test_per_call_notify_overrides_default(self, reminders, notify):
        override = AsyncMock()
        reminder = reminders.create_reminder("alice", "now", 0, notify=override).payload

        await reminders.pending_handle(reminder.id).wait()

        override.assert_awaited_once_with(reminder)
        notify.assert_not_called()

    @pytest.mark.asyncio
    async def test_failing_notify_still_removes_record(self, reminders, storage, notify):
        notify.side_effect = RuntimeError("transport down")
        reminder = reminders.create_reminder("alice", "now", 0).payload

        await reminders.pending_handle(reminder.id).wait()

        notify.assert_called_once()
        assert storage.get_reminder(reminder.id) is None

    @pytest.mark.asyncio
    async def test_scheduling_failure_rolls_back_record(self, storage, notify, clock):
        scheduler = MagicMock(spec=TaskScheduler)
        scheduler.schedule.side_effect = RuntimeError("no loop")
        module = RemindersModule(storage, notify=notify, scheduler=scheduler, clock=clock)

        with pytest.raises(RuntimeError):
            module.create_reminder("alice", "x", 10)

        assert storage.get_reminders("alice") == []


@pytest.mark.unit
class TestScheduledReminder:

    @pytest.mark.asyncio
    async def test_past_due_date_rejected(self, reminders, storage, fixed_now):
        result = reminders.create_scheduled_reminder("alice", "yesterday", fixed_now - timedelta(days=1))

        assert result.failed
        assert "must be in the future" in result.error
        assert storage.get_reminders("alice") == []
        assert len(reminders.scheduler) == 0

    @pytest.mark.asyncio
    async def test_due_now_rejected(self, reminders, fixed_now):
        result = reminders.create_scheduled_reminder("alice", "now", fixed_now)
        assert result.error == RemindersModule.PAST_DUE_DATE

    @pytest.mark.asyncio
    async def test_future_date_scheduled(self, reminders, fixed_now):
        due = fixed_now + timedelta(hours=2)
        result = reminders.create_scheduled_reminder("alice", "meeting", due)

        assert result.success
        assert result.payload.due_at == due
        assert reminders.pending_handle(result.payload.id).delay == pytest.approx(7200)
        reminders.shutdown()

    @pytest.mark.asyncio
    async def test_due_date_kept_exactly_with_moving_clock(self, storage, notify, fixed_now):
        ticks = iter(fixed_now + timedelta(milliseconds=5 * i) for i in range(10))
        module = RemindersModule(storage, notify=notify, clock=lambda: next(ticks))
        due = fixed_now + timedelta(hours=2)

        reminder = module.create_scheduled_reminder("alice", "meeting", due).payload

        assert reminder.due_at == due
        assert module.pending_handle(reminder.id).delay == pytest.approx(7200)
        module.shutdown()

    @pytest.mark.asyncio
    async def test_naive_due_date_taken_as_utc(self, reminders, fixed_now):
        due = (fixed_now + timedelta(hours=1)).replace(tzinfo=None)
        result = reminders.create_scheduled_reminder("alice", "naive", due)

        assert result.success
        assert result.payload.due_at == fixed_now + timedelta(hours=1)
        reminders.shutdown()


@pytest.mark.unit
class TestDeleteReminder:

    @pytest.mark.asyncio
    async def test_cancel_prevents_notification(self, reminders, notify):
        reminder = reminders.create_reminder("alice", "later", 0.05).payload
        handle = reminders.pending_handle(reminder.id)

        result = reminders.delete_reminder(reminder.id)
        await handle.wait()

        assert result.success
        assert handle.cancelled
        notify.assert_not_called()
        assert reminders.list_reminders("alice").payload == []

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, reminders):
        reminder = reminders.create_reminder("alice", "later", 60).payload

        assert reminders.delete_reminder(reminder.id).success
        assert reminders.delete_reminder(reminder.id).success
        assert reminders.delete_reminder("never-existed").success

    @pytest.mark.asyncio
    async def test_delete_after_fire_succeeds(self, reminders, notify):
        reminder = reminders.create_reminder("alice", "now", 0).payload
        await reminders.pending_handle(reminder.id).wait()

        assert reminders.delete_reminder(reminder.id).success
        notify.assert_called_once()

    @pytest.mark.asyncio
    async def test_shutdown_cancels_pending(self, reminders, notify, storage):
        for text in ("a", "b"):
            reminders.create_reminder("alice", text, 0.05)

        assert reminders.shutdown() == 2
        await asyncio.sleep(0.1)

        notify.assert_not_called()
        assert len(storage.get_reminders("alice")) == 2


@pytest.mark.unit
class TestListAndFormat:

    def test_list_filters_by_user(self, reminders, storage):
        mine = storage.add_reminder(ReminderFactory(user_id="alice"))
        storage.add_reminder(ReminderFactory(user_id="bob"))

        assert reminders.list_reminders("alice").payload == [mine]

    def test_format_empty(self, reminders):
        assert reminders.format_reminders(reminders.list_reminders("alice")) == "📝 No reminders set."

    def test_format_lists_text_and_due_date(self, reminders, storage, fixed_now):
        storage.add_reminder(ReminderFactory(user_id="alice", text="water plants", due_at=fixed_now))

        text = reminders.format_reminders(reminders.list_reminders("alice"))

        assert text.startswith("📝 Your Reminders:")
        assert "1. water plants" in text
        assert "Due: 2026-01-15 10:30:00" in text
