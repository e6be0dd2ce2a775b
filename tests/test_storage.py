"""
Tests for in-memory bot storage.
"""

from datetime import timedelta

import pytest

from commandbot.core.storage import BotStorage
from factories import NoteFactory, ReminderFactory


@pytest.mark.unit
class TestReminderStorage:

    def test_get_reminders_filters_by_user_in_insertion_order(self, storage: BotStorage):
        first = storage.add_reminder(ReminderFactory(user_id="alice"))
        storage.add_reminder(ReminderFactory(user_id="bob"))
        second = storage.add_reminder(ReminderFactory(user_id="alice"))

        assert storage.get_reminders("alice") == [first, second]

    def test_get_reminder_by_id(self, storage: BotStorage):
        reminder = storage.add_reminder(ReminderFactory())
        assert storage.get_reminder(reminder.id) is reminder
        assert storage.get_reminder("missing") is None

    def test_delete_reminder_is_idempotent(self, storage: BotStorage):
        reminder = storage.add_reminder(ReminderFactory())
        assert storage.delete_reminder(reminder.id) is True
        assert storage.delete_reminder(reminder.id) is True
        assert storage.get_reminder(reminder.id) is None

    def test_ids_are_unique(self, storage: BotStorage):
        ids = {storage.add_reminder(ReminderFactory()).id for _ in range(50)}
        assert len(ids) == 50


@pytest.mark.unit
class TestNoteStorage:

    def test_update_note_changes_content_and_timestamp_only(self, storage: BotStorage, fixed_now):
        note = storage.add_note(NoteFactory(title="groceries", content="milk"))
        later = fixed_now + timedelta(hours=1)

        updated = storage.update_note(note.id, "milk, eggs", updated_at=later)

        assert updated is note
        assert note.title == "groceries"
        assert note.content == "milk, eggs"
        assert note.created_at == fixed_now
        assert note.updated_at == later

    def test_update_unknown_note_returns_none(self, storage: BotStorage):
        assert storage.update_note("missing", "content") is None

    def test_delete_note_is_idempotent(self, storage: BotStorage):
        note = storage.add_note(NoteFactory())
        assert storage.delete_note(note.id) is True
        assert storage.delete_note(note.id) is True
        assert storage.get_notes(note.user_id) == []


@pytest.mark.unit
class TestPreferences:

    def test_last_write_wins(self, storage: BotStorage):
        storage.set_preference("alice", "timezone", "Europe/Paris")
        storage.set_preference("alice", "timezone", "Asia/Tokyo")
        assert storage.get_preference("alice", "timezone") == "Asia/Tokyo"

    def test_default_for_missing(self, storage: BotStorage):
        assert storage.get_preference("nobody", "timezone") is None
        assert storage.get_preference("nobody", "timezone", "UTC") == "UTC"

    def test_preferences_are_per_user(self, storage: BotStorage):
        storage.set_preference("alice", "units", "metric")
        assert storage.get_preference("bob", "units") is None
