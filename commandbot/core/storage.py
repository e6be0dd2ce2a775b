"""
In-memory storage for reminders, notes and user preferences.

Nothing here is durable: every record is lost when the process exits.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..utils.time_utils import utc_now
from .models import Note, Reminder

logger = logging.getLogger(__name__)


class BotStorage:
    """Append/filter/update over three unordered in-memory collections."""

    def __init__(self):
        self.reminders: List[Reminder] = []
        self.notes: List[Note] = []
        self.user_preferences: Dict[str, Dict[str, Any]] = {}

    # Reminders

    def add_reminder(self, reminder: Reminder) -> Reminder:
        self.reminders.append(reminder)
        logger.debug(f"Stored reminder {reminder.id} for user {reminder.user_id}")
        return reminder

    def get_reminders(self, user_id: str) -> List[Reminder]:
        return [r for r in self.reminders if r.user_id == user_id]

    def get_reminder(self, reminder_id: str) -> Optional[Reminder]:
        return next((r for r in self.reminders if r.id == reminder_id), None)

    def delete_reminder(self, reminder_id: str) -> bool:
        """Remove a reminder. Returns True even when the id is unknown."""
        self.reminders = [r for r in self.reminders if r.id != reminder_id]
        return True

    # Notes

    def add_note(self, note: Note) -> Note:
        self.notes.append(note)
        logger.debug(f"Stored note {note.id} for user {note.user_id}")
        return note

    def get_notes(self, user_id: str) -> List[Note]:
        return [n for n in self.notes if n.user_id == user_id]

    def get_note(self, note_id: str) -> Optional[Note]:
        return next((n for n in self.notes if n.id == note_id), None)

    def update_note(
        self, note_id: str, content: str, updated_at: Optional[datetime] = None
    ) -> Optional[Note]:
        note = self.get_note(note_id)
        if note:
            note.content = content
            note.updated_at = updated_at or utc_now()
        return note

    def delete_note(self, note_id: str) -> bool:
        """Remove a note. Returns True even when the id is unknown."""
        self.notes = [n for n in self.notes if n.id != note_id]
        return True

    # Preferences

    def set_preference(self, user_id: str, key: str, value: Any) -> None:
        self.user_preferences.setdefault(user_id, {})[key] = value

    def get_preference(self, user_id: str, key: str, default: Any = None) -> Any:
        return self.user_preferences.get(user_id, {}).get(key, default)
