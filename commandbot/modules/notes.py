"""
Per-user notes with substring search.
"""
import logging
from datetime import datetime
from typing import Callable

from ..core.models import Note
from ..core.result import CommandResult
from ..core.storage import BotStorage
from ..utils.time_utils import utc_now
from .base import FeatureModule

logger = logging.getLogger(__name__)


class NotesModule(FeatureModule):

    NOT_FOUND = "Note not found"

    def __init__(self, storage: BotStorage, clock: Callable[[], datetime] = utc_now):
        self.storage = storage
        self.clock = clock

    @property
    def name(self) -> str:
        return "notes"

    def create_note(self, user_id: str, title: str, content: str) -> CommandResult:
        now = self.clock()
        note = self.storage.add_note(Note(
            user_id=user_id,
            title=title,
            content=content,
            created_at=now,
            updated_at=now,
        ))
        logger.info(f"Created note {note.id} for user {user_id}")
        return CommandResult.ok(note)

    def list_notes(self, user_id: str) -> CommandResult:
        return CommandResult.ok(self.storage.get_notes(user_id))

    def get_note(self, note_id: str, user_id: str) -> CommandResult:
        note = self.storage.get_note(note_id)
        if note is None or note.user_id != user_id:
            return CommandResult.fail(self.NOT_FOUND)
        return CommandResult.ok(note)

    def update_note(self, note_id: str, content: str) -> CommandResult:
        """Replace a note's content. The title is never changed."""
        note = self.storage.update_note(note_id, content, updated_at=self.clock())
        if note is None:
            return CommandResult.fail(self.NOT_FOUND)
        return CommandResult.ok(note)

    def delete_note(self, note_id: str) -> CommandResult:
        """Delete a note. Unknown ids succeed as a no-op."""
        self.storage.delete_note(note_id)
        return CommandResult.ok(True)

    def search_notes(self, user_id: str, query: str) -> CommandResult:
        """The user's notes whose title or content contains ``query``, ignoring case."""
        matches = [note for note in self.storage.get_notes(user_id) if note.matches(query)]
        return CommandResult.ok(matches)

    def format_notes(self, result: CommandResult) -> str:
        if result.failed:
            return result.error
        notes = result.payload
        if not notes:
            return "📓 No notes found."

        lines = ["📓 Your Notes:", "━━━━━━━━━━━━━━"]
        for index, note in enumerate(notes, start=1):
            lines.append(f"{index}. **{note.title}**")
            lines.append(f"   {note.preview()}")
        return "\n".join(lines)

    def format_note_created(self, result: CommandResult) -> str:
        if result.failed:
            return result.error
        return f"📓 Note saved: **{result.payload.title}**"
