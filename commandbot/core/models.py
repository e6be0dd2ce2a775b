#!/usr/bin/env python3
"""
Stored Data Structures

Defines the records kept in bot storage: reminders and notes.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime


def new_record_id() -> str:
    """Mint a fresh opaque id for a stored record."""
    return uuid.uuid4().hex


@dataclass
class Reminder:
    """
    A reminder waiting to be delivered to a user.

    Attributes:
        user_id: Owner of the reminder
        text: Reminder text delivered when it fires
        created_at: Creation instant (timezone-aware, UTC)
        due_at: Instant at which the reminder fires
        id: Opaque unique token, assigned on creation
    """

    user_id: str
    text: str
    created_at: datetime
    due_at: datetime
    id: str = field(default_factory=new_record_id)


@dataclass
class Note:
    """A titled note. Updates touch ``content`` and ``updated_at`` only."""

    user_id: str
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    id: str = field(default_factory=new_record_id)

    def preview(self, length: int = 50) -> str:
        if len(self.content) <= length:
            return self.content
        return self.content[:length] + "..."

    def matches(self, query: str) -> bool:
        needle = query.lower()
        return needle in self.title.lower() or needle in self.content.lower()

