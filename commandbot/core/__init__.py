"""
Core building blocks: results, records, storage, scheduling and routing.

The router and bot context import every feature module, so import them from
their own modules (``commandbot.core.router``, ``commandbot.core.context``).
"""

from .models import Note, Reminder
from .result import CommandResult, ErrorCategory
from .scheduler import ScheduledTask, TaskScheduler
from .storage import BotStorage

__all__ = [
    "BotStorage",
    "CommandResult",
    "ErrorCategory",
    "Note",
    "Reminder",
    "ScheduledTask",
    "TaskScheduler",
]
