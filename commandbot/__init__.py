"""
Commandbot - a command-dispatch layer for chat bots.

This package provides:
- A command router with per-command arity checks and display formatting
- Feature modules for weather, jokes, quotes, facts, currency and time
- A calculator that never evaluates arbitrary code
- Reminders with delayed delivery and per-user notes
"""

__version__ = "1.0.0"
__author__ = "Advanced Bot Team"
