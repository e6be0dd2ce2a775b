"""
Custom Exception Classes

This module defines custom exceptions for the command bot
to provide better error handling and debugging information.
"""

from typing import Optional


class CommandBotError(Exception):
    """Base exception for the command bot."""

    pass


class CommandValidationError(CommandBotError):
    """Raised when a command or its arguments fail validation."""

    def __init__(self, message: str, command: Optional[str] = None):
        self.command = command
        super().__init__(message)


class ProviderError(CommandBotError):
    """Raised when an external data provider request fails."""

    def __init__(
        self,
        provider: str,
        original_error: Exception,
        message: Optional[str] = None,
    ):
        self.provider = provider
        self.original_error = original_error
        details = f"Request to provider '{provider}' failed: {original_error}"
        if message:
            super().__init__(f"{message} - Details: {details}")
        else:
            super().__init__(details)


class DuplicateTaskError(CommandBotError):
    """Raised when a second live task is scheduled under the same key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"A pending task is already registered for '{key}'")


class ConfigurationError(CommandBotError):
    """Raised for configuration problems."""

    pass
