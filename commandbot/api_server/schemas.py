"""
Pydantic models for API requests and responses.
"""

from typing import List, Optional

from pydantic import BaseModel, model_validator


class CommandRequest(BaseModel):
    """Either a raw chat line in ``text`` or a pre-split ``command`` and ``args``."""
    user_id: str
    text: Optional[str] = None
    command: Optional[str] = None
    args: List[str] = []

    @model_validator(mode="after")
    def check_command_source(self) -> "CommandRequest":
        if not self.text and not self.command:
            raise ValueError("Either 'text' or 'command' must be provided")
        return self


class CommandResponse(BaseModel):
    status: str  # success, failure
    command: str
    display: str
    error: Optional[str] = None
    category: Optional[str] = None


class CommandInfo(BaseModel):
    name: str
    usage: str
    description: str
    category: str
    min_args: int
    max_args: Optional[int] = None


class CommandListResponse(BaseModel):
    commands: List[CommandInfo]
    total_count: int
