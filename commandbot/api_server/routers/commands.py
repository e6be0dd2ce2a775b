"""
Commands router - runs commands and describes the command table.
"""

import logging

from fastapi import APIRouter, Depends

from commandbot.core.result import CommandResult
from commandbot.core.router import CommandRouter, parse_command_line
from commandbot.exceptions import CommandValidationError

from ..dependencies import get_router
from ..schemas import CommandInfo, CommandListResponse, CommandRequest, CommandResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["commands"])


@router.get("/commands", response_model=CommandListResponse)
async def list_commands(command_router: CommandRouter = Depends(get_router)):
    """List the visible commands with their usage."""
    commands = [CommandInfo(**info) for info in command_router.describe_commands()]
    return CommandListResponse(commands=commands, total_count=len(commands))


@router.post("/commands", response_model=CommandResponse)
async def run_command(request: CommandRequest, command_router: CommandRouter = Depends(get_router)):
    """
    Run a command for a user.

    Command failures are reported in the body with status ``failure``; the
    HTTP status is 200 for every command that was accepted for dispatch.
    """
    if request.text:
        try:
            command, args = parse_command_line(request.text)
        except CommandValidationError as e:
            command, args = "", []
            result = CommandResult.fail(str(e))
        else:
            result = await command_router.dispatch(request.user_id, command, args)
    else:
        command, args = request.command, request.args
        result = await command_router.dispatch(request.user_id, command, args)

    logger.debug(f"API command '{command}' for user {request.user_id}: success={result.success}")
    return CommandResponse(
        status="success" if result.success else "failure",
        command=command,
        display=command_router.format(result, command),
        error=result.error,
        category=result.category.value if result.category else None,
    )


@router.get("/errors")
async def get_error_analytics(hours: int = 24, command_router: CommandRouter = Depends(get_router)):
    """Summary of failures recorded by the router."""
    return command_router.context.error_tracker.get_error_analytics(hours=hours)
