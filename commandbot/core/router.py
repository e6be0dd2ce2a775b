"""
Command router: maps a command name and argument list to a feature module
call, and maps the resulting CommandResult back to display text.
"""
import inspect
import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple, Union

from ..exceptions import CommandValidationError
from ..modules.help import HelpEntry, HelpRequest, VersionRequest
from ..utils.logging_config import get_logger
from .context import BotContext
from .result import CommandResult, ErrorCategory

logger = logging.getLogger(__name__)
events = get_logger(__name__)

UNKNOWN_COMMAND = "Unknown command. Type /help for available commands."
REMINDER_REDIRECT = "Use /remind-set to create reminders"
TIMEZONE_PREFERENCE = "timezone"

CommandHandler = Callable[[str, List[str]], Union[CommandResult, Awaitable[CommandResult]]]
ResultFormatter = Callable[[CommandResult], str]


@dataclass
class CommandSpec:
    """
    One entry in the command table.

    ``min_args``/``max_args`` bound the argument count; ``max_args`` of None
    means unbounded. Hidden commands are dispatched but left out of help.
    """

    name: str
    handler: CommandHandler
    usage: str
    description: str
    category: str
    formatter: Optional[ResultFormatter] = None
    min_args: int = 0
    max_args: Optional[int] = None
    hidden: bool = False

    def accepts(self, arg_count: int) -> bool:
        if arg_count < self.min_args:
            return False
        return self.max_args is None or arg_count <= self.max_args


def normalize_command(command: str) -> str:
    return command.strip().lstrip("/").lower()


def parse_command_line(text: str) -> Tuple[str, List[str]]:
    """
    Split a raw chat line into a command name and its arguments.

    ``"/weather New York"`` becomes ``("weather", ["New", "York"])``.

    Raises:
        CommandValidationError: if the line holds no command
    """
    parts = text.split()
    if not parts:
        raise CommandValidationError("Empty command")
    command = normalize_command(parts[0])
    if not command:
        raise CommandValidationError("Empty command")
    return command, parts[1:]


class CommandRouter:
    """
    Dispatches commands to the modules held by a ``BotContext``.

    ``dispatch`` never raises: unknown commands, bad arguments and unexpected
    exceptions all come back as failure results.
    """

    def __init__(self, context: BotContext):
        self.context = context
        self._commands: Dict[str, CommandSpec] = {}
        self._register_builtin_commands()

    # Command table

    def register_command(self, spec: CommandSpec) -> None:
        name = normalize_command(spec.name)
        if name in self._commands:
            logger.warning(f"Command '{name}' is already registered. Overwriting.")
        self._commands[name] = spec
        logger.debug(f"Command '{name}' registered")

    def get_command(self, name: str) -> Optional[CommandSpec]:
        return self._commands.get(normalize_command(name))

    def get_command_names(self, include_hidden: bool = False) -> List[str]:
        return [name for name, spec in self._commands.items() if include_hidden or not spec.hidden]

    def describe_commands(self) -> List[Dict[str, Any]]:
        """Visible commands with their usage metadata, in registration order."""
        return [
            {
                "name": spec.name,
                "usage": spec.usage,
                "description": spec.description,
                "category": spec.category,
                "min_args": spec.min_args,
                "max_args": spec.max_args,
            }
            for spec in self._commands.values()
            if not spec.hidden
        ]

    def help_entries(self) -> List[HelpEntry]:
        return [
            (spec.category, spec.usage, spec.description)
            for spec in self._commands.values()
            if not spec.hidden
        ]

    # Dispatch and formatting

    async def dispatch(self, user_id: str, command: str, args: Optional[Sequence[str]] = None) -> CommandResult:
        """Run a command for ``user_id`` and return its result."""
        args = list(args or [])
        name = normalize_command(command)
        spec = self._commands.get(name)

        if spec is None:
            result = CommandResult.fail(UNKNOWN_COMMAND)
        elif not spec.accepts(len(args)):
            result = CommandResult.fail(f"Usage: {spec.usage}")
        else:
            result = await self._invoke(spec, user_id, args)

        if result.failed and result.category != ErrorCategory.INTERNAL:
            self.context.error_tracker.register_failure(
                result, "router", name or "<empty>", {"user_id": user_id}
            )

        events.info(
            "command_dispatched",
            user_id=user_id,
            command=name,
            arg_count=len(args),
            success=result.success,
            category=result.category.value if result.category else None,
        )
        return result

    async def _invoke(self, spec: CommandSpec, user_id: str, args: List[str]) -> CommandResult:
        try:
            result = spec.handler(user_id, args)
            if inspect.isawaitable(result):
                result = await result
            return result
        except CommandValidationError as e:
            return CommandResult.fail(str(e))
        except Exception as e:
            self.context.error_tracker.register_exception(
                e, "router", spec.name, {"user_id": user_id, "args": args}
            )
            logger.error(
                f"Command '{spec.name}' raised for user {user_id}: {e}",
                exc_info=True,
                extra={"user_id": user_id, "command": spec.name},
            )
            return CommandResult.fail(f"Error processing command: {e}", ErrorCategory.INTERNAL)

    def format(self, result: CommandResult, command: str) -> str:
        """Render a result as display text for the command that produced it."""
        if isinstance(result.payload, HelpRequest):
            return self.context.help.get_help_menu(self.help_entries())
        if isinstance(result.payload, VersionRequest):
            return self.context.help.get_version_info()
        if result.failed:
            return f"❌ {result.error}"

        spec = self._commands.get(normalize_command(command))
        if spec is not None and spec.formatter is not None:
            return spec.formatter(result)
        return json.dumps(result.to_dict(), indent=2, default=str, ensure_ascii=False)

    async def handle(self, user_id: str, command: str, args: Optional[Sequence[str]] = None) -> str:
        result = await self.dispatch(user_id, command, args)
        return self.format(result, command)

    async def handle_text(self, user_id: str, text: str) -> str:
        """Parse a raw chat line, dispatch it and return the display text."""
        try:
            command, args = parse_command_line(text)
        except CommandValidationError as e:
            return self.format(CommandResult.fail(str(e)), "")
        return await self.handle(user_id, command, args)

    # Built-in commands

    def _register_builtin_commands(self) -> None:
        ctx = self.context
        builtins = [
            CommandSpec("weather", self._weather, "/weather <city>", "Get current weather",
                        "weather", ctx.weather.format_weather, min_args=1),
            CommandSpec("forecast", self._forecast, "/forecast <city>", f"{ctx.config.weather.forecast_days}-day forecast",
                        "weather", ctx.weather.format_forecast, min_args=1),
            CommandSpec("joke", self._joke, "/joke [type]", "Random joke",
                        "entertainment", ctx.jokes.format_joke, max_args=1),
            CommandSpec("quote", self._quote, "/quote [author]", "Inspirational quote",
                        "entertainment", ctx.quotes.format_quote),
            CommandSpec("fact", self._fact, "/fact", "Random fact",
                        "entertainment", ctx.facts.format_fact),
            CommandSpec("numberfact", self._number_fact, "/numberfact <number|random>", "Fact about a number",
                        "entertainment", ctx.facts.format_fact, min_args=1, max_args=1),
            CommandSpec("calc", self._calc, "/calc <expression>", "Evaluate math expression, e.g. /calc (10*5)/2",
                        "calculator", ctx.calculator.format_calculation, min_args=1),
            CommandSpec("remind", self._reminder_redirect, "/remind", "Reserved",
                        "organizer", hidden=True),
            CommandSpec("reminder", self._reminder_redirect, "/reminder", "Reserved",
                        "organizer", hidden=True),
            CommandSpec("reminders", self._reminders, "/reminders", "List all reminders",
                        "organizer", ctx.reminders.format_reminders),
            CommandSpec("note", self._note, "/note <title> <content>", "Create a note",
                        "organizer", ctx.notes.format_note_created, min_args=2),
            CommandSpec("notes", self._notes, "/notes", "List all notes",
                        "organizer", ctx.notes.format_notes),
            CommandSpec("search", self._search, "/search <query>", "Search notes",
                        "organizer", ctx.notes.format_notes, min_args=1),
            CommandSpec("convert", self._convert, "/convert <amount> <from> <to>", "Convert currency",
                        "utilities", ctx.currency.format_conversion, min_args=3, max_args=3),
            CommandSpec("time", self._time, "/time [timezone]", "Get current time",
                        "utilities", ctx.time.format_time, max_args=1),
            CommandSpec("timezone", self._set_timezone, "/timezone <timezone>", "Set your default timezone",
                        "utilities", ctx.time.format_time, min_args=1, max_args=1),
            CommandSpec("countdown", self._countdown, "/countdown <date>", "Count down to a date",
                        "utilities", ctx.time.format_countdown, min_args=1),
            CommandSpec("help", self._help, "/help", "Show this menu", "info"),
            CommandSpec("version", self._version, "/version", "Show version info", "info"),
        ]
        for spec in builtins:
            self.register_command(spec)

    async def _weather(self, user_id: str, args: List[str]) -> CommandResult:
        return await self.context.weather.get_weather(" ".join(args))

    async def _forecast(self, user_id: str, args: List[str]) -> CommandResult:
        return await self.context.weather.get_forecast(" ".join(args))

    async def _joke(self, user_id: str, args: List[str]) -> CommandResult:
        if args:
            return await self.context.jokes.get_joke_by_type(args[0].lower())
        return await self.context.jokes.get_random_joke()

    async def _quote(self, user_id: str, args: List[str]) -> CommandResult:
        if args:
            return await self.context.quotes.get_quote_by_author(" ".join(args))
        return await self.context.quotes.get_random_quote()

    async def _fact(self, user_id: str, args: List[str]) -> CommandResult:
        return await self.context.facts.get_random_fact()

    async def _number_fact(self, user_id: str, args: List[str]) -> CommandResult:
        value = args[0].lower()
        if value != "random":
            try:
                value = str(int(value))
            except ValueError:
                raise CommandValidationError("Number must be an integer or 'random'", command="numberfact")
        return await self.context.facts.get_number_fact(value)

    def _calc(self, user_id: str, args: List[str]) -> CommandResult:
        return self.context.calculator.evaluate("".join(args))

    def _reminder_redirect(self, user_id: str, args: List[str]) -> CommandResult:
        return CommandResult.fail(REMINDER_REDIRECT)

    def _reminders(self, user_id: str, args: List[str]) -> CommandResult:
        return self.context.reminders.list_reminders(user_id)

    def _note(self, user_id: str, args: List[str]) -> CommandResult:
        return self.context.notes.create_note(user_id, args[0], " ".join(args[1:]))

    def _notes(self, user_id: str, args: List[str]) -> CommandResult:
        return self.context.notes.list_notes(user_id)

    def _search(self, user_id: str, args: List[str]) -> CommandResult:
        return self.context.notes.search_notes(user_id, " ".join(args))

    async def _convert(self, user_id: str, args: List[str]) -> CommandResult:
        raw_amount, from_currency, to_currency = args
        try:
            amount = float(raw_amount)
        except ValueError:
            raise CommandValidationError(f"Invalid amount: {raw_amount}", command="convert")
        if not math.isfinite(amount):
            raise CommandValidationError(f"Invalid amount: {raw_amount}", command="convert")
        return await self.context.currency.convert_currency(amount, from_currency, to_currency)

    def _time(self, user_id: str, args: List[str]) -> CommandResult:
        if args:
            zone = args[0]
        else:
            zone = self.context.storage.get_preference(user_id, TIMEZONE_PREFERENCE)
        return self.context.time.get_formatted_time(zone)

    def _set_timezone(self, user_id: str, args: List[str]) -> CommandResult:
        result = self.context.time.get_formatted_time(args[0])
        if result.success:
            self.context.storage.set_preference(user_id, TIMEZONE_PREFERENCE, args[0])
            logger.info(f"User {user_id} set timezone to {args[0]}")
        return result

    def _countdown(self, user_id: str, args: List[str]) -> CommandResult:
        return self.context.time.get_countdown(" ".join(args))

    def _help(self, user_id: str, args: List[str]) -> CommandResult:
        return CommandResult.ok(HelpRequest())

    def _version(self, user_id: str, args: List[str]) -> CommandResult:
        return CommandResult.ok(VersionRequest())
