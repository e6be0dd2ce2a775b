"""
Main entry point for the command bot.

The bot can run in two modes:
1. Console mode (default): read commands from stdin and print the replies
2. Server mode (--serve): expose the command router over the HTTP API
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import uvicorn

from commandbot.config import AppConfig, create_settings
from commandbot.core.context import BotContext
from commandbot.core.models import Reminder
from commandbot.core.router import CommandRouter
from commandbot.exceptions import ConfigurationError
from commandbot.utils.logging_config import setup_logging
from commandbot.utils.time_utils import format_timestamp

logger = logging.getLogger(__name__)

EXIT_WORDS = {"quit", "exit", "/quit", "/exit"}


class CommandBotApp:
    """Runs one bot context in console or server mode."""

    def __init__(self, config: AppConfig, user_id: str = "console", serve: bool = False):
        self.config = config
        self.user_id = user_id
        self.serve = serve

    def notify(self, reminder: Reminder) -> None:
        print(f"\n⏰ Reminder for {reminder.user_id}: {reminder.text} (due {format_timestamp(reminder.due_at)})")

    async def run(self) -> None:
        async with BotContext(self.config, notify=self.notify) as context:
            router = CommandRouter(context)
            if self.serve:
                await self.run_server(router)
            else:
                await self.run_console(router)
        logger.debug("Application shutdown complete")

    async def run_console(self, router: CommandRouter) -> None:
        """Read command lines until EOF or an exit word."""
        print(f"{self.config.bot_name} v{self.config.bot_version}. Type /help for commands, 'quit' to leave.")
        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break

            line = line.strip()
            if not line:
                continue
            if line.lower() in EXIT_WORDS:
                break
            print(await router.handle_text(self.user_id, line))

    async def run_server(self, router: CommandRouter) -> None:
        """Serve the HTTP API on the current event loop."""
        from commandbot.api_server import create_api_server

        app = create_api_server(router, self.config)
        server_config = uvicorn.Config(
            app,
            host=self.config.api_host,
            port=self.config.api_port,
            log_level=self.config.log_level.lower(),
        )
        logger.info(f"API server starting on http://{self.config.api_host}:{self.config.api_port}")
        await uvicorn.Server(server_config).serve()


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Command bot - weather, jokes, calculator, notes and more",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m commandbot                      # Interactive console
  python -m commandbot --serve              # Run the HTTP API
  python -m commandbot --serve --port 8080  # Run the HTTP API on port 8080
        """
    )

    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the HTTP API instead of the console"
    )

    parser.add_argument(
        "--host",
        help="Host for the HTTP API (default: from configuration)"
    )

    parser.add_argument(
        "--port",
        type=int,
        help="Port for the HTTP API (default: from configuration)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override log level from configuration"
    )

    parser.add_argument(
        "--user-id",
        default="console",
        help="User id for commands typed in the console (default: console)"
    )

    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> AppConfig:
    overrides = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.host:
        overrides["api_host"] = args.host
    if args.port:
        overrides["api_port"] = args.port
    return create_settings(**overrides)


async def main(argv: Optional[List[str]] = None) -> None:
    """Main application entry point."""
    args = parse_arguments(argv)
    config = build_settings(args)
    setup_logging(config.log_level, config.log_format, config.log_file, service=config.bot_name)

    app = CommandBotApp(config, user_id=args.user_id, serve=args.serve)
    try:
        await app.run()
    except KeyboardInterrupt:
        logger.debug("Keyboard interrupt received, shutting down...")


def cli() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except ConfigurationError as e:
        sys.exit(str(e))


if __name__ == "__main__":
    cli()
