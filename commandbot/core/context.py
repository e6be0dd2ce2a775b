"""
Bot Context

Owns everything one bot instance needs: configuration, storage, the shared
HTTP client, the error tracker and one instance of every feature module.
Several contexts can live side by side in the same process.
"""
import logging
from datetime import datetime
from typing import Callable, Optional

import httpx

from ..config import AppConfig
from ..modules.calculator import CalculatorModule
from ..modules.clock import ClockModule
from ..modules.currency import CurrencyModule
from ..modules.facts import FactsModule
from ..modules.help import HelpModule
from ..modules.jokes import JokeModule
from ..modules.notes import NotesModule
from ..modules.quotes import QuotesModule
from ..modules.reminders import NotifyCallback, RemindersModule
from ..modules.weather import WeatherModule
from ..utils.time_utils import utc_now
from .error_handling import ErrorTracker
from .storage import BotStorage

logger = logging.getLogger(__name__)


class BotContext:
    """
    Explicitly constructed container for one bot's state and modules.

    When no ``http_client`` is passed the context creates one using the
    configured request timeout and closes it in ``aclose``. A client passed in
    by the caller is left open.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        storage: Optional[BotStorage] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        notify: Optional[NotifyCallback] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.config = config or AppConfig()
        self.storage = storage or BotStorage()
        self._owns_http_client = http_client is None
        self.http_client = http_client if http_client is not None else httpx.AsyncClient(
            timeout=self.config.providers.request_timeout
        )
        self.error_tracker = ErrorTracker()

        providers = self.config.providers
        self.weather = WeatherModule(self.http_client, self.config.weather)
        self.jokes = JokeModule(self.http_client, providers)
        self.quotes = QuotesModule(self.http_client, providers)
        self.facts = FactsModule(self.http_client, providers)
        self.currency = CurrencyModule(self.http_client, providers)
        self.calculator = CalculatorModule()
        self.time = ClockModule(self.config.default_timezone, clock=clock)
        self.help = HelpModule(self.config)
        self.reminders = RemindersModule(self.storage, notify=notify, clock=clock)
        self.notes = NotesModule(self.storage, clock=clock)

        logger.info(f"Bot context initialised ({self.config.bot_name} v{self.config.bot_version})")

    async def aclose(self) -> None:
        """Cancel pending reminders and release the HTTP client if we own it."""
        self.reminders.shutdown()
        if self._owns_http_client:
            await self.http_client.aclose()
        logger.info("Bot context closed")

    async def __aenter__(self) -> "BotContext":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
