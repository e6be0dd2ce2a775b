"""
Jokes from the Official Joke API.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..config import ProviderConfig
from ..core.result import CommandResult
from .base import PROVIDER_ERRORS, HttpFeatureModule

logger = logging.getLogger(__name__)


@dataclass
class Joke:
    setup: str
    punchline: str
    type: str


class JokeModule(HttpFeatureModule):

    RANDOM_ERROR = "Could not fetch a joke at this moment."

    def __init__(self, http_client: httpx.AsyncClient, config: Optional[ProviderConfig] = None):
        super().__init__(http_client)
        self.base_url = (config or ProviderConfig()).joke_base_url

    @property
    def name(self) -> str:
        return "jokes"

    async def get_random_joke(self) -> CommandResult:
        try:
            data = await self._get_json(f"{self.base_url}/random_joke")
            joke = Joke(setup=data["setup"], punchline=data["punchline"], type=data["type"])
        except PROVIDER_ERRORS as e:
            return self._transport_failure(self.RANDOM_ERROR, e)
        return CommandResult.ok(joke)

    async def get_joke_by_type(self, joke_type: str = "general") -> CommandResult:
        try:
            data = await self._get_json(f"{self.base_url}/jokes/{joke_type}/random")
            # This endpoint answers with a one-element list
            if isinstance(data, list):
                data = data[0]
            joke = Joke(setup=data["setup"], punchline=data["punchline"], type=data["type"])
        except PROVIDER_ERRORS as e:
            return self._transport_failure(f"Could not fetch a {joke_type} joke.", e)
        return CommandResult.ok(joke)

    def format_joke(self, result: CommandResult) -> str:
        if result.failed:
            return result.error
        return f"😂 {result.payload.setup}\n\n{result.payload.punchline}"
