"""
Random trivia and number facts.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Union

import httpx

from ..config import ProviderConfig
from ..core.result import CommandResult
from .base import PROVIDER_ERRORS, HttpFeatureModule

logger = logging.getLogger(__name__)


@dataclass
class Fact:
    fact: str
    number: Optional[str] = None


class FactsModule(HttpFeatureModule):

    RANDOM_ERROR = "Could not fetch a fact at this moment."
    NUMBER_ERROR = "Could not fetch a fact about this number."

    def __init__(self, http_client: httpx.AsyncClient, config: Optional[ProviderConfig] = None):
        super().__init__(http_client)
        config = config or ProviderConfig()
        self.fact_base_url = config.fact_base_url
        self.number_base_url = config.number_fact_base_url

    @property
    def name(self) -> str:
        return "facts"

    async def get_random_fact(self) -> CommandResult:
        try:
            data = await self._get_json(f"{self.fact_base_url}/random.json", params={"language": "en"})
            fact = Fact(fact=data["text"])
        except PROVIDER_ERRORS as e:
            return self._transport_failure(self.RANDOM_ERROR, e)
        return CommandResult.ok(fact)

    async def get_number_fact(self, number: Union[int, str]) -> CommandResult:
        try:
            text = await self._get_text(f"{self.number_base_url}/{number}")
        except PROVIDER_ERRORS as e:
            return self._transport_failure(self.NUMBER_ERROR, e)
        if not text.strip():
            return self._transport_failure(self.NUMBER_ERROR, ValueError("empty response body"))
        return CommandResult.ok(Fact(fact=text.strip(), number=str(number)))

    def format_fact(self, result: CommandResult) -> str:
        if result.failed:
            return result.error
        return f"💡 {result.payload.fact}"
