"""
Quotes from the Quotable API.
"""
import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

import httpx

from ..config import ProviderConfig
from ..core.result import CommandResult
from .base import PROVIDER_ERRORS, HttpFeatureModule

logger = logging.getLogger(__name__)


@dataclass
class Quote:
    quote: str
    author: str
    tags: List[str] = field(default_factory=list)


class QuotesModule(HttpFeatureModule):

    RANDOM_ERROR = "Could not fetch a quote at this moment."
    AUTHOR_ERROR = "Could not fetch the quote."

    def __init__(self, http_client: httpx.AsyncClient, config: Optional[ProviderConfig] = None):
        super().__init__(http_client)
        self.base_url = (config or ProviderConfig()).quote_base_url

    @property
    def name(self) -> str:
        return "quotes"

    async def get_random_quote(self) -> CommandResult:
        try:
            data = await self._get_json(f"{self.base_url}/random")
            quote = Quote(quote=data["content"], author=data["author"], tags=list(data.get("tags", [])))
        except PROVIDER_ERRORS as e:
            return self._transport_failure(self.RANDOM_ERROR, e)
        return CommandResult.ok(quote)

    async def get_quote_by_author(self, author: str) -> CommandResult:
        try:
            data = await self._get_json(f"{self.base_url}/quotes", params={"author": author})
            results = data["results"]
        except PROVIDER_ERRORS as e:
            return self._transport_failure(self.AUTHOR_ERROR, e)

        if not results:
            return CommandResult.fail(f"No quotes found for author: {author}")

        picked = random.choice(results)
        try:
            quote = Quote(quote=picked["content"], author=picked["author"], tags=list(picked.get("tags", [])))
        except PROVIDER_ERRORS as e:
            return self._transport_failure(self.AUTHOR_ERROR, e)
        return CommandResult.ok(quote)

    def format_quote(self, result: CommandResult) -> str:
        if result.failed:
            return result.error
        return f"✨ \"{result.payload.quote}\"\n— {result.payload.author}"
