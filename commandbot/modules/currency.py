"""
Currency conversion using ExchangeRate-API latest rates.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..config import ProviderConfig
from ..core.result import CommandResult
from .base import PROVIDER_ERRORS, HttpFeatureModule, format_number

logger = logging.getLogger(__name__)


@dataclass
class Conversion:
    amount: float
    from_currency: str
    to_currency: str
    rate: float
    result: float


class CurrencyModule(HttpFeatureModule):

    CONVERT_ERROR = "Could not convert currency. Please check the currency codes."

    def __init__(self, http_client: httpx.AsyncClient, config: Optional[ProviderConfig] = None):
        super().__init__(http_client)
        self.base_url = (config or ProviderConfig()).currency_base_url

    @property
    def name(self) -> str:
        return "currency"

    async def convert_currency(self, amount: float, from_currency: str, to_currency: str) -> CommandResult:
        """
        Convert ``amount`` from one currency to another.

        Currency codes are upper-cased. The converted amount is rounded to two
        decimal places; an unknown target code is a failure naming the code.
        """
        from_currency = from_currency.upper()
        to_currency = to_currency.upper()

        try:
            data = await self._get_json(f"{self.base_url}/latest/{from_currency}")
            rate = data["rates"].get(to_currency)
            if rate is not None and (isinstance(rate, bool) or not isinstance(rate, (int, float))):
                raise TypeError(f"Non-numeric rate for {to_currency}: {rate!r}")
        except PROVIDER_ERRORS as e:
            return self._transport_failure(self.CONVERT_ERROR, e)

        if not rate:
            return CommandResult.fail(f"Currency {to_currency} not found.")

        conversion = Conversion(
            amount=amount,
            from_currency=from_currency,
            to_currency=to_currency,
            rate=rate,
            result=round(amount * rate, 2),
        )
        logger.info(f"Converted {amount} {from_currency} to {to_currency} at rate {rate}")
        return CommandResult.ok(conversion)

    def format_conversion(self, result: CommandResult) -> str:
        if result.failed:
            return result.error
        c: Conversion = result.payload
        return (
            "💱 Currency Conversion\n"
            "━━━━━━━━━━━━━━━━━━━━\n"
            f"{format_number(c.amount)} {c.from_currency} = {format_number(c.result)} {c.to_currency}\n"
            f"Rate: 1 {c.from_currency} = {c.rate} {c.to_currency}"
        )
