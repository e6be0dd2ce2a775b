"""
Base classes for the feature modules the router dispatches to.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

import httpx

from ..core.result import CommandResult, ErrorCategory
from ..exceptions import ProviderError

logger = logging.getLogger(__name__)

# Anything that can go wrong between sending a request and mapping the body
# into a payload. All of these collapse to the module's failure message.
PROVIDER_ERRORS = (ProviderError, KeyError, IndexError, TypeError, ValueError, AttributeError)


def format_number(value: Union[int, float]) -> str:
    """Render integral floats without a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class FeatureModule(ABC):
    """
    Abstract base class for all feature modules.

    A module exposes query operations returning a ``CommandResult`` and
    ``format_*`` functions that render a result as display text.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique module name, used in logs and error reports."""
        pass


class HttpFeatureModule(FeatureModule):
    """
    Feature module backed by a single external HTTP data provider.

    The ``http_client`` is shared across modules and owned by the bot context;
    modules never close it.
    """

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client

    async def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        try:
            response = await self.http_client.get(url, params=params)
            response.raise_for_status()
            return response
        except httpx.HTTPError as e:
            raise ProviderError(self.name, e) from e

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._get(url, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(self.name, e, "Malformed response body") from e

    async def _get_text(self, url: str, params: Optional[Dict[str, Any]] = None) -> str:
        response = await self._get(url, params=params)
        return response.text

    def _transport_failure(self, message: str, error: Exception) -> CommandResult:
        """Log the underlying provider error and return the module's fixed message."""
        logger.warning(f"{self.name} provider request failed: {error}")
        return CommandResult.fail(message, ErrorCategory.TRANSPORT)
