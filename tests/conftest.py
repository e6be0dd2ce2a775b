"""
Global test configuration and fixtures.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Optional
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from commandbot.config import AppConfig, ProviderConfig, WeatherConfig
from commandbot.core.context import BotContext
from commandbot.core.router import CommandRouter
from commandbot.core.storage import BotStorage

FIXED_NOW = datetime(2026, 1, 15, 10, 30, 0, tzinfo=timezone.utc)


def make_response(
    json_data: Any = None,
    text: str = "",
    status_code: int = 200,
    json_error: Optional[Exception] = None,
) -> MagicMock:
    """Build a mocked httpx.Response."""
    response = MagicMock(spec=httpx.Response)
    response.status_code = status_code
    response.text = text
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            message=f"HTTP {status_code}", request=MagicMock(), response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def response_factory() -> Callable[..., MagicMock]:
    """Provide the mocked-response builder to tests."""
    return make_response


@pytest.fixture
def mock_http_client() -> AsyncMock:
    """Provide a mocked shared HTTP client. Set ``get.return_value`` per test."""
    client = AsyncMock(spec=httpx.AsyncClient)
    client.get.return_value = make_response({})
    return client


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """A clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def app_config() -> AppConfig:
    """Provide an AppConfig isolated from the local environment."""
    return AppConfig(
        _env_file=None,
        weather=WeatherConfig(api_key="test-weather-key"),
        providers=ProviderConfig(),
    )


@pytest.fixture
def storage() -> BotStorage:
    return BotStorage()


@pytest.fixture
def notify() -> MagicMock:
    return MagicMock()


@pytest.fixture
def bot_context(app_config, storage, mock_http_client, notify, clock) -> BotContext:
    """Provide a BotContext wired to mocks and a frozen clock."""
    return BotContext(
        config=app_config,
        storage=storage,
        http_client=mock_http_client,
        notify=notify,
        clock=clock,
    )


@pytest.fixture
def command_router(bot_context) -> CommandRouter:
    return CommandRouter(bot_context)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests - fast, isolated tests"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests - test component interactions"
    )
