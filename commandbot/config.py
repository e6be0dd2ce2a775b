"""
Centralized Configuration Management

This module loads and validates configuration for the command bot from
environment variables and .env files, with nested sections per provider.
"""

from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class WeatherConfig(BaseSettings):
    """Weather provider configuration."""

    model_config = SettingsConfigDict(env_prefix="WEATHER_")

    # Optional: without a key the provider rejects the call and the weather
    # commands report their usual failure message.
    api_key: Optional[str] = None
    base_url: str = "https://api.openweathermap.org/data/2.5"
    units: str = "metric"
    forecast_days: int = 5


class ProviderConfig(BaseSettings):
    """Endpoints and limits for the keyless data providers."""

    model_config = SettingsConfigDict(env_prefix="PROVIDER_")

    joke_base_url: str = "https://official-joke-api.appspot.com"
    quote_base_url: str = "https://api.quotable.io"
    fact_base_url: str = "https://uselessfacts.jsph.pl"
    number_fact_base_url: str = "http://numbersapi.com"
    currency_base_url: str = "https://api.exchangerate-api.com/v4"

    # Applies to every outbound request
    request_timeout: float = 10.0

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Request timeout must be positive")
        return v


class AppConfig(BaseSettings):
    """
    Application configuration with nested provider sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # "text" or "json"
    log_file: Optional[str] = None

    # Bot identity, shown by /version
    bot_name: str = "Advanced Bot Functions"
    bot_version: str = "1.0.0"
    bot_created: str = "2025-12-20"
    bot_author: str = "Advanced Bot Team"

    # Used by /time when neither an argument nor a user preference is given
    default_timezone: str = "UTC"

    # Management API
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    weather: WeatherConfig = Field(default_factory=WeatherConfig)
    providers: ProviderConfig = Field(default_factory=ProviderConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("text", "json"):
            raise ValueError("Log format must be 'text' or 'json'")
        return v.lower()


def create_settings(**overrides) -> AppConfig:
    """
    Create a settings instance from environment variables and .env files.

    Raises:
        ConfigurationError: If any setting fails validation
    """
    try:
        return AppConfig(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
