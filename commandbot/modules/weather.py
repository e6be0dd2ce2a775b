"""
Current weather and multi-day forecast from OpenWeatherMap.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

import httpx

from ..config import WeatherConfig
from ..core.result import CommandResult
from .base import PROVIDER_ERRORS, HttpFeatureModule

logger = logging.getLogger(__name__)

# (temperature, wind speed) units per OpenWeatherMap "units" parameter
UNIT_SYMBOLS = {
    "metric": ("°C", "m/s"),
    "imperial": ("°F", "mph"),
    "standard": ("K", "m/s"),
}

# The forecast endpoint returns one entry every three hours
ENTRIES_PER_DAY = 8


@dataclass
class WeatherReport:
    city: str
    country: str
    temperature: float
    feels_like: float
    humidity: int
    pressure: int
    description: str
    icon: str
    wind_speed: float
    cloudiness: int
    timestamp: datetime


@dataclass
class ForecastEntry:
    date: datetime
    temp: float
    description: str
    humidity: int
    wind_speed: float


@dataclass
class Forecast:
    city: str
    entries: List[ForecastEntry] = field(default_factory=list)


class WeatherModule(HttpFeatureModule):
    """Weather lookups by city name."""

    WEATHER_ERROR = "Could not fetch weather data. Please check the city name and try again."
    FORECAST_ERROR = "Could not fetch forecast data."

    def __init__(self, http_client: httpx.AsyncClient, config: Optional[WeatherConfig] = None):
        super().__init__(http_client)
        self.config = config or WeatherConfig()
        if not self.config.api_key:
            logger.warning("No weather API key configured; weather requests will be rejected by the provider")

    @property
    def name(self) -> str:
        return "weather"

    def _params(self, city: str) -> dict:
        return {"q": city, "appid": self.config.api_key, "units": self.config.units}

    async def get_weather(self, city: str) -> CommandResult:
        try:
            data = await self._get_json(f"{self.config.base_url}/weather", params=self._params(city))
            report = WeatherReport(
                city=data["name"],
                country=data["sys"]["country"],
                temperature=data["main"]["temp"],
                feels_like=data["main"]["feels_like"],
                humidity=data["main"]["humidity"],
                pressure=data["main"]["pressure"],
                description=data["weather"][0]["description"],
                icon=data["weather"][0]["icon"],
                wind_speed=data["wind"]["speed"],
                cloudiness=data["clouds"]["all"],
                timestamp=datetime.fromtimestamp(data["dt"], tz=timezone.utc),
            )
        except PROVIDER_ERRORS as e:
            return self._transport_failure(self.WEATHER_ERROR, e)

        logger.info(f"Fetched weather for {report.city}, {report.country}")
        return CommandResult.ok(report)

    async def get_forecast(self, city: str, days: Optional[int] = None) -> CommandResult:
        days = days or self.config.forecast_days
        try:
            data = await self._get_json(f"{self.config.base_url}/forecast", params=self._params(city))
            entries = [
                ForecastEntry(
                    date=datetime.fromtimestamp(item["dt"], tz=timezone.utc),
                    temp=item["main"]["temp"],
                    description=item["weather"][0]["description"],
                    humidity=item["main"]["humidity"],
                    wind_speed=item["wind"]["speed"],
                )
                for item in data["list"][: days * ENTRIES_PER_DAY]
            ]
            forecast = Forecast(city=data["city"]["name"], entries=entries)
        except PROVIDER_ERRORS as e:
            return self._transport_failure(self.FORECAST_ERROR, e)

        logger.info(f"Fetched {len(forecast.entries)} forecast entries for {forecast.city}")
        return CommandResult.ok(forecast)

    def format_weather(self, result: CommandResult) -> str:
        if result.failed:
            return result.error
        report: WeatherReport = result.payload
        temp_unit, wind_unit = UNIT_SYMBOLS.get(self.config.units, UNIT_SYMBOLS["metric"])
        return (
            f"🌍 Weather in {report.city}, {report.country}\n"
            "━━━━━━━━━━━━━━━━━━━━━━━━━━━━\n"
            f"🌡️  Temperature: {report.temperature}{temp_unit} (feels like {report.feels_like}{temp_unit})\n"
            f"📝 Description: {report.description}\n"
            f"💨 Wind Speed: {report.wind_speed} {wind_unit}\n"
            f"💧 Humidity: {report.humidity}%\n"
            f"🔽 Pressure: {report.pressure} hPa\n"
            f"☁️  Cloudiness: {report.cloudiness}%"
        )

    def format_forecast(self, result: CommandResult) -> str:
        """One line per calendar day, using the first entry of each day."""
        if result.failed:
            return result.error
        forecast: Forecast = result.payload
        temp_unit, wind_unit = UNIT_SYMBOLS.get(self.config.units, UNIT_SYMBOLS["metric"])

        lines = [f"📅 Forecast for {forecast.city}", "━━━━━━━━━━━━━━━━━━━━"]
        seen_days = set()
        for entry in forecast.entries:
            day = entry.date.strftime("%Y-%m-%d")
            if day in seen_days:
                continue
            seen_days.add(day)
            lines.append(
                f"{day}: {entry.temp}{temp_unit}, {entry.description} "
                f"(💧 {entry.humidity}%, 💨 {entry.wind_speed} {wind_unit})"
            )
        if not seen_days:
            lines.append("No forecast data available.")
        return "\n".join(lines)
