"""
Current time in a timezone, time-of-day greetings and countdowns.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.result import CommandResult
from ..utils.time_utils import ensure_utc, utc_now
from .base import FeatureModule

logger = logging.getLogger(__name__)


@dataclass
class ClockReading:
    time: str
    date: str
    timezone: str
    day_of_week: str
    full: str
    greeting: str


@dataclass
class Countdown:
    target: datetime
    days: int
    hours: int
    minutes: int
    seconds: int
    total_seconds: int


def _format_offset(moment: datetime) -> str:
    offset = moment.strftime("%z") or "+0000"
    return f"{offset[:3]}:{offset[3:5]}"


class ClockModule(FeatureModule):
    """Time lookups. ``clock`` returns the current UTC instant and is injectable for tests."""

    def __init__(self, default_timezone: str = "UTC", clock: Callable[[], datetime] = utc_now):
        self.default_timezone = default_timezone
        self.clock = clock

    @property
    def name(self) -> str:
        return "time"

    def get_formatted_time(self, timezone_name: Optional[str] = None) -> CommandResult:
        timezone_name = timezone_name or self.default_timezone
        try:
            zone = ZoneInfo(timezone_name)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            # Region names like "America" resolve to tzdata directories
            return CommandResult.fail(f"Unknown timezone: {timezone_name}")

        now = self.clock().astimezone(zone)
        reading = ClockReading(
            time=now.strftime("%H:%M:%S"),
            date=now.strftime("%Y-%m-%d"),
            timezone=timezone_name,
            day_of_week=now.strftime("%A"),
            full=f"{now.strftime('%Y-%m-%d %H:%M:%S')} {_format_offset(now)}",
            greeting=self.get_greeting(now.hour),
        )
        return CommandResult.ok(reading)

    @staticmethod
    def get_greeting(hour: int) -> str:
        if 5 <= hour < 12:
            return "🌅 Good Morning!"
        if 12 <= hour < 17:
            return "☀️  Good Afternoon!"
        if 17 <= hour < 21:
            return "🌆 Good Evening!"
        return "🌙 Good Night!"

    def get_countdown(self, target: Union[str, datetime]) -> CommandResult:
        """
        Time remaining until ``target``.

        ``target`` is a datetime or an ISO 8601 string such as ``2026-12-31``
        or ``2026-12-31 18:00``. Values without a timezone are taken as UTC.
        """
        if isinstance(target, str):
            try:
                target = datetime.fromisoformat(target.strip())
            except ValueError:
                return CommandResult.fail(
                    "Invalid date. Use ISO format, e.g. 2026-12-31 or 2026-12-31T18:00"
                )
        target = ensure_utc(target)

        total_seconds = int((target - self.clock()).total_seconds())
        if total_seconds < 0:
            return CommandResult.fail("Target date is in the past")

        days, remainder = divmod(total_seconds, 86400)
        hours, remainder = divmod(remainder, 3600)
        minutes, seconds = divmod(remainder, 60)
        return CommandResult.ok(Countdown(
            target=target,
            days=days,
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            total_seconds=total_seconds,
        ))

    def format_time(self, result: CommandResult) -> str:
        if result.failed:
            return result.error
        reading: ClockReading = result.payload
        return f"{reading.greeting}\n🕒 {reading.full}\n{reading.day_of_week}"

    def format_countdown(self, result: CommandResult) -> str:
        if result.failed:
            return result.error
        c: Countdown = result.payload
        return f"⏱️  {c.days}d {c.hours}h {c.minutes}m {c.seconds}s remaining"
