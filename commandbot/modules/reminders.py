"""
Reminders with delayed delivery.

A reminder is stored, then a pending-fire handle is registered for its id in
the task scheduler. When the handle fires the notification callback receives
the full reminder and the record is deleted. Deleting a reminder cancels the
handle first. Pending handles live in memory only and are lost on restart.
"""
import inspect
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional, Union

from ..core.models import Reminder
from ..core.result import CommandResult
from ..core.scheduler import ScheduledTask, TaskScheduler
from ..core.storage import BotStorage
from ..utils.time_utils import ensure_utc, format_timestamp, utc_now
from .base import FeatureModule

logger = logging.getLogger(__name__)

NotifyCallback = Callable[[Reminder], Union[None, Awaitable[None]]]


class RemindersModule(FeatureModule):
    """
    Creates, lists and cancels reminders.

    ``notify`` is called once per fired reminder. It may be a plain function
    or a coroutine function; faults it raises are logged and not retried.
    """

    PAST_DUE_DATE = "Due date must be in the future"
    NEGATIVE_DELAY = "Reminder delay cannot be negative"

    def __init__(
        self,
        storage: BotStorage,
        notify: Optional[NotifyCallback] = None,
        scheduler: Optional[TaskScheduler] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.storage = storage
        self.notify = notify
        self.scheduler = scheduler if scheduler is not None else TaskScheduler()
        self.clock = clock

    @property
    def name(self) -> str:
        return "reminders"

    def create_reminder(
        self,
        user_id: str,
        text: str,
        delay: Union[float, timedelta],
        notify: Optional[NotifyCallback] = None,
    ) -> CommandResult:
        """
        Create a reminder that fires after ``delay`` (seconds or timedelta).

        A zero delay fires as soon as the event loop gets to it. Must be
        called with a running event loop.
        """
        delay_seconds = delay.total_seconds() if isinstance(delay, timedelta) else float(delay)
        if delay_seconds < 0:
            return CommandResult.fail(self.NEGATIVE_DELAY)

        now = self.clock()
        return self._schedule(user_id, text, now, now + timedelta(seconds=delay_seconds), delay_seconds, notify)

    def _schedule(
        self,
        user_id: str,
        text: str,
        created_at: datetime,
        due_at: datetime,
        delay_seconds: float,
        notify: Optional[NotifyCallback],
    ) -> CommandResult:
        reminder = Reminder(user_id=user_id, text=text, created_at=created_at, due_at=due_at)
        self.storage.add_reminder(reminder)

        callback = notify or self.notify
        try:
            self.scheduler.schedule(reminder.id, delay_seconds, lambda: self._fire(reminder, callback))
        except Exception:
            # No timer means the reminder would never fire; keep storage consistent
            self.storage.delete_reminder(reminder.id)
            raise

        logger.info(f"Reminder {reminder.id} for user {user_id} due at {format_timestamp(reminder.due_at)}")
        return CommandResult.ok(reminder)

    def create_scheduled_reminder(
        self,
        user_id: str,
        text: str,
        due_at: datetime,
        notify: Optional[NotifyCallback] = None,
    ) -> CommandResult:
        """Create a reminder for an absolute instant, which must be in the future."""
        now = self.clock()
        due_at = ensure_utc(due_at)
        delay = due_at - now
        if delay <= timedelta(0):
            return CommandResult.fail(self.PAST_DUE_DATE)
        return self._schedule(user_id, text, now, due_at, delay.total_seconds(), notify)

    def list_reminders(self, user_id: str) -> CommandResult:
        """The user's reminders in creation order."""
        return CommandResult.ok(self.storage.get_reminders(user_id))

    def delete_reminder(self, reminder_id: str) -> CommandResult:
        """Cancel and remove a reminder. Unknown or already-fired ids succeed."""
        if self.scheduler.cancel(reminder_id):
            logger.info(f"Cancelled pending reminder {reminder_id}")
        self.storage.delete_reminder(reminder_id)
        return CommandResult.ok(True)

    def pending_handle(self, reminder_id: str) -> Optional[ScheduledTask]:
        return self.scheduler.get(reminder_id)

    def shutdown(self) -> int:
        """Cancel every pending reminder timer. Stored records are kept."""
        cancelled = self.scheduler.cancel_all()
        if cancelled:
            logger.info(f"Cancelled {cancelled} pending reminder(s) on shutdown")
        return cancelled

    async def _fire(self, reminder: Reminder, notify: Optional[NotifyCallback]) -> None:
        log_context = {"user_id": reminder.user_id, "reminder_id": reminder.id}
        logger.info(f"Reminder {reminder.id} for user {reminder.user_id} is due", extra=log_context)
        try:
            if notify is None:
                logger.warning(f"No notification callback for reminder {reminder.id}; dropping it", extra=log_context)
            else:
                outcome = notify(reminder)
                if inspect.isawaitable(outcome):
                    await outcome
        except Exception as e:
            logger.error(
                f"Notification callback failed for reminder {reminder.id}: {e}", exc_info=True, extra=log_context
            )
        finally:
            self.storage.delete_reminder(reminder.id)

    def format_reminders(self, result: CommandResult) -> str:
        if result.failed:
            return result.error
        reminders = result.payload
        if not reminders:
            return "📝 No reminders set."

        lines = ["📝 Your Reminders:", "━━━━━━━━━━━━━━━━"]
        for index, reminder in enumerate(reminders, start=1):
            lines.append(f"{index}. {reminder.text}")
            lines.append(f"   Due: {format_timestamp(reminder.due_at)}")
        return "\n".join(lines)
