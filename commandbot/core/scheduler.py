#!/usr/bin/env python3
"""
Delayed Task Scheduler

Runs one-shot callbacks after a delay on the running asyncio loop and keeps a
registry of the pending handles, at most one per key.
"""
import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from ..exceptions import DuplicateTaskError

logger = logging.getLogger(__name__)

TaskCallback = Callable[[], Union[Any, Awaitable[Any]]]


class ScheduledTask:
    """
    Handle for a callback that runs once after ``delay`` seconds.

    The handle is pending until it either fires or is cancelled; both are
    terminal. ``on_fire`` is called right before the callback so the owner can
    drop its reference before any user code runs.
    """

    def __init__(
        self,
        key: str,
        delay: float,
        callback: TaskCallback,
        on_fire: Optional[Callable[["ScheduledTask"], None]] = None,
    ):
        self.key = key
        self.delay = max(0.0, float(delay))
        self._callback = callback
        self._on_fire = on_fire
        self._cancelled = False
        self._fired = False
        self._task: asyncio.Task = asyncio.get_running_loop().create_task(
            self._run(), name=f"scheduled:{key}"
        )

    @property
    def pending(self) -> bool:
        return not (self._fired or self._cancelled)

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> bool:
        """Cancel the task if it has not fired yet. Returns True if cancelled."""
        if not self.pending:
            return False
        self._cancelled = True
        self._task.cancel()
        logger.debug(f"Scheduled task '{self.key}' cancelled")
        return True

    async def wait(self) -> None:
        """Wait until the task has fired or been cancelled."""
        await asyncio.wait({self._task})

    async def _run(self) -> None:
        await asyncio.sleep(self.delay)
        if self._cancelled:
            return

        self._fired = True
        if self._on_fire:
            self._on_fire(self)

        logger.debug(f"Scheduled task '{self.key}' firing after {self.delay}s")
        try:
            result = self._callback()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Scheduled task '{self.key}' callback failed: {e}", exc_info=True)


class TaskScheduler:
    """
    Registry of pending scheduled tasks keyed by an external id.

    A key can hold at most one pending handle. The entry is removed before the
    callback runs, so a cancel arriving after that point is a no-op and a task
    can never fire twice.
    """

    def __init__(self):
        self._tasks: Dict[str, ScheduledTask] = {}

    def schedule(self, key: str, delay: float, callback: TaskCallback) -> ScheduledTask:
        """
        Register ``callback`` to run once after ``delay`` seconds.

        Raises:
            DuplicateTaskError: if ``key`` already has a pending handle
        """
        existing = self._tasks.get(key)
        if existing is not None and existing.pending:
            raise DuplicateTaskError(key)

        task = ScheduledTask(key, delay, callback, on_fire=self._release)
        self._tasks[key] = task
        logger.debug(f"Scheduled task '{key}' in {task.delay}s ({len(self._tasks)} pending)")
        return task

    def cancel(self, key: str) -> bool:
        """Cancel and drop the pending handle for ``key``, if any."""
        task = self._tasks.pop(key, None)
        if task is None:
            return False
        return task.cancel()

    def cancel_all(self) -> int:
        """Cancel every pending handle. Returns how many were cancelled."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        return sum(1 for task in tasks if task.cancel())

    def get(self, key: str) -> Optional[ScheduledTask]:
        return self._tasks.get(key)

    def has_pending(self, key: str) -> bool:
        task = self._tasks.get(key)
        return task is not None and task.pending

    def pending_keys(self) -> List[str]:
        return [key for key, task in self._tasks.items() if task.pending]

    def __len__(self) -> int:
        return len(self._tasks)

    def _release(self, task: ScheduledTask) -> None:
        if self._tasks.get(task.key) is task:
            del self._tasks[task.key]
