"""
Tests for the delayed task scheduler.
"""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from commandbot.core.scheduler import TaskScheduler
from commandbot.exceptions import DuplicateTaskError


@pytest.mark.unit
class TestTaskScheduler:

    @pytest.mark.asyncio
    async def test_fires_once_after_delay(self):
        scheduler = TaskScheduler()
        callback = MagicMock()

        task = scheduler.schedule("r1", 0, callback)
        assert scheduler.has_pending("r1")

        await task.wait()

        callback.assert_called_once_with()
        assert task.fired
        assert not task.pending
        assert len(scheduler) == 0

    @pytest.mark.asyncio
    async def test_entry_removed_before_callback_runs(self):
        scheduler = TaskScheduler()
        seen = []

        def callback():
            seen.append(scheduler.has_pending("r1"))
            seen.append(scheduler.cancel("r1"))

        task = scheduler.schedule("r1", 0, callback)
        await task.wait()

        assert seen == [False, False]

    @pytest.mark.asyncio
    async def test_async_callback_is_awaited(self):
        scheduler = TaskScheduler()
        callback = AsyncMock()

        task = scheduler.schedule("r1", 0, callback)
        await task.wait()

        callback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_pending_key_rejected(self):
        scheduler = TaskScheduler()
        scheduler.schedule("r1", 60, MagicMock())

        with pytest.raises(DuplicateTaskError):
            scheduler.schedule("r1", 60, MagicMock())

        scheduler.cancel_all()

    @pytest.mark.asyncio
    async def test_key_reusable_after_fire(self):
        scheduler = TaskScheduler()
        first = scheduler.schedule("r1", 0, MagicMock())
        await first.wait()

        second = scheduler.schedule("r1", 0, MagicMock())
        await second.wait()
        assert second.fired

    @pytest.mark.asyncio
    async def test_cancel_prevents_fire(self):
        scheduler = TaskScheduler()
        callback = MagicMock()

        task = scheduler.schedule("r1", 0.05, callback)
        assert scheduler.cancel("r1") is True
        await task.wait()

        callback.assert_not_called()
        assert task.cancelled
        assert not task.fired
        assert scheduler.get("r1") is None

    @pytest.mark.asyncio
    async def test_cancel_after_fire_is_noop(self):
        scheduler = TaskScheduler()
        task = scheduler.schedule("r1", 0, MagicMock())
        await task.wait()

        assert scheduler.cancel("r1") is False
        assert task.cancel() is False

    def test_cancel_unknown_key(self):
        assert TaskScheduler().cancel("missing") is False

    @pytest.mark.asyncio
    async def test_cancel_all(self):
        scheduler = TaskScheduler()
        for key in ("a", "b", "c"):
            scheduler.schedule(key, 60, MagicMock())
        assert sorted(scheduler.pending_keys()) == ["a", "b", "c"]

        assert scheduler.cancel_all() == 3
        assert len(scheduler) == 0
        assert scheduler.pending_keys() == []

    @pytest.mark.asyncio
    async def test_failing_callback_is_logged(self, caplog):
        scheduler = TaskScheduler()
        callback = MagicMock(side_effect=RuntimeError("boom"))

        with caplog.at_level(logging.ERROR, logger="commandbot.core.scheduler"):
            task = scheduler.schedule("r1", 0, callback)
            await task.wait()

        assert task.fired
        assert "boom" in caplog.text

    @pytest.mark.asyncio
    async def test_negative_delay_clamped_to_zero(self):
        scheduler = TaskScheduler()
        task = scheduler.schedule("r1", -5, MagicMock())
        assert task.delay == 0.0
        await task.wait()
