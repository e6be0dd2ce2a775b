"""
Tests for the error tracker.
"""

import pytest

from commandbot.core.error_handling import ErrorTracker
from commandbot.core.result import CommandResult, ErrorCategory


@pytest.mark.unit
class TestErrorTracker:

    def test_register_exception(self):
        tracker = ErrorTracker()
        try:
            raise ValueError("bad value")
        except ValueError as e:
            context = tracker.register_exception(e, "router", "calc", {"user_id": "alice"})

        assert context.category == ErrorCategory.INTERNAL
        assert context.error_type == "ValueError"
        assert context.message == "bad value"
        assert "ValueError" in context.stack_trace
        assert context.metadata == {"user_id": "alice"}
        assert tracker.error_counts["router_internal"] == 1

    def test_register_failure_ignores_success(self):
        tracker = ErrorTracker()
        assert tracker.register_failure(CommandResult.ok(1), "router", "calc") is None
        assert tracker.error_history == []

    def test_register_failure_keeps_category(self):
        tracker = ErrorTracker()
        context = tracker.register_failure(
            CommandResult.fail("down", ErrorCategory.TRANSPORT), "router", "weather"
        )
        assert context.category == ErrorCategory.TRANSPORT
        assert context.error_id == "router_weather_1"

    def test_history_is_bounded(self):
        tracker = ErrorTracker(max_history=5)
        for _ in range(12):
            tracker.register_failure(CommandResult.fail("x"), "router", "calc")

        assert len(tracker.error_history) == 5
        assert tracker.error_history[-1].error_id == "router_calc_12"

    def test_analytics(self):
        tracker = ErrorTracker()
        tracker.register_failure(CommandResult.fail("x"), "router", "calc")
        tracker.register_failure(CommandResult.fail("y"), "router", "calc")
        tracker.register_failure(CommandResult.fail("z", ErrorCategory.TRANSPORT), "router", "weather")

        analytics = tracker.get_error_analytics(hours=1)

        assert analytics["total_errors"] == 3
        assert analytics["by_category"] == {"validation": 2, "transport": 1}
        assert analytics["most_failing_operation"] == "calc"

    def test_analytics_empty(self):
        analytics = ErrorTracker().get_error_analytics()
        assert analytics["total_errors"] == 0
        assert analytics["most_failing_operation"] is None
