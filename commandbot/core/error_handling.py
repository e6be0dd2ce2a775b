"""
Error Tracking

Records command failures by category so operators can see what is going
wrong. Nothing here retries or recovers: every failure has already been turned
into a failure result by the time it is registered.
"""

import logging
import traceback
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from .result import CommandResult, ErrorCategory

logger = logging.getLogger(__name__)


@dataclass
class ErrorContext:
    """Context information for a single recorded failure."""
    error_id: str
    timestamp: datetime
    component: str
    operation: str
    message: str
    category: ErrorCategory
    error_type: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    stack_trace: Optional[str] = None


class ErrorTracker:
    """Bounded history of failures with per-category counters."""

    def __init__(self, max_history: int = 1000):
        self.error_history: List[ErrorContext] = []
        self.error_counts: Dict[str, int] = defaultdict(int)
        self.max_history = max_history
        self._sequence = 0

    def register_exception(
        self,
        error: Exception,
        component: str,
        operation: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ErrorContext:
        """Record an unexpected exception caught at a component boundary."""
        context = self._record(
            component=component,
            operation=operation,
            message=str(error),
            category=ErrorCategory.INTERNAL,
            error_type=type(error).__name__,
            metadata=metadata,
            stack_trace=traceback.format_exc(),
        )
        logger.error(
            f"[{component}] {operation}: {context.error_type}: {context.message}",
            extra={"error_category": context.category.value},
        )
        return context

    def register_failure(
        self,
        result: CommandResult,
        component: str,
        operation: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[ErrorContext]:
        """Record a failure result. Success results are ignored."""
        if result.success:
            return None

        category = result.category or ErrorCategory.VALIDATION
        context = self._record(
            component=component,
            operation=operation,
            message=result.error or "",
            category=category,
            metadata=metadata,
        )
        if category == ErrorCategory.TRANSPORT:
            logger.warning(f"[{component}] {operation}: {context.message}", extra={"error_category": category.value})
        else:
            logger.debug(f"[{component}] {operation}: {context.message}", extra={"error_category": category.value})
        return context

    def get_error_analytics(self, hours: int = 24) -> Dict[str, Any]:
        """Summarise recorded failures for the given time window."""
        cutoff_time = datetime.now() - timedelta(hours=hours)
        recent_errors = [
            err for err in self.error_history
            if err.timestamp >= cutoff_time
        ]

        category_counts: Dict[str, int] = defaultdict(int)
        operation_counts: Dict[str, int] = defaultdict(int)
        for error in recent_errors:
            category_counts[error.category.value] += 1
            operation_counts[error.operation] += 1

        return {
            "total_errors": len(recent_errors),
            "time_period_hours": hours,
            "by_category": dict(category_counts),
            "by_operation": dict(operation_counts),
            "most_failing_operation": (
                max(operation_counts.items(), key=lambda x: x[1])[0]
                if operation_counts else None
            ),
        }

    def _record(
        self,
        component: str,
        operation: str,
        message: str,
        category: ErrorCategory,
        error_type: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        stack_trace: Optional[str] = None,
    ) -> ErrorContext:
        self._sequence += 1
        context = ErrorContext(
            error_id=f"{component}_{operation}_{self._sequence}",
            timestamp=datetime.now(),
            component=component,
            operation=operation,
            message=message,
            category=category,
            error_type=error_type,
            metadata=metadata or {},
            stack_trace=stack_trace,
        )

        self.error_history.append(context)
        self.error_counts[f"{component}_{category.value}"] += 1

        if len(self.error_history) > self.max_history:
            self.error_history = self.error_history[-self.max_history:]

        return context
