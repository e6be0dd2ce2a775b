"""
Uniform command outcome shared by every feature module and the router.
"""
from dataclasses import asdict, dataclass, is_dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Failure categories reported back to callers."""
    VALIDATION = "validation"
    TRANSPORT = "transport"
    INTERNAL = "internal"


@dataclass(frozen=True)
class CommandResult:
    """
    Tagged outcome of a command: either a success carrying a module-specific
    payload or a failure carrying a human-readable message.

    Build instances with ``CommandResult.ok`` and ``CommandResult.fail`` rather
    than the constructor.
    """

    success: bool
    payload: Any = None
    error: Optional[str] = None
    category: Optional[ErrorCategory] = None

    @classmethod
    def ok(cls, payload: Any = None) -> "CommandResult":
        return cls(success=True, payload=payload)

    @classmethod
    def fail(
        cls, message: str, category: ErrorCategory = ErrorCategory.VALIDATION
    ) -> "CommandResult":
        return cls(success=False, error=message, category=category)

    @property
    def failed(self) -> bool:
        return not self.success

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the status/error dict shape used by the API layer."""
        if not self.success:
            return {
                "status": "failure",
                "error": self.error,
                "category": self.category.value if self.category else None,
            }
        return {"status": "success", "payload": _plain(self.payload)}


def _plain(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value
