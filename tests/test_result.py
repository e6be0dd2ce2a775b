"""
Tests for the CommandResult outcome type.
"""

from dataclasses import dataclass

import pytest

from commandbot.core.result import CommandResult, ErrorCategory


@dataclass
class _Payload:
    name: str
    value: int


@pytest.mark.unit
class TestCommandResult:

    def test_ok_carries_payload(self):
        result = CommandResult.ok({"a": 1})
        assert result.success is True
        assert result.failed is False
        assert result.payload == {"a": 1}
        assert result.error is None
        assert result.category is None

    def test_fail_defaults_to_validation(self):
        result = CommandResult.fail("bad input")
        assert result.failed
        assert result.error == "bad input"
        assert result.category == ErrorCategory.VALIDATION

    def test_fail_with_category(self):
        result = CommandResult.fail("down", ErrorCategory.TRANSPORT)
        assert result.category == ErrorCategory.TRANSPORT

    def test_results_are_immutable(self):
        result = CommandResult.ok(1)
        with pytest.raises(Exception):
            result.success = False

    def test_to_dict_success_converts_dataclasses(self):
        result = CommandResult.ok([_Payload("x", 1), _Payload("y", 2)])
        assert result.to_dict() == {
            "status": "success",
            "payload": [{"name": "x", "value": 1}, {"name": "y", "value": 2}],
        }

    def test_to_dict_failure(self):
        result = CommandResult.fail("oops", ErrorCategory.INTERNAL)
        assert result.to_dict() == {
            "status": "failure",
            "error": "oops",
            "category": "internal",
        }
