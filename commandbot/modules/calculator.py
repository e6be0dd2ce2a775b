"""
Arithmetic expression evaluation.

Expressions are checked against a fixed character set and then evaluated by
walking the Python AST, accepting only numeric literals and arithmetic
operators. Nothing is ever passed to ``eval``.
"""
import ast
import logging
import math
import operator
import re
from dataclasses import dataclass
from typing import Union

from ..core.result import CommandResult
from .base import FeatureModule, format_number

logger = logging.getLogger(__name__)

Number = Union[int, float]

ALLOWED_EXPRESSION = re.compile(r"^[0-9+\-*/().%\s]*$")

# Keeps ``**`` from turning a short expression into a huge computation
MAX_EXPONENT = 1000
MAX_RESULT_DIGITS = 10_000
TOO_LARGE = "Result is too large"

_BINARY_OPERATORS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPERATORS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


class _UnsupportedExpression(Exception):
    pass


@dataclass
class Calculation:
    expression: str
    result: Number


def _evaluate_node(node: ast.AST) -> Number:
    if isinstance(node, ast.Expression):
        return _evaluate_node(node.body)
    if isinstance(node, ast.Constant) and type(node.value) in (int, float):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPERATORS:
        left = _evaluate_node(node.left)
        right = _evaluate_node(node.right)
        if isinstance(node.op, ast.Pow):
            _check_power(left, right)
        return _BINARY_OPERATORS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPERATORS:
        return _UNARY_OPERATORS[type(node.op)](_evaluate_node(node.operand))
    raise _UnsupportedExpression(type(node).__name__)


def _check_power(base: Number, exponent: Number) -> None:
    if abs(exponent) > MAX_EXPONENT:
        raise OverflowError("exponent too large")
    # Nested powers stay under the exponent cap but still explode in size
    if abs(base) > 1 and abs(exponent) * math.log10(abs(base)) > MAX_RESULT_DIGITS:
        raise OverflowError("result too large")


def _finite(value: Number, error: str) -> CommandResult:
    # Negative bases with fractional exponents come back complex
    if isinstance(value, complex):
        return CommandResult.fail(error)
    try:
        as_float = float(value)
    except OverflowError:
        return CommandResult.fail(TOO_LARGE)
    if not math.isfinite(as_float):
        return CommandResult.fail(error)
    return CommandResult.ok(value)


class CalculatorModule(FeatureModule):
    """CPU-only calculator; the one feature module with no provider."""

    INVALID_CHARACTERS = "Invalid characters in expression"
    INVALID_EXPRESSION = "Invalid mathematical expression. Please try again."
    DIVIDE_BY_ZERO = "Cannot divide by zero"
    NOT_FINITE = "Result is not a finite number"

    @property
    def name(self) -> str:
        return "calculator"

    def evaluate(self, expression: str) -> CommandResult:
        """
        Evaluate an arithmetic expression.

        Only digits, ``+ - * / ( ) % .`` and whitespace are accepted; anything
        else is rejected before evaluation. The result is rounded to four
        decimal places.
        """
        if not ALLOWED_EXPRESSION.match(expression):
            logger.info(f"Rejected calculator expression with invalid characters: {expression!r}")
            return CommandResult.fail(self.INVALID_CHARACTERS)

        try:
            tree = ast.parse(expression.strip(), mode="eval")
            value = _evaluate_node(tree)
        except ZeroDivisionError:
            return CommandResult.fail(self.DIVIDE_BY_ZERO)
        except OverflowError:
            return CommandResult.fail(TOO_LARGE)
        except (SyntaxError, _UnsupportedExpression, TypeError, ValueError):
            return CommandResult.fail(self.INVALID_EXPRESSION)

        checked = _finite(value, self.NOT_FINITE)
        if checked.failed:
            return checked

        rounded = round(float(value), 4)
        if rounded.is_integer():
            rounded = int(rounded)
        return CommandResult.ok(Calculation(expression=expression, result=rounded))

    # Single-operation helpers. Every one of them returns a CommandResult.

    def add(self, a: Number, b: Number) -> CommandResult:
        return _finite(a + b, self.NOT_FINITE)

    def subtract(self, a: Number, b: Number) -> CommandResult:
        return _finite(a - b, self.NOT_FINITE)

    def multiply(self, a: Number, b: Number) -> CommandResult:
        return _finite(a * b, self.NOT_FINITE)

    def divide(self, a: Number, b: Number) -> CommandResult:
        if b == 0:
            return CommandResult.fail(self.DIVIDE_BY_ZERO)
        return _finite(a / b, self.NOT_FINITE)

    def power(self, base: Number, exponent: Number) -> CommandResult:
        if base == 0 and exponent < 0:
            return CommandResult.fail(self.DIVIDE_BY_ZERO)
        try:
            _check_power(base, exponent)
            value = base ** exponent
        except OverflowError:
            return CommandResult.fail(TOO_LARGE)
        return _finite(value, self.NOT_FINITE)

    def square_root(self, num: Number) -> CommandResult:
        if num < 0:
            return CommandResult.fail("Cannot calculate square root of negative number")
        return CommandResult.ok(math.sqrt(num))

    def percentage(self, num: Number, percent: Number) -> CommandResult:
        return _finite((num * percent) / 100, self.NOT_FINITE)

    def format_calculation(self, result: CommandResult) -> str:
        if result.failed:
            return result.error
        calc: Calculation = result.payload
        return f"🧮 Calculation\n━━━━━━━━━━━━━━\n{calc.expression} = **{format_number(calc.result)}**"
