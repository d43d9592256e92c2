"""
core.py
Arithmetic primitives for the calculator: operators, unary functions,
error types and the display number format.
"""

import math
from enum import Enum

from .config import (
    DECIMAL_PLACES, ERROR_TEXT, MAX_DISPLAY_WIDTH, SCIENTIFIC_PRECISION,
)

# ----------------------------
# Errors
# ----------------------------
class CalculatorError(Exception):
    pass

class InvalidUnaryOperation(CalculatorError):
    pass

class DivisionByZero(CalculatorError, ZeroDivisionError):
    """Raised by divide when the right operand is zero."""

class ResultOverflow(CalculatorError):
    pass

class HistoryParseError(CalculatorError):
    pass

# ----------------------------
# Operators
# ----------------------------
class Operator(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @property
    def symbol(self) -> str:
        """Symbol shown in the expression trail."""
        if self is Operator.MULTIPLY:
            return "×"
        if self is Operator.DIVIDE:
            return "÷"
        return self.value

    @classmethod
    def from_symbol(cls, text: str) -> "Operator":
        for op in cls:
            if text in (op.value, op.symbol):
                return op
        if text == "−":
            return cls.SUBTRACT
        raise ValueError(f"Unknown operator: {text!r}")


def ensure_finite(value: float) -> float:
    if not math.isfinite(value):
        raise ResultOverflow("Overflow")
    return value


def apply_operator(op: Operator, a: float, b: float) -> float:
    if op is Operator.ADD:
        return ensure_finite(a + b)
    if op is Operator.SUBTRACT:
        return ensure_finite(a - b)
    if op is Operator.MULTIPLY:
        return ensure_finite(a * b)
    if op is Operator.DIVIDE:
        if b == 0:
            raise DivisionByZero("Cannot divide by zero")
        return ensure_finite(a / b)
    raise TypeError(f"Not an operator: {op!r}")

# ----------------------------
# Unary functions
# ----------------------------
def reciprocal(x: float) -> float:
    if x == 0:
        raise InvalidUnaryOperation("Cannot divide by zero")
    return ensure_finite(1.0 / x)

def square(x: float) -> float:
    return ensure_finite(x * x)

def square_root(x: float) -> float:
    if x < 0:
        raise InvalidUnaryOperation("Invalid input")
    return math.sqrt(x)

# ----------------------------
# Display format
# ----------------------------
def _scientific(value: float) -> str:
    mantissa, exponent = f"{value:.{SCIENTIFIC_PRECISION}e}".split("e")
    if "." in mantissa:
        mantissa = mantissa.rstrip("0").rstrip(".")
    return f"{mantissa}e{exponent}"


def format_number(value: float) -> str:
    """
    Render a number for the display.

    Integral values below 1e15 print without a decimal point; others use
    DECIMAL_PLACES fixed digits with trailing zeros trimmed. Anything wider
    than MAX_DISPLAY_WIDTH, or a non-zero value that would round to "0",
    is shown in scientific form instead.
    """
    value = float(value)
    if not math.isfinite(value):
        return ERROR_TEXT
    if value == 0:
        return "0"
    if value.is_integer() and abs(value) < 1e15:
        text = str(int(value))
    else:
        text = f"{value:.{DECIMAL_PLACES}f}".rstrip("0").rstrip(".")
    if len(text) > MAX_DISPLAY_WIDTH or text in ("0", "-0"):
        return _scientific(value)
    return text


def parse_number(text: str) -> float:
    """Parse display text ("12", "-0.5", "3.") into a float."""
    text = text.strip()
    if not text or text == ERROR_TEXT:
        raise ValueError(f"Not a number: {text!r}")
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Not a finite number: {text!r}")
    return value
