"""
engine.py
Button-driven calculator state machine. Every public operation mutates the
engine and returns a Snapshot for the UI to render.
"""

import logging
import math
from datetime import datetime
from typing import NamedTuple, Optional, Union

from .config import ERROR_TEXT, MAX_INPUT_DIGITS
from .core import (
    CalculatorError, Operator, apply_operator, ensure_finite, format_number,
    parse_number, reciprocal, square, square_root,
)
from .history import HistoryEntry, HistoryStore

logger = logging.getLogger(__name__)

DIGITS = "0123456789"


class Snapshot(NamedTuple):
    display: str
    expression: str
    error: bool


class CalculatorEngine:
    def __init__(self, history: Optional[HistoryStore] = None):
        self.history = history if history is not None else HistoryStore()
        self.clear()

    # ----------------------------
    # State
    # ----------------------------
    def snapshot(self) -> Snapshot:
        return Snapshot(self.display, self.expression, self.error)

    def clear(self) -> Snapshot:
        self.display = "0"
        self.expression = ""
        self.pending_operator: Optional[Operator] = None
        self.stored_operand: Optional[float] = None
        self.error = False
        # next digit replaces the display instead of extending it
        self._fresh_entry = True
        # an operator was pressed and no right operand typed yet
        self._awaiting_operand = False
        self._just_computed = False
        return self.snapshot()

    def _fail(self, message: str) -> Snapshot:
        logger.info("Calculation error: %s", message)
        self.display = ERROR_TEXT
        self.expression = message
        self.pending_operator = None
        self.stored_operand = None
        self.error = True
        self._fresh_entry = True
        self._awaiting_operand = False
        self._just_computed = False
        return self.snapshot()

    def _show_result(self, value: float) -> None:
        self.display = format_number(value)
        self._fresh_entry = True
        self._awaiting_operand = False

    def _value(self) -> float:
        return parse_number(self.display)

    def _start_entry(self) -> None:
        if self._just_computed:
            self.expression = ""
            self._just_computed = False
        elif self.pending_operator is not None:
            self.expression = f"{format_number(self.stored_operand)} {self.pending_operator.symbol}"
        self.display = "0"
        self._fresh_entry = False
        self._awaiting_operand = False

    # ----------------------------
    # Entry
    # ----------------------------
    def input_digit(self, d: Union[int, str]) -> Snapshot:
        d = str(d)
        if d == ".":
            return self.input_decimal()
        if len(d) != 1 or d not in DIGITS:
            raise ValueError(f"Not a digit: {d!r}")
        if self.error:
            return self.snapshot()
        if self._fresh_entry:
            self._start_entry()
        if sum(ch.isdigit() for ch in self.display) >= MAX_INPUT_DIGITS:
            return self.snapshot()
        if self.display == "0":
            self.display = d
        elif self.display == "-0":
            self.display = "-" + d
        else:
            self.display += d
        return self.snapshot()

    def input_decimal(self) -> Snapshot:
        if self.error:
            return self.snapshot()
        if self._fresh_entry:
            self._start_entry()
        if "." not in self.display:
            self.display += "."
        return self.snapshot()

    def clear_entry(self) -> Snapshot:
        if self.error:
            return self.snapshot()
        self.display = "0"
        self._fresh_entry = False
        self._awaiting_operand = False
        return self.snapshot()

    def backspace(self) -> Snapshot:
        if self.error or self._fresh_entry:
            return self.snapshot()
        text = self.display[:-1]
        self.display = text if text not in ("", "-") else "0"
        return self.snapshot()

    def toggle_sign(self) -> Snapshot:
        if self.error or self._value() == 0:
            return self.snapshot()
        if self.display.startswith("-"):
            self.display = self.display[1:]
        else:
            self.display = "-" + self.display
        return self.snapshot()

    def recall(self, value: float) -> Snapshot:
        """Put a number (e.g. a history result) on the display as a new entry."""
        if self.error:
            return self.snapshot()
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"Cannot recall {value!r}")
        if self._just_computed:
            self.expression = ""
            self._just_computed = False
        self._show_result(value)
        return self.snapshot()

    # ----------------------------
    # Binary operations
    # ----------------------------
    def input_operator(self, op: Operator) -> Snapshot:
        if not isinstance(op, Operator):
            op = Operator.from_symbol(op)
        if self.error:
            return self.snapshot()
        if self.pending_operator is not None and not self._awaiting_operand:
            self.compute()
            if self.error:
                return self.snapshot()
        left = self._value()
        self.stored_operand = left
        self.pending_operator = op
        self.expression = f"{format_number(left)} {op.symbol}"
        self._fresh_entry = True
        self._awaiting_operand = True
        self._just_computed = False
        return self.snapshot()

    def compute(self) -> Snapshot:
        if self.error or self.pending_operator is None:
            return self.snapshot()
        a, op, b = self.stored_operand, self.pending_operator, self._value()
        expr = f"{format_number(a)} {op.symbol} {format_number(b)}"
        try:
            result = apply_operator(op, a, b)
        except CalculatorError as e:
            return self._fail(str(e))
        logger.debug("%s = %r", expr, result)
        self.expression = f"{expr} ="
        self.pending_operator = None
        self.stored_operand = None
        self._show_result(result)
        self._just_computed = True
        self.history.append(HistoryEntry(a, op, b, result, datetime.now()))
        return self.snapshot()

    def percent(self) -> Snapshot:
        if self.error:
            return self.snapshot()
        value = self._value()
        base = self.stored_operand if self.stored_operand is not None else 1.0
        try:
            result = ensure_finite(base * value / 100)
        except CalculatorError as e:
            return self._fail(str(e))
        self._show_result(result)
        return self.snapshot()

    # ----------------------------
    # Unary functions
    # ----------------------------
    def _unary(self, func, label: str) -> Snapshot:
        if self.error:
            return self.snapshot()
        value = self._value()
        try:
            result = func(value)
        except CalculatorError as e:
            return self._fail(str(e))
        trail = label.format(format_number(value))
        if self.pending_operator is not None:
            trail = f"{format_number(self.stored_operand)} {self.pending_operator.symbol} {trail}"
        self.expression = trail
        self._just_computed = self.pending_operator is None
        self._show_result(result)
        return self.snapshot()

    def reciprocal(self) -> Snapshot:
        return self._unary(reciprocal, "1/({})")

    def square(self) -> Snapshot:
        return self._unary(square, "sqr({})")

    def square_root(self) -> Snapshot:
        return self._unary(square_root, "√({})")
