"""
Calculator 2025: a Windows-style desktop calculator with persisted history.
"""
from .core import (
    CalculatorError, DivisionByZero, HistoryParseError, InvalidUnaryOperation,
    Operator, ResultOverflow, apply_operator, format_number, parse_number,
)
from .engine import CalculatorEngine, Snapshot
from .history import HistoryEntry, HistoryStore

__version__ = "0.1.0"

__all__ = [
    "CalculatorEngine", "Snapshot", "HistoryEntry", "HistoryStore", "Operator",
    "CalculatorError", "DivisionByZero", "InvalidUnaryOperation",
    "ResultOverflow", "HistoryParseError",
    "apply_operator", "format_number", "parse_number",
]
