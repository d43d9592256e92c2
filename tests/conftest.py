"""
Pytest configuration and fixtures.
"""
import os
import sys

import pytest

# Add the parent directory to path so the package imports from a checkout
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Qt widgets are exercised without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from calculator2025.core import Operator
from calculator2025.engine import CalculatorEngine
from calculator2025.history import HistoryStore


@pytest.fixture
def history_file(tmp_path):
    return tmp_path / "history.txt"


@pytest.fixture
def store(history_file):
    return HistoryStore(history_file)


@pytest.fixture
def engine(store):
    return CalculatorEngine(store)


@pytest.fixture
def press():
    """Feed a string like "12+3=" into an engine, one button per character."""
    def _press(engine, keys):
        for ch in keys:
            if ch.isdigit():
                engine.input_digit(ch)
            elif ch == ".":
                engine.input_decimal()
            elif ch == "=":
                engine.compute()
            else:
                engine.input_operator(Operator.from_symbol(ch))
        return engine.snapshot()
    return _press
