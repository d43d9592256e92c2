"""
Tests for the calculator engine state machine.
"""
import pytest

from calculator2025.core import Operator
from calculator2025.engine import CalculatorEngine, Snapshot
from calculator2025.history import HistoryEntry, HistoryStore


def state(engine):
    return {k: v for k, v in vars(engine).items() if k != "history"}


class TestDigitEntry:
    """Tests for digit and decimal point entry."""

    def test_initial_display(self, engine):
        assert engine.snapshot() == Snapshot("0", "", False)

    def test_digits_append(self, engine):
        engine.input_digit(5)
        assert engine.input_digit("3").display == "53"

    def test_leading_zeros_collapse(self, engine):
        engine.input_digit(0)
        assert engine.input_digit(0).display == "0"
        assert engine.input_digit(7).display == "7"

    def test_single_decimal_point(self, engine):
        assert engine.input_decimal().display == "0."
        assert engine.input_digit(5).display == "0.5"
        assert engine.input_decimal().display == "0.5"
        assert engine.input_digit(".").display == "0.5"

    def test_entry_length_is_capped(self, engine):
        for _ in range(20):
            engine.input_digit(9)
        assert engine.display == "9" * 16

    @pytest.mark.parametrize("bad", ["a", "12", 12, "+", ""])
    def test_rejects_non_digits(self, engine, bad):
        with pytest.raises(ValueError):
            engine.input_digit(bad)


class TestCompute:
    """Tests for binary operations and chained entry."""

    def test_addition_example(self, engine, store, press):
        snap = press(engine, "3+5=")
        assert snap.display == "8"
        assert snap.expression == "3 + 5 ="
        assert not snap.error
        (entry,) = store.entries()
        assert (entry.left, entry.operator, entry.right, entry.result) == (3, Operator.ADD, 5, 8)
        assert entry.timestamp is not None

    @pytest.mark.parametrize("keys,expected", [
        ("100-25=", "75"),
        ("4*5=", "20"),
        ("20/4=", "5"),
        ("1/4=", "0.25"),
        ("2/3=", "0.6666666667"),
        ("3-10=", "-7"),
        ("0.1+0.2=", "0.3"),
    ])
    def test_results(self, engine, press, keys, expected):
        assert press(engine, keys).display == expected

    def test_operator_sets_pending_state(self, engine, press):
        snap = press(engine, "2+")
        assert engine.pending_operator is Operator.ADD
        assert engine.stored_operand == 2
        assert snap.expression == "2 +"
        assert snap.display == "2"

    def test_operator_accepts_symbols(self, engine):
        engine.input_digit(6)
        engine.input_operator("÷")
        engine.input_digit(3)
        assert engine.compute().display == "2"

    def test_chained_entry_is_left_to_right(self, engine, store, press):
        assert press(engine, "2+3*").display == "5"
        assert engine.expression == "5 ×"
        snap = press(engine, "4=")
        assert snap.display == "20"
        assert snap.expression == "5 × 4 ="
        assert len(store) == 2

    def test_continue_from_result(self, engine, press):
        assert press(engine, "10+5=").display == "15"
        assert press(engine, "-3=").display == "12"

    def test_second_operator_replaces_first(self, engine, store, press):
        press(engine, "3+*")
        assert engine.pending_operator is Operator.MULTIPLY
        assert engine.expression == "3 ×"
        assert len(store) == 0
        assert press(engine, "4=").display == "12"

    def test_equals_without_right_operand_reuses_display(self, engine, press):
        assert press(engine, "3+=").display == "6"

    def test_equals_without_operator_is_noop(self, engine, store, press):
        assert press(engine, "5=").display == "5"
        assert len(store) == 0

    def test_digit_after_result_starts_over(self, engine, press):
        press(engine, "3+5=")
        snap = engine.input_digit(2)
        assert snap.display == "2"
        assert snap.expression == ""

    def test_new_entry_restores_trail(self, engine, press):
        press(engine, "3+4")
        engine.square()
        engine.input_digit(2)
        assert engine.expression == "3 +"


class TestErrors:
    """Tests for division by zero and the sticky error state."""

    def test_divide_by_zero(self, engine, store, press):
        snap = press(engine, "1/0=")
        assert snap.error
        assert snap.display == "Error"
        assert snap.expression == "Cannot divide by zero"
        assert engine.pending_operator is None
        assert engine.stored_operand is None
        assert len(store) == 0

    def test_chained_divide_by_zero(self, engine, store, press):
        snap = press(engine, "8/0+")
        assert snap.error
        assert engine.pending_operator is None
        assert len(store) == 0

    def test_overflow(self, engine, store):
        engine.recall(1e308)
        engine.input_operator(Operator.MULTIPLY)
        engine.recall(10)
        snap = engine.compute()
        assert snap.error
        assert snap.expression == "Overflow"
        assert len(store) == 0

    def test_error_is_sticky_until_clear(self, engine, press):
        frozen = press(engine, "1/0=")
        ops = [
            lambda: engine.input_digit(5),
            engine.input_decimal,
            lambda: engine.input_operator(Operator.ADD),
            engine.compute,
            engine.backspace,
            engine.toggle_sign,
            engine.percent,
            engine.clear_entry,
            engine.reciprocal,
            engine.square,
            engine.square_root,
            lambda: engine.recall(3),
        ]
        for op in ops:
            assert op() == frozen
        assert engine.clear() == Snapshot("0", "", False)

    def test_clear_restores_initial_state(self, engine, press):
        fresh = state(CalculatorEngine())
        press(engine, "12+7.5*")
        engine.toggle_sign()
        assert state(engine) != fresh
        engine.clear()
        assert state(engine) == fresh

    def test_clear_after_error_restores_initial_state(self, engine, press):
        press(engine, "9/0=")
        engine.clear()
        assert state(engine) == state(CalculatorEngine())

    def test_clear_keeps_history(self, engine, store, press):
        press(engine, "3+5=")
        engine.clear()
        assert len(store) == 1


class TestEditing:
    """Tests for CE, backspace, sign toggle, percent and recall."""

    def test_clear_entry_keeps_pending_operator(self, engine, press):
        press(engine, "5+3")
        snap = engine.clear_entry()
        assert snap.display == "0"
        assert engine.pending_operator is Operator.ADD
        assert engine.stored_operand == 5
        assert press(engine, "2=").display == "7"

    def test_backspace(self, engine, press):
        press(engine, "53")
        assert engine.backspace().display == "5"
        assert engine.backspace().display == "0"
        assert engine.backspace().display == "0"

    def test_backspace_decimal(self, engine, press):
        press(engine, "0.5")
        assert engine.backspace().display == "0."
        assert engine.backspace().display == "0"

    def test_backspace_negative_single_digit(self, engine):
        engine.input_digit(5)
        engine.toggle_sign()
        assert engine.backspace().display == "0"

    def test_backspace_ignored_on_result(self, engine, press):
        press(engine, "3+5=")
        assert engine.backspace().display == "8"

    def test_toggle_sign(self, engine):
        engine.input_digit(5)
        assert engine.toggle_sign().display == "-5"
        assert engine.toggle_sign().display == "5"

    def test_toggle_sign_on_zero_does_nothing(self, engine):
        assert engine.toggle_sign().display == "0"

    def test_negative_operand(self, engine, press):
        press(engine, "4")
        engine.toggle_sign()
        assert press(engine, "*3=").display == "-12"

    def test_percent_without_operator(self, engine, press):
        press(engine, "50")
        assert engine.percent().display == "0.5"

    def test_percent_of_stored_operand(self, engine, store, press):
        press(engine, "200+10")
        assert engine.percent().display == "20"
        assert press(engine, "=").display == "220"
        assert store.entries()[0].right == 20

    def test_recall_enters_value(self, engine, press):
        press(engine, "3+")
        assert engine.recall(2.5).display == "2.5"
        assert press(engine, "=").display == "5.5"


class TestUnaryFunctions:
    """Tests for reciprocal, square and square root on the display."""

    def test_reciprocal(self, engine, store):
        engine.input_digit(4)
        snap = engine.reciprocal()
        assert snap.display == "0.25"
        assert snap.expression == "1/(4)"
        assert len(store) == 0

    def test_reciprocal_of_zero(self, engine):
        snap = engine.reciprocal()
        assert snap.error
        assert snap.display == "Error"
        assert snap.expression == "Cannot divide by zero"

    def test_square(self, engine):
        engine.input_digit(3)
        snap = engine.square()
        assert snap.display == "9"
        assert snap.expression == "sqr(3)"

    def test_square_root(self, engine, press):
        press(engine, "16")
        snap = engine.square_root()
        assert snap.display == "4"
        assert snap.expression == "√(16)"

    def test_square_root_of_negative(self, engine):
        engine.input_digit(9)
        engine.toggle_sign()
        snap = engine.square_root()
        assert snap.error
        assert snap.expression == "Invalid input"

    def test_unary_inside_pending_operation(self, engine, press):
        press(engine, "3+4")
        snap = engine.square()
        assert snap.display == "16"
        assert snap.expression == "3 + sqr(4)"
        snap = engine.compute()
        assert snap.display == "19"
        assert snap.expression == "3 + 16 ="

    def test_digit_after_unary_starts_new_entry(self, engine):
        engine.input_digit(9)
        engine.square_root()
        snap = engine.input_digit(5)
        assert snap.display == "5"
        assert snap.expression == ""


class TestEngineHistory:
    """Tests for history recorded by the engine."""

    def test_history_capped_at_ten(self, engine, store, press):
        for i in range(1, 12):
            press(engine, f"{i}+0=")
        assert len(store) == 10
        entries = store.entries()
        assert entries[0].left == 11
        assert entries[-1].left == 2

    def test_history_survives_restart(self, engine, history_file, press):
        press(engine, "3+5=")
        press(engine, "6*7=")
        reloaded = HistoryStore(history_file)
        reloaded.load()
        assert reloaded.entries() == engine.history.entries()
        restarted = CalculatorEngine(reloaded)
        assert [str(e) for e in restarted.history.entries()] == ["6 × 7 = 42", "3 + 5 = 8"]

    def test_default_store_is_in_memory(self, press):
        engine = CalculatorEngine()
        press(engine, "1+1=")
        assert engine.history.path is None
        assert engine.history.entries()[0] == HistoryEntry(
            1, Operator.ADD, 1, 2, engine.history.entries()[0].timestamp,
        )
