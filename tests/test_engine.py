"""Tests for the calculator engine state machine.

Covers digit entry, chained operators, equals, clear, sign toggle, percent,
the unary functions and their domain errors.
"""

import math

import pytest

from keypadcalc.engine import CalculatorEngine, UnknownOperatorError, apply_operator
from keypadcalc.models import ERROR_MARKER, Operator, UnaryFunction


@pytest.fixture
def engine():
    return CalculatorEngine()


def _type(engine, digits):
    for ch in digits:
        engine.enter_digit_or_decimal(ch)
    return engine.display


# --- Initial state ---

def test_initial_state(engine):
    s = engine.state
    assert engine.display == "0"
    assert s.previous_value is None
    assert s.pending_operator is None
    assert s.is_new_input is True


# --- Digit entry ---

def test_digits_concatenate(engine):
    assert _type(engine, "123") == "123"


def test_leading_zero_replaced(engine):
    assert _type(engine, "50") == "50"
    engine.clear_all()
    assert _type(engine, "007") == "7"


def test_decimal_on_new_input_gets_leading_zero(engine):
    assert _type(engine, ".5") == "0.5"


def test_decimal_point_deduplicated(engine):
    assert _type(engine, "1..5") == "1.5"


def test_zero_after_decimal_kept(engine):
    assert _type(engine, "0.05") == "0.05"


def test_invalid_symbol_rejected(engine):
    with pytest.raises(ValueError):
        engine.enter_digit_or_decimal("a")


# --- Binary operators ---

def test_simple_addition(engine):
    _type(engine, "2")
    engine.select_operator(Operator.ADD)
    _type(engine, "3")
    assert engine.evaluate_equals() == "5"


def test_chained_addition(engine):
    _type(engine, "2")
    engine.select_operator(Operator.ADD)
    _type(engine, "3")
    assert engine.select_operator(Operator.ADD) == "5"
    assert engine.state.previous_value == 5
    _type(engine, "4")
    assert engine.evaluate_equals() == "9"


def test_chaining_is_left_to_right(engine):
    # 2 + 3 × 4 = 20, not 14
    _type(engine, "2")
    engine.select_operator(Operator.ADD)
    _type(engine, "3")
    engine.select_operator(Operator.MULTIPLY)
    _type(engine, "4")
    assert engine.evaluate_equals() == "20"


def test_operator_replaced_without_second_operand(engine):
    _type(engine, "8")
    engine.select_operator(Operator.ADD)
    engine.select_operator(Operator.SUBTRACT)
    assert engine.state.pending_operator == Operator.SUBTRACT
    assert engine.state.previous_value == 8
    _type(engine, "3")
    assert engine.evaluate_equals() == "5"


def test_decimal_arithmetic_formatting(engine):
    _type(engine, "0.1")
    engine.select_operator(Operator.ADD)
    _type(engine, "0.2")
    assert engine.evaluate_equals() == "0.3"


def test_division(engine):
    _type(engine, "15")
    engine.select_operator(Operator.DIVIDE)
    _type(engine, "4")
    assert engine.evaluate_equals() == "3.75"


def test_division_by_zero_shows_error_and_clears_pending(engine):
    _type(engine, "5")
    engine.select_operator(Operator.DIVIDE)
    _type(engine, "0")
    assert engine.evaluate_equals() == ERROR_MARKER
    assert engine.state.previous_value is None
    assert engine.state.pending_operator is None
    assert engine.state.is_new_input is True


def test_overflow_shows_error(engine):
    engine.state.current_input = "1E+300"
    engine.select_operator(Operator.MULTIPLY)
    engine.state.current_input = "1E+300"
    engine.state.is_new_input = False
    assert engine.evaluate_equals() == ERROR_MARKER


def test_equals_without_pending_is_noop(engine):
    _type(engine, "42")
    assert engine.evaluate_equals() == "42"
    assert engine.state.is_new_input is False


def test_equals_uses_first_operand_when_no_second_typed(engine):
    _type(engine, "6")
    engine.select_operator(Operator.MULTIPLY)
    assert engine.evaluate_equals() == "36"


def test_operator_on_error_is_noop(engine):
    engine.state.current_input = ERROR_MARKER
    engine.select_operator(Operator.ADD)
    assert engine.state.pending_operator is None


def test_apply_operator_rejects_unknown():
    with pytest.raises(UnknownOperatorError):
        apply_operator("modulo", 1.0, 2.0)


def test_apply_operator_divide_by_zero_is_nan():
    assert math.isnan(apply_operator(Operator.DIVIDE, 1.0, 0.0))


# --- Clear ---

def test_clear_resets_in_place(engine):
    state = engine.state
    _type(engine, "9")
    engine.select_operator(Operator.ADD)
    assert engine.clear_all() == "0"
    assert engine.state is state
    assert state.previous_value is None
    assert state.pending_operator is None
    assert state.is_new_input is True


# --- Sign toggle ---

def test_toggle_sign_twice_restores(engine):
    _type(engine, "12.5")
    assert engine.toggle_sign() == "-12.5"
    assert engine.toggle_sign() == "12.5"


def test_toggle_sign_on_zero_is_noop(engine):
    assert engine.toggle_sign() == "0"


def test_toggle_sign_keeps_entry_mode(engine):
    _type(engine, "3")
    engine.toggle_sign()
    _type(engine, "4")
    assert engine.display == "-34"


def test_toggle_sign_on_error_is_noop(engine):
    engine.state.current_input = "-4"
    engine.square_root()
    assert engine.toggle_sign() == ERROR_MARKER


# --- Percent ---

def test_percent(engine):
    _type(engine, "50")
    assert engine.apply_percent() == "0.5"
    assert engine.state.is_new_input is True


# --- Unary functions ---

@pytest.mark.parametrize("typed, fn, expected", [
    ("9", UnaryFunction.SQUARE_ROOT, "3"),
    ("2", UnaryFunction.SQUARE_ROOT, "1.4142135623731"),
    ("12", UnaryFunction.SQUARE, "144"),
    ("27", UnaryFunction.CUBE_ROOT, "3"),
    ("4", UnaryFunction.RECIPROCAL, "0.25"),
    ("1", UnaryFunction.NATURAL_LOG, "0"),
])
def test_unary_functions(engine, typed, fn, expected):
    _type(engine, typed)
    assert engine.apply_unary(fn) == expected
    assert engine.state.is_new_input is True


def test_cube_root_of_negative(engine):
    _type(engine, "8")
    engine.toggle_sign()
    assert engine.cube_root() == "-2"


def test_square_of_negative(engine):
    _type(engine, "3")
    engine.toggle_sign()
    assert engine.square() == "9"


def test_square_root_of_zero(engine):
    assert engine.square_root() == "0"


@pytest.mark.parametrize("typed, op", [
    ("-4", "square_root"),
    ("-1", "natural_log"),
    ("0", "natural_log"),
    ("0", "reciprocal"),
])
def test_domain_errors(engine, typed, op):
    engine.state.current_input = typed
    engine.state.is_new_input = False
    assert getattr(engine, op)() == ERROR_MARKER
    assert engine.state.is_new_input is True


def test_digit_after_error_starts_fresh(engine):
    _type(engine, "4")
    engine.toggle_sign()
    engine.square_root()
    assert _type(engine, "7") == "7"


def test_square_overflow_shows_error(engine):
    engine.state.current_input = "1E+200"
    assert engine.square() == ERROR_MARKER


# --- State snapshot ---

def test_state_to_dict(engine):
    _type(engine, "7")
    engine.select_operator(Operator.DIVIDE)
    assert engine.state.to_dict() == {
        "current_input": "7",
        "previous_value": 7.0,
        "pending_operator": "divide",
        "is_new_input": True,
    }
