"""Calculator engine — the button-press state machine.

Each public method is one kind of keypad event. It mutates the engine's
CalculatorState and returns the display string, which is always exactly
``state.current_input``.

Chaining is left to right with no precedence: pressing an operator while a
second operand has been typed resolves the pending operation first, so
``2 + 3 + 4 =`` shows 5 on the second ``+`` and 9 on ``=``.
"""

from __future__ import annotations

import math
from typing import Callable, Optional

from keypadcalc.models import (
    ERROR_MARKER,
    CalculatorState,
    Operator,
    Reading,
    UnaryFunction,
)

SIGNIFICANT_DIGITS = 15
DECIMAL_POINT = "."
DIGITS = frozenset("0123456789")


class UnknownOperatorError(ValueError):
    """An operator outside the closed Operator set reached the evaluator."""


def apply_operator(op: Operator, left: float, right: float) -> float:
    """Evaluate ``left op right``.

    Division by an exact zero returns NaN instead of raising; formatting
    turns it into the error marker.
    """
    if op == Operator.ADD:
        return left + right
    if op == Operator.SUBTRACT:
        return left - right
    if op == Operator.MULTIPLY:
        return left * right
    if op == Operator.DIVIDE:
        return math.nan if right == 0 else left / right
    raise UnknownOperatorError(f"Unknown operator: {op!r}")


def format_number(value: float) -> str:
    """Render a float the way the display shows it.

    15 significant digits, no trailing fractional zeros, no dangling decimal
    point. '1.50' → '1.5', '1.0' → '1', 1e20 → '1E+20'. NaN and infinities
    render as the error marker.
    """
    if math.isnan(value) or math.isinf(value):
        return ERROR_MARKER

    text = format(value, f".{SIGNIFICANT_DIGITS}G")
    # Only the mantissa is trimmed; '1.5E+20' must not lose the exponent's zero
    mantissa, sep, exponent = text.partition("E")
    if DECIMAL_POINT in mantissa:
        mantissa = mantissa.rstrip("0").rstrip(DECIMAL_POINT)
    return mantissa + sep + exponent


def render(reading: Reading) -> str:
    """Collapse a Reading into its display string."""
    if reading.is_error:
        return ERROR_MARKER
    return format_number(reading.value)


def parse_numeral(text: str) -> Optional[float]:
    """Parse display text as a number, or None if it isn't one.

    The error marker is never handed to float(); it is rejected up front.
    """
    if text == ERROR_MARKER:
        return None
    try:
        return float(text)
    except ValueError:
        return None


# (guard, transform). A guard returning False means a domain error.
_UNARY: dict[UnaryFunction, tuple[Callable[[float], bool], Callable[[float], float]]] = {
    UnaryFunction.SQUARE_ROOT: (lambda x: x >= 0, math.sqrt),
    UnaryFunction.SQUARE: (lambda x: True, lambda x: x * x),
    UnaryFunction.CUBE_ROOT: (lambda x: True, math.cbrt),
    UnaryFunction.RECIPROCAL: (lambda x: x != 0, lambda x: 1.0 / x),
    UnaryFunction.NATURAL_LOG: (lambda x: x > 0, math.log),
}


class CalculatorEngine:
    """Owns one CalculatorState and applies keypad events to it."""

    def __init__(self) -> None:
        self.state = CalculatorState()

    @property
    def display(self) -> str:
        return self.state.current_input

    def _current(self) -> Optional[float]:
        return parse_numeral(self.state.current_input)

    def _show(self, reading: Reading) -> str:
        self.state.current_input = render(reading)
        self.state.is_new_input = True
        return self.display

    # --- Entry ---

    def enter_digit_or_decimal(self, symbol: str) -> str:
        """Type a digit or the decimal point."""
        if symbol not in DIGITS and symbol != DECIMAL_POINT:
            raise ValueError(f"Not a digit or decimal point: {symbol!r}")

        s = self.state
        if s.is_new_input:
            s.current_input = "0." if symbol == DECIMAL_POINT else symbol
            s.is_new_input = False
        elif symbol == DECIMAL_POINT:
            if DECIMAL_POINT not in s.current_input:
                s.current_input += DECIMAL_POINT
        elif s.current_input == "0":
            s.current_input = symbol
        else:
            s.current_input += symbol
        return self.display

    def toggle_sign(self) -> str:
        """Flip the leading minus sign of the number on display."""
        s = self.state
        if s.current_input == "0" or s.is_error:
            return self.display
        if s.current_input.startswith("-"):
            s.current_input = s.current_input[1:]
        else:
            s.current_input = "-" + s.current_input
        return self.display

    def clear_all(self) -> str:
        self.state.reset()
        return self.display

    # --- Binary operations ---

    def select_operator(self, op: Operator) -> str:
        """Press +, −, × or ÷.

        If a second operand has been typed since the last operator, the
        pending operation is resolved first and its result becomes the new
        left operand.
        """
        current = self._current()
        if current is None:
            return self.display

        s = self.state
        if s.previous_value is not None and s.pending_operator is not None and not s.is_new_input:
            s.previous_value = apply_operator(s.pending_operator, s.previous_value, current)
            s.current_input = render(Reading.of(s.previous_value))
        else:
            s.previous_value = current

        s.pending_operator = op
        s.is_new_input = True
        return self.display

    def evaluate_equals(self) -> str:
        s = self.state
        if s.previous_value is None or s.pending_operator is None:
            return self.display
        current = self._current()
        if current is None:
            return self.display

        result = apply_operator(s.pending_operator, s.previous_value, current)
        self._show(Reading.of(result))
        s.previous_value = None
        s.pending_operator = None
        return self.display

    # --- Unary operations ---

    def apply_percent(self) -> str:
        current = self._current()
        if current is None:
            return self.display
        return self._show(Reading.of(current / 100.0))

    def apply_unary(self, fn: UnaryFunction) -> str:
        """Apply a single-operand transform to the number on display.

        Out-of-domain operands (negative square root, non-positive log,
        reciprocal of zero) show the error marker.
        """
        current = self._current()
        if current is None:
            return self.display

        guard, transform = _UNARY[fn]
        if not guard(current):
            return self._show(Reading.error())
        return self._show(Reading.of(transform(current)))

    def square_root(self) -> str:
        return self.apply_unary(UnaryFunction.SQUARE_ROOT)

    def square(self) -> str:
        return self.apply_unary(UnaryFunction.SQUARE)

    def cube_root(self) -> str:
        return self.apply_unary(UnaryFunction.CUBE_ROOT)

    def reciprocal(self) -> str:
        return self.apply_unary(UnaryFunction.RECIPROCAL)

    def natural_log(self) -> str:
        return self.apply_unary(UnaryFunction.NATURAL_LOG)
