"""keypadcalc — a keypad calculator engine.

A button-press state machine: digits, the four binary operators with
left-to-right chaining, equals, clear, sign toggle, percent and five unary
functions. Every press returns the display string. The engine has no UI
dependency; keypadcalc.keypad maps button labels onto it and
``python -m keypadcalc`` drives it from a terminal.

Usage:
    from keypadcalc import CalculatorEngine
    engine = CalculatorEngine()
    engine.enter_digit_or_decimal("2")
"""

from keypadcalc.engine import CalculatorEngine, format_number
from keypadcalc.models import ERROR_MARKER, Operator, UnaryFunction

__all__ = ["CalculatorEngine", "format_number", "ERROR_MARKER", "Operator", "UnaryFunction"]
