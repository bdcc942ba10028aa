"""Data models for the keypadcalc engine.

Operator and UnaryFunction enums, the Reading tagged result, and the mutable
CalculatorState — the typed structures that flow through engine → keypad → CLI.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

ERROR_MARKER = "Error"


class Operator(str, Enum):
    """Binary operators. Display glyphs live in keypadcalc.keypad."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"


class UnaryFunction(str, Enum):
    """Single-operand transforms applied to the current input."""

    SQUARE_ROOT = "square_root"
    SQUARE = "square"
    CUBE_ROOT = "cube_root"
    RECIPROCAL = "reciprocal"
    NATURAL_LOG = "natural_log"


@dataclass(frozen=True)
class Reading:
    """Outcome of a computation: either a number or an error.

    Only rendering turns an error into the display marker, so nothing has to
    parse "Error" back into a number.
    """

    value: Optional[float] = None

    @classmethod
    def of(cls, value: float) -> Reading:
        """Wrap a float, collapsing NaN and infinities to an error."""
        if math.isnan(value) or math.isinf(value):
            return cls.error()
        return cls(value=value)

    @classmethod
    def error(cls) -> Reading:
        return cls(value=None)

    @property
    def is_error(self) -> bool:
        return self.value is None


@dataclass
class CalculatorState:
    """Everything the calculator remembers between button presses."""

    current_input: str = "0"
    previous_value: Optional[float] = None
    pending_operator: Optional[Operator] = None
    is_new_input: bool = True

    def reset(self) -> None:
        """Return to the power-on values without replacing the object."""
        self.current_input = "0"
        self.previous_value = None
        self.pending_operator = None
        self.is_new_input = True

    @property
    def is_error(self) -> bool:
        return self.current_input == ERROR_MARKER

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "current_input": self.current_input,
            "previous_value": self.previous_value,
            "pending_operator": self.pending_operator.value if self.pending_operator else None,
            "is_new_input": self.is_new_input,
        }
