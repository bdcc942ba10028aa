"""Keypad adapter — wires button labels to CalculatorEngine operations.

The engine knows nothing about glyphs. This module owns the mapping from the
labels printed on the keypad (``×``, ``÷``, ``√x``, ``AC``...) to KeyEvents,
and the dispatch of those events to the engine. ASCII aliases are accepted so
a sequence of presses can be scripted from a terminal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Union

from keypadcalc.engine import DECIMAL_POINT, DIGITS, CalculatorEngine
from keypadcalc.models import Operator, UnaryFunction


class KeyKind(str, Enum):
    """Kinds of keypad events."""

    DIGIT = "digit"
    OPERATOR = "operator"
    EQUALS = "equals"
    CLEAR = "clear"
    TOGGLE_SIGN = "toggle_sign"
    PERCENT = "percent"
    UNARY = "unary"


@dataclass(frozen=True)
class KeyEvent:
    """One button press. Payload is the digit, Operator or UnaryFunction."""

    kind: KeyKind
    payload: Union[str, Operator, UnaryFunction, None] = None


class UnknownKeyError(KeyError):
    """A label that isn't on the keypad."""

    def __init__(self, label: str) -> None:
        super().__init__(label)
        self.label = label

    def __str__(self) -> str:
        return f"No such key: {self.label!r}"


OPERATOR_GLYPHS: dict[Operator, str] = {
    Operator.ADD: "+",
    Operator.SUBTRACT: "−",
    Operator.MULTIPLY: "×",
    Operator.DIVIDE: "÷",
}

UNARY_GLYPHS: dict[UnaryFunction, str] = {
    UnaryFunction.SQUARE_ROOT: "√x",
    UnaryFunction.SQUARE: "x²",
    UnaryFunction.CUBE_ROOT: "∛x",
    UnaryFunction.RECIPROCAL: "1/x",
    UnaryFunction.NATURAL_LOG: "ln",
}

# Button grid as drawn on the widget, top row first.
LAYOUT: list[list[str]] = [
    ["√x", "x²", "∛x", "1/x", "ln"],
    ["AC", "±", "%", "÷"],
    ["7", "8", "9", "×"],
    ["4", "5", "6", "−"],
    ["1", "2", "3", "+"],
    ["0", ".", "="],
]


def _build_labels() -> dict[str, KeyEvent]:
    labels: dict[str, KeyEvent] = {}
    for symbol in sorted(DIGITS) + [DECIMAL_POINT]:
        labels[symbol] = KeyEvent(KeyKind.DIGIT, symbol)
    for op, glyph in OPERATOR_GLYPHS.items():
        labels[glyph] = KeyEvent(KeyKind.OPERATOR, op)
    for fn, glyph in UNARY_GLYPHS.items():
        labels[glyph] = KeyEvent(KeyKind.UNARY, fn)
    labels["="] = KeyEvent(KeyKind.EQUALS)
    labels["AC"] = KeyEvent(KeyKind.CLEAR)
    labels["±"] = KeyEvent(KeyKind.TOGGLE_SIGN)
    labels["%"] = KeyEvent(KeyKind.PERCENT)
    return labels


LABELS: dict[str, KeyEvent] = _build_labels()

# Typeable stand-ins for glyphs that are awkward in a shell
ALIASES: dict[str, str] = {
    "-": "−",
    "*": "×",
    "x": "×",
    "/": "÷",
    "+/-": "±",
    "C": "AC",
    "sqrt": "√x",
    "sq": "x²",
    "cbrt": "∛x",
    "inv": "1/x",
}


def parse_label(label: str) -> KeyEvent:
    """Translate a button label (or an ASCII alias) into a KeyEvent.

    Raises:
        UnknownKeyError: if the label isn't on the keypad.
    """
    key = ALIASES.get(label, label)
    try:
        return LABELS[key]
    except KeyError:
        raise UnknownKeyError(label) from None


def dispatch(engine: CalculatorEngine, event: KeyEvent) -> str:
    """Route a KeyEvent to the matching engine operation.

    Returns the display string after the operation.
    """
    if event.kind == KeyKind.DIGIT:
        return engine.enter_digit_or_decimal(event.payload)
    if event.kind == KeyKind.OPERATOR:
        return engine.select_operator(event.payload)
    if event.kind == KeyKind.EQUALS:
        return engine.evaluate_equals()
    if event.kind == KeyKind.CLEAR:
        return engine.clear_all()
    if event.kind == KeyKind.TOGGLE_SIGN:
        return engine.toggle_sign()
    if event.kind == KeyKind.PERCENT:
        return engine.apply_percent()
    if event.kind == KeyKind.UNARY:
        return engine.apply_unary(event.payload)
    raise ValueError(f"Unhandled key kind: {event.kind!r}")


class Keypad:
    """A keypad bound to an engine and, optionally, a display sink.

    The sink is called with the display string after every press, the way a
    widget's text box would be refreshed.
    """

    def __init__(
        self,
        engine: Optional[CalculatorEngine] = None,
        sink: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.engine = engine or CalculatorEngine()
        self.sink = sink
        if self.sink:
            self.sink(self.engine.display)

    @property
    def display(self) -> str:
        return self.engine.display

    def press(self, label: str) -> str:
        text = dispatch(self.engine, parse_label(label))
        if self.sink:
            self.sink(text)
        return text

    def press_all(self, labels: Iterable[str]) -> str:
        """Press each label in order; returns the final display."""
        for label in labels:
            self.press(label)
        return self.display


def operator_glyph(op: Optional[Operator]) -> str:
    """Glyph for a pending operator, or '' when none is pending."""
    if op is None:
        return ""
    return OPERATOR_GLYPHS[op]
