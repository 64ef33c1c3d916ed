"""Canonical text rendering of stored values.

Rendering is one-way: it produces the text handed back to scripted callers
and is never parsed back. String payloads are wrapped in double quotes
without escaping embedded quotes.
"""

from __future__ import annotations

from decimal import Decimal
import math
from typing import NoReturn

from core.value_types import (
    ArrayValue,
    BooleanValue,
    HandleValue,
    NumberValue,
    Side,
    SideValue,
    StringValue,
    Value,
    VoidValue,
    to_float32,
)

SIDE_TOKENS: dict[Side, str] = {
    Side.BLUFOR: "blufor",
    Side.OPFOR: "opfor",
    Side.INDEPENDENT: "independent",
    Side.CIVILIAN: "civilian",
    Side.AMBIENT_LIFE: "sideAmbientLife",
    Side.EMPTY: "sideEmpty",
    Side.FRIENDLY: "sideFriendly",
    Side.ENEMY: "sideEnemy",
    Side.UNKNOWN: "sideUnknown",
    Side.LOGIC: "sideLogic",
}


def render_text(value: Value) -> str:
    """Render a value into its caller-facing text form.

    Args:
        value: Value to render.

    Returns:
        Canonical text, e.g. ``[1, "a"]`` for a two-element array.
    """
    if isinstance(value, ArrayValue):
        return "[" + ", ".join(render_text(item) for item in value.items) + "]"
    if isinstance(value, BooleanValue):
        return "true" if value.value else "false"
    if isinstance(value, NumberValue):
        return render_number(value.value)
    if isinstance(value, StringValue):
        return f'"{value.value}"'
    if isinstance(value, SideValue):
        return SIDE_TOKENS[value.side]
    if isinstance(value, HandleValue):
        return value.payload
    if isinstance(value, VoidValue):
        return ""
    _unhandled_variant(value)


def render_number(number: float) -> str:
    """Render a float32 in shortest round-trip decimal form.

    Integral values carry no fractional part and exponent notation is
    never used, so ``1e20`` renders as ``100000000000000000000``.

    Args:
        number: Value already rounded to float32 precision.

    Returns:
        Decimal text.
    """
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    return format(Decimal(_shortest_float32_digits(number)), "f")


def _shortest_float32_digits(number: float) -> str:
    for precision in range(1, 10):
        text = f"{number:.{precision}g}"
        if to_float32(float(text)) == number:
            return text
    return repr(number)


def _unhandled_variant(value: object) -> NoReturn:
    raise TypeError(f"Cannot render unsupported value type {type(value).__name__}")
