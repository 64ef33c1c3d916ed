"""Unit tests for the typed value model."""

from __future__ import annotations

from dataclasses import FrozenInstanceError
import math

import pytest

from core.value_types import ArrayValue, NumberValue, StringValue, to_float32


def test_number_value_rounds_to_float32() -> None:
    """Numbers should hold the nearest single-precision value."""
    assert NumberValue(0.1).value == to_float32(0.1) and NumberValue(0.1).value != 0.1


def test_number_value_overflow_becomes_infinity() -> None:
    """Numbers beyond float32 range should become signed infinity."""
    assert NumberValue(1e40).value == math.inf and NumberValue(-1e40).value == -math.inf


def test_number_values_compare_by_payload() -> None:
    """Equal payloads should compare equal regardless of int or float input."""
    assert NumberValue(5) == NumberValue(5.0)


def test_array_value_freezes_lists() -> None:
    """Array items passed as a list should be stored as a tuple."""
    value = ArrayValue([StringValue("a")])  # type: ignore[arg-type]

    assert value.items == (StringValue("a"),)


def test_values_are_immutable() -> None:
    """Values should reject attribute assignment after construction."""
    value = StringValue("a")

    with pytest.raises(FrozenInstanceError):
        value.value = "b"  # type: ignore[misc]

    assert value.value == "a"
