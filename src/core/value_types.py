"""Typed value model stored by storages.

This module defines the closed set of values a storage may hold at a key.
Values are immutable; arrays hold tuples of already-built values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
import struct
from typing import Union


class Side(Enum):
    """Faction tag of the host engine, keyed by its native discriminant."""

    OPFOR = 0
    BLUFOR = 1
    INDEPENDENT = 2
    CIVILIAN = 3
    UNKNOWN = 4
    ENEMY = 5
    FRIENDLY = 6
    LOGIC = 7
    EMPTY = 8
    AMBIENT_LIFE = 9


class HandleKind(Enum):
    """Opaque engine references carried as uninterpreted text."""

    GROUP = "group"
    OBJECT = "object"
    CODE = "code"
    CONFIG = "config"
    CONTROL = "control"
    DISPLAY = "display"
    LOCATION = "location"
    SCRIPT_HANDLE = "script_handle"
    STRUCTURED_TEXT = "structured_text"
    DIARY_RECORD = "diary_record"
    TASK = "task"
    TEAM_MEMBER = "team_member"
    NAMESPACE = "namespace"


@dataclass(frozen=True)
class ArrayValue:
    """Ordered sequence of nested values.

    Attributes:
        items: Element values; lists are frozen into a tuple.
    """

    items: tuple["Value", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class BooleanValue:
    value: bool


@dataclass(frozen=True)
class NumberValue:
    """Single-precision number.

    Attributes:
        value: Payload, rounded to the nearest 32-bit float on construction.
    """

    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", to_float32(self.value))


@dataclass(frozen=True)
class StringValue:
    value: str


@dataclass(frozen=True)
class SideValue:
    side: Side


@dataclass(frozen=True)
class HandleValue:
    """Opaque engine reference.

    Attributes:
        kind: Which engine type the payload refers to.
        payload: Raw text as produced by the engine.
    """

    kind: HandleKind
    payload: str


@dataclass(frozen=True)
class VoidValue:
    """Absence of a value."""


Value = Union[
    ArrayValue,
    BooleanValue,
    NumberValue,
    StringValue,
    SideValue,
    HandleValue,
    VoidValue,
]


def to_float32(value: float) -> float:
    """Round a Python float to the nearest representable 32-bit float.

    Args:
        value: Input number.

    Returns:
        Float holding an exact float32 value; overflow yields signed infinity.
    """
    number = float(value)
    if math.isnan(number) or math.isinf(number):
        return number
    try:
        return float(struct.unpack("<f", struct.pack("<f", number))[0])
    except OverflowError:
        return math.copysign(math.inf, number)
