"""Decoding of textual values supplied by scripted callers.

The host stringifies script values before handing them over, so a stored
value arrives as literal text such as ``[1, "a", true, west]``. Engine
handles have no literal form and cannot be decoded from text.
"""

from __future__ import annotations

import re

from core.constants import MAX_VALUE_DEPTH
from core.errors import InvalidValueError
from core.value_types import (
    ArrayValue,
    BooleanValue,
    NumberValue,
    Side,
    SideValue,
    StringValue,
    Value,
    VoidValue,
)

_NUMBER_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_SIDE_ALIASES: dict[str, Side] = {
    "west": Side.BLUFOR,
    "blufor": Side.BLUFOR,
    "east": Side.OPFOR,
    "opfor": Side.OPFOR,
    "guer": Side.INDEPENDENT,
    "resistance": Side.INDEPENDENT,
    "independent": Side.INDEPENDENT,
    "civ": Side.CIVILIAN,
    "civilian": Side.CIVILIAN,
    "ambient life": Side.AMBIENT_LIFE,
    "sideambientlife": Side.AMBIENT_LIFE,
    "empty": Side.EMPTY,
    "sideempty": Side.EMPTY,
    "friendly": Side.FRIENDLY,
    "sidefriendly": Side.FRIENDLY,
    "enemy": Side.ENEMY,
    "sideenemy": Side.ENEMY,
    "unknown": Side.UNKNOWN,
    "sideunknown": Side.UNKNOWN,
    "logic": Side.LOGIC,
    "sidelogic": Side.LOGIC,
}
_VOID_TOKENS = ("nil", "any")


def parse_value_text(text: str) -> Value:
    """Decode one literal into a value.

    Args:
        text: Literal text, e.g. ``5``, ``"name"``, ``[1, [true]]``.

    Returns:
        Decoded value.

    Raises:
        InvalidValueError: If the text is not a supported literal.
    """
    parser = _LiteralParser(text)
    value = parser.parse_value()
    parser.skip_whitespace()
    if not parser.at_end():
        raise parser.error("unexpected trailing text")
    return value


class _LiteralParser:
    """Recursive-descent parser over a single literal."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._position = 0

    def at_end(self) -> bool:
        return self._position >= len(self._text)

    def skip_whitespace(self) -> None:
        while not self.at_end() and self._text[self._position].isspace():
            self._position += 1

    def error(self, reason: str) -> InvalidValueError:
        return InvalidValueError(
            "value",
            f"Invalid value '{self._text}' at position {self._position}: {reason}",
        )

    def parse_value(self, depth: int = 0) -> Value:
        self.skip_whitespace()
        if self.at_end():
            raise self.error("expected a value")
        if depth > MAX_VALUE_DEPTH:
            raise self.error(f"nesting exceeds {MAX_VALUE_DEPTH} levels")
        current = self._text[self._position]
        if current == "[":
            return self._parse_array(depth)
        if current in "\"'":
            return self._parse_string(current)
        return self._parse_token()

    def _parse_array(self, depth: int) -> ArrayValue:
        self._position += 1
        items: list[Value] = []
        self.skip_whitespace()
        if not self.at_end() and self._text[self._position] == "]":
            self._position += 1
            return ArrayValue(tuple(items))
        while True:
            items.append(self.parse_value(depth + 1))
            self.skip_whitespace()
            if self.at_end():
                raise self.error("unterminated array")
            current = self._text[self._position]
            self._position += 1
            if current == "]":
                return ArrayValue(tuple(items))
            if current != ",":
                raise self.error("expected ',' or ']'")

    def _parse_string(self, quote: str) -> StringValue:
        self._position += 1
        characters: list[str] = []
        while not self.at_end():
            current = self._text[self._position]
            self._position += 1
            if current != quote:
                characters.append(current)
                continue
            # A doubled quote is an escaped quote character.
            if not self.at_end() and self._text[self._position] == quote:
                characters.append(quote)
                self._position += 1
                continue
            return StringValue("".join(characters))
        raise self.error("unterminated string")

    def _parse_token(self) -> Value:
        start = self._position
        while not self.at_end() and self._text[self._position] not in ",]":
            self._position += 1
        token = self._text[start : self._position].strip()
        lowered = token.lower()
        if lowered in ("true", "false"):
            return BooleanValue(lowered == "true")
        if _NUMBER_PATTERN.fullmatch(token):
            return NumberValue(float(token))
        if lowered in _SIDE_ALIASES:
            return SideValue(_SIDE_ALIASES[lowered])
        if lowered in _VOID_TOKENS:
            return VoidValue()
        self._position = start
        raise self.error(f"unsupported literal '{token}'")
