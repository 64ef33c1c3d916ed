"""Numeric status codes reported alongside every call result."""

from __future__ import annotations

from enum import IntEnum

from core.errors import (
    EmptyArgumentError,
    ExtensionProtocolError,
    InvalidInputError,
    InvalidValueError,
    MissingArgumentError,
    UnknownFunctionError,
)
from core.value_types import ArrayValue, NumberValue, StringValue


class ErrorCode(IntEnum):
    """Status returned to the host; zero means success."""

    OK = 0
    INVALID_INPUT = 1
    UNKNOWN_FUNCTION = 2
    INVALID_OUTPUT = 3
    MISSING_ARGUMENT = 10
    EMPTY_ARGUMENT = 11
    INVALID_VALUE = 12
    STORAGE_ERROR = 20


ERROR_CODE_DESCRIPTIONS: dict[ErrorCode, str] = {
    ErrorCode.OK: "No Error",
    ErrorCode.INVALID_INPUT: "An argument is not printable ASCII",
    ErrorCode.UNKNOWN_FUNCTION: "The function you passed is unknown",
    ErrorCode.INVALID_OUTPUT: "The result cannot be written as ASCII text",
    ErrorCode.MISSING_ARGUMENT: "Missing required argument",
    ErrorCode.EMPTY_ARGUMENT: "Argument is empty",
    ErrorCode.INVALID_VALUE: "Argument is not a valid value",
    ErrorCode.STORAGE_ERROR: "A storage error occured",
}

_PROTOCOL_ERROR_CODES: dict[type[ExtensionProtocolError], ErrorCode] = {
    InvalidInputError: ErrorCode.INVALID_INPUT,
    UnknownFunctionError: ErrorCode.UNKNOWN_FUNCTION,
    MissingArgumentError: ErrorCode.MISSING_ARGUMENT,
    EmptyArgumentError: ErrorCode.EMPTY_ARGUMENT,
    InvalidValueError: ErrorCode.INVALID_VALUE,
}


def error_code_table() -> ArrayValue:
    """Return the known (code, description) pairs as a nested array."""
    return ArrayValue(
        tuple(
            ArrayValue((NumberValue(code), StringValue(description)))
            for code, description in ERROR_CODE_DESCRIPTIONS.items()
        )
    )


def protocol_error_code(error: ExtensionProtocolError) -> ErrorCode:
    """Map a protocol error onto its status code."""
    return _PROTOCOL_ERROR_CODES[type(error)]
