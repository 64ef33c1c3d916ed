"""Validation and normalization of raw call arguments.

The host stringifies every argument except the function name, so string
operands arrive wrapped in double quotes that are stripped here.
"""

from __future__ import annotations

from typing import Sequence

from core.errors import EmptyArgumentError, InvalidInputError, MissingArgumentError


def is_printable_ascii(text: str) -> bool:
    """Return whether text holds only printable ASCII characters."""
    return all(" " <= character <= "~" for character in text)


def validate_ascii(function: str, args: Sequence[str]) -> None:
    """Reject any non printable ASCII input before it reaches the pool.

    Args:
        function: Raw function name.
        args: Raw argument vector.

    Raises:
        InvalidInputError: Naming the first offending argument.
    """
    if not is_printable_ascii(function):
        raise InvalidInputError("function", "Function name is not printable ASCII")
    for index, argument in enumerate(args):
        if not is_printable_ascii(argument):
            raise InvalidInputError(
                f"argument {index}", f"Argument {index} is not printable ASCII"
            )


def strip_quotes(argument: str) -> str:
    """Remove the double quotes the host wraps around stringified operands."""
    return argument.strip('"')


def require_argument(args: Sequence[str], index: int, argument_name: str) -> str:
    """Return the unquoted argument at index.

    Args:
        args: Operand vector.
        index: Position of the required operand.
        argument_name: Name reported to the caller on failure.

    Returns:
        The operand with surrounding quotes removed.

    Raises:
        MissingArgumentError: If the operand is absent.
        EmptyArgumentError: If the operand is empty once unquoted.
    """
    if len(args) <= index:
        raise MissingArgumentError(argument_name, f"Missing required argument '{argument_name}'")
    value = strip_quotes(args[index])
    if not value:
        raise EmptyArgumentError(argument_name, f"Argument '{argument_name}' is empty")
    return value


def require_raw_argument(args: Sequence[str], index: int, argument_name: str) -> str:
    """Return the argument at index without unquoting it.

    Raises:
        MissingArgumentError: If the operand is absent.
        EmptyArgumentError: If the operand is blank.
    """
    if len(args) <= index:
        raise MissingArgumentError(argument_name, f"Missing required argument '{argument_name}'")
    value = args[index]
    if not value.strip():
        raise EmptyArgumentError(argument_name, f"Argument '{argument_name}' is empty")
    return value
