"""Function resolution and execution against a storage pool.

Calls use one of two syntaxes. Standard: the function name is given and
every argument is an operand. Alternative: the function name is empty,
argument 0 names the function and the rest are operands. Operand 0 is
the storage name, operand 1 the key, operand 2 the value for ``set``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from core.errors import (
    EmptyArgumentError,
    ExtensionProtocolError,
    MissingArgumentError,
    StorageError,
    UnknownFunctionError,
)
from core.logging_config import get_logger
from core.value_types import ArrayValue, BooleanValue, StringValue, Value, VoidValue
from extension.arguments import (
    require_argument,
    require_raw_argument,
    strip_quotes,
    validate_ascii,
)
from extension.error_codes import ErrorCode, error_code_table, protocol_error_code
from extension.value_parsing import parse_value_text
from store.storage_pool import StoragePool

_LOGGER = get_logger(__name__)


class ExtensionFunction(Enum):
    """Operations reachable from the host."""

    ERROR_CODES = "errorCodes"
    OPEN = "open"
    CLOSE = "close"
    READ = "read"
    WRITE = "write"
    GET = "get"
    SET = "set"
    ERASE = "erase"
    EXISTS = "exists"
    LIST = "storages"


FUNCTION_NAMES: dict[str, ExtensionFunction] = {
    "errorCodes": ExtensionFunction.ERROR_CODES,
    "open": ExtensionFunction.OPEN,
    "close": ExtensionFunction.CLOSE,
    "read": ExtensionFunction.READ,
    "write": ExtensionFunction.WRITE,
    "get": ExtensionFunction.GET,
    "set": ExtensionFunction.SET,
    "erase": ExtensionFunction.ERASE,
    "eraseKey": ExtensionFunction.ERASE,
    "exists": ExtensionFunction.EXISTS,
    "getFiles": ExtensionFunction.LIST,
    "storages": ExtensionFunction.LIST,
}


@dataclass(frozen=True)
class ExtensionResult:
    """Status code and result value of one call.

    Attributes:
        code: Status reported to the host.
        value: Result rendered into the output buffer.
    """

    code: ErrorCode
    value: Value


def call_function(pool: StoragePool, function: str) -> ExtensionResult:
    """Run a call that was made without an argument vector.

    Args:
        pool: Target storage pool.
        function: Function name.

    Returns:
        Call result; protocol and storage failures become status codes.
    """
    try:
        validate_ascii(function, ())
        return _execute(pool, resolve_function(function), ())
    except ExtensionProtocolError as error:
        return _protocol_failure(error)


def call_function_args(pool: StoragePool, function: str, args: Sequence[str]) -> ExtensionResult:
    """Run a call made with an argument vector, in either syntax.

    Args:
        pool: Target storage pool.
        function: Function name, or empty for the alternative syntax.
        args: Raw argument vector.

    Returns:
        Call result; protocol and storage failures become status codes.
    """
    try:
        validate_ascii(function, args)
        if not args:
            raise MissingArgumentError("function", "Missing required argument 'function'")
        if function:
            return _execute(pool, resolve_function(function), args)
        function_name = strip_quotes(args[0])
        if not function_name:
            raise EmptyArgumentError("function", "Argument 'function' is empty")
        return _execute(pool, resolve_function(function_name), args[1:])
    except ExtensionProtocolError as error:
        return _protocol_failure(error)


def resolve_function(function_name: str) -> ExtensionFunction:
    """Map a host function name onto an operation.

    Raises:
        UnknownFunctionError: If the name is not recognized.
    """
    function = FUNCTION_NAMES.get(function_name)
    if function is None:
        raise UnknownFunctionError(function_name, f"Unknown function '{function_name}'")
    return function


def _execute(
    pool: StoragePool,
    function: ExtensionFunction,
    operands: Sequence[str],
) -> ExtensionResult:
    if function is ExtensionFunction.ERROR_CODES:
        return ExtensionResult(ErrorCode.OK, error_code_table())
    if function is ExtensionFunction.LIST:
        names = sorted(pool.list_storages())
        return ExtensionResult(ErrorCode.OK, ArrayValue(tuple(StringValue(n) for n in names)))
    name = require_argument(operands, 0, "name")
    try:
        return ExtensionResult(ErrorCode.OK, _execute_storage_call(pool, function, name, operands))
    except StorageError as error:
        _LOGGER.error(
            "storage_call_failed",
            function=function.value,
            storage=name,
            error=str(error),
            error_type=type(error).__name__,
        )
        return ExtensionResult(ErrorCode.STORAGE_ERROR, StringValue(f"Error: {error}"))


def _execute_storage_call(
    pool: StoragePool,
    function: ExtensionFunction,
    name: str,
    operands: Sequence[str],
) -> Value:
    if function is ExtensionFunction.OPEN:
        pool.open(name)
    elif function is ExtensionFunction.CLOSE:
        pool.close(name)
    elif function is ExtensionFunction.READ:
        pool.read(name)
    elif function is ExtensionFunction.WRITE:
        pool.write(name)
    elif function is ExtensionFunction.GET:
        return pool.get(name, require_argument(operands, 1, "key"))
    elif function is ExtensionFunction.SET:
        key = require_argument(operands, 1, "key")
        value = parse_value_text(require_raw_argument(operands, 2, "value"))
        pool.set(name, key, value)
    elif function is ExtensionFunction.ERASE:
        pool.erase(name, require_argument(operands, 1, "key"))
    elif function is ExtensionFunction.EXISTS:
        return BooleanValue(pool.exists(name, require_argument(operands, 1, "key")))
    return VoidValue()


def _protocol_failure(error: ExtensionProtocolError) -> ExtensionResult:
    code = protocol_error_code(error)
    _LOGGER.warning(
        "extension_call_rejected",
        code=int(code),
        argument=error.argument,
        reason=str(error),
    )
    return ExtensionResult(code, StringValue(error.argument))
