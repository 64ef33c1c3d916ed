"""Host-facing entry points.

These mirror the three calls the engine makes into the plugin: a version
query at load time, a plain call, and a call with an argument vector.
They share one storage pool created on first use for the process lifetime.
"""

from __future__ import annotations

import threading
from typing import Sequence

from core.config import StorageConfig
from core.constants import PACKAGE_VERSION, PRODUCT_NAME
from core.errors import ArmaStorageConfigError
from core.logging_config import configure_logging, get_logger
from core.value_rendering import render_text
from core.value_types import StringValue
from extension.dispatch import ExtensionResult, call_function, call_function_args
from extension.error_codes import ErrorCode
from extension.response_buffer import write_str_to_buffer
from store.storage_pool import StoragePool

_LOGGER = get_logger(__name__)
_POOL_LOCK = threading.Lock()
_DEFAULT_POOL: StoragePool | None = None


def get_default_pool() -> StoragePool:
    """Return the process-wide pool, creating it from the environment once.

    Raises:
        ArmaStorageConfigError: If the environment settings are invalid.
    """
    global _DEFAULT_POOL
    with _POOL_LOCK:
        if _DEFAULT_POOL is None:
            _DEFAULT_POOL = StoragePool.from_config(StorageConfig.from_env())
        return _DEFAULT_POOL


def version_text() -> str:
    """Return the product version string reported at load time."""
    return f"{PRODUCT_NAME} {PACKAGE_VERSION}"


def rv_extension_version(buffer: bytearray | memoryview) -> None:
    """Initialize logging and write the version string.

    Args:
        buffer: Host output buffer.
    """
    try:
        config = StorageConfig.from_env()
    except ArmaStorageConfigError as error:
        configure_logging()
        _LOGGER.error("extension_config_invalid", error=str(error))
    else:
        configure_logging(config.log_level)
        _LOGGER.info("extension_loaded", version=PACKAGE_VERSION, root=str(config.storage_root))
    write_str_to_buffer(version_text(), buffer)


def rv_extension(buffer: bytearray | memoryview, function: str) -> int:
    """Handle a plain call such as ``errorCodes``.

    Args:
        buffer: Host output buffer.
        function: Function name.

    Returns:
        Numeric status code.
    """
    try:
        pool = get_default_pool()
    except ArmaStorageConfigError as error:
        return _respond(buffer, _config_failure(error))
    return _respond(buffer, call_function(pool, function))


def rv_extension_args(
    buffer: bytearray | memoryview,
    function: str,
    args: Sequence[str],
) -> int:
    """Handle a call carrying an argument vector.

    Args:
        buffer: Host output buffer.
        function: Function name, empty for the alternative syntax.
        args: Stringified arguments.

    Returns:
        Numeric status code.
    """
    try:
        pool = get_default_pool()
    except ArmaStorageConfigError as error:
        return _respond(buffer, _config_failure(error))
    return _respond(buffer, call_function_args(pool, function, args))


def _respond(buffer: bytearray | memoryview, result: ExtensionResult) -> int:
    if write_str_to_buffer(render_text(result.value), buffer) is None:
        _LOGGER.error("extension_response_unwritable", code=int(result.code))
        return int(ErrorCode.INVALID_OUTPUT)
    return int(result.code)


def _config_failure(error: ArmaStorageConfigError) -> ExtensionResult:
    _LOGGER.error("extension_config_invalid", error=str(error))
    return ExtensionResult(ErrorCode.STORAGE_ERROR, StringValue(f"Error: {error}"))
