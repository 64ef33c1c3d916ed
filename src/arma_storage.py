"""Public SDK surface for arma-storage.

This module provides a stable import path for embedding code.
It re-exports the storage pool, the value model, and the host entry points.
"""

from __future__ import annotations

from core.config import StorageConfig
from core.constants import PACKAGE_VERSION
from core.errors import (
    ArmaStorageError,
    StorageDeserializeError,
    StorageError,
    StorageInvalidNameError,
    StorageIsClosedError,
    StorageIsOpenError,
    StorageMissingKeyError,
    StorageSerializeError,
)
from core.value_rendering import render_text
from core.value_types import (
    ArrayValue,
    BooleanValue,
    HandleKind,
    HandleValue,
    NumberValue,
    Side,
    SideValue,
    StringValue,
    Value,
    VoidValue,
)
from extension.entrypoints import rv_extension, rv_extension_args, rv_extension_version
from store.storage_pool import StoragePool

__version__ = PACKAGE_VERSION

__all__ = [
    "ArmaStorageError",
    "ArrayValue",
    "BooleanValue",
    "HandleKind",
    "HandleValue",
    "NumberValue",
    "Side",
    "SideValue",
    "StorageConfig",
    "StorageDeserializeError",
    "StorageError",
    "StorageInvalidNameError",
    "StorageIsClosedError",
    "StorageIsOpenError",
    "StorageMissingKeyError",
    "StoragePool",
    "StorageSerializeError",
    "StringValue",
    "Value",
    "VoidValue",
    "__version__",
    "render_text",
    "rv_extension",
    "rv_extension_args",
    "rv_extension_version",
]
