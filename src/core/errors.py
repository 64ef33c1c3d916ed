"""arma-storage exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Storage errors are raised by the pool; protocol errors by the call adapter.
"""

from __future__ import annotations


class ArmaStorageError(Exception):
    """Base exception for all arma-storage failures."""


class ArmaStorageConfigError(ArmaStorageError):
    """Raised for invalid runtime configuration."""


class StorageError(ArmaStorageError):
    """Base class for recoverable storage pool failures."""


class StorageIsOpenError(StorageError):
    """Raised when opening a storage that is already open."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Storage '{name}' is already open")
        self.name = name


class StorageIsClosedError(StorageError):
    """Raised when an operation targets a storage that is not open."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Storage '{name}' is not open")
        self.name = name


class StorageMissingKeyError(StorageError):
    """Raised when reading a key the storage does not hold."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Storage has no key '{key}'")
        self.key = key


class StorageDeserializeError(StorageError):
    """Raised when a backing file is missing, unreadable, or malformed."""


class StorageSerializeError(StorageError):
    """Raised when a storage cannot be encoded or persisted."""


class StorageInvalidNameError(StorageError):
    """Raised when a storage name is not a single plain path component."""


class ExtensionProtocolError(ArmaStorageError):
    """Base class for call adapter failures raised before the pool is touched.

    Attributes:
        argument: Name of the offending argument or function.
    """

    def __init__(self, argument: str, message: str) -> None:
        super().__init__(message)
        self.argument = argument


class InvalidInputError(ExtensionProtocolError):
    """Raised when incoming text is not printable ASCII."""


class UnknownFunctionError(ExtensionProtocolError):
    """Raised for a function name the adapter does not know."""


class MissingArgumentError(ExtensionProtocolError):
    """Raised when a required argument is absent."""


class EmptyArgumentError(ExtensionProtocolError):
    """Raised when a required argument is present but empty."""


class InvalidValueError(ExtensionProtocolError):
    """Raised when a textual value cannot be decoded."""
