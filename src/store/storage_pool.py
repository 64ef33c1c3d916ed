"""Registry of open storages and their persistence.

This module owns every resident storage and mediates all lifecycle and
key operations. A storage name is either closed or open; only open names
accept read, write, and key access. Mutating operations hold the pool
lock exclusively, observing operations share it.
"""

from __future__ import annotations

from pathlib import Path

from core.config import StorageConfig
from core.errors import (
    StorageDeserializeError,
    StorageInvalidNameError,
    StorageIsClosedError,
    StorageIsOpenError,
    StorageMissingKeyError,
    StorageSerializeError,
)
from core.logging_config import get_logger
from core.rw_lock import ReadWriteLock
from core.value_types import Value
from store.storage import Storage
from store.storage_codec import decode_entries, encode_entries

_LOGGER = get_logger(__name__)
_FORBIDDEN_NAME_CHARACTERS = ("/", "\\", "\x00")


class StoragePool:
    """Open storages keyed by name plus the directory they persist under."""

    def __init__(self, root: Path) -> None:
        """Initialize an empty pool.

        Args:
            root: Directory holding one backing file per storage name.
        """
        self._root = Path(root)
        self._storages: dict[str, Storage] = {}
        self._lock = ReadWriteLock()

    @classmethod
    def from_config(cls, config: StorageConfig) -> "StoragePool":
        """Build a pool rooted at the configured storage directory."""
        return cls(config.storage_root)

    @property
    def root(self) -> Path:
        return self._root

    def storage_path(self, name: str) -> Path:
        """Return the backing file path for a storage name."""
        return self._root / name

    def open(self, name: str) -> None:
        """Make an empty storage resident under name.

        Args:
            name: Storage name; must be a single plain path component.

        Raises:
            StorageInvalidNameError: If the name could escape the root.
            StorageIsOpenError: If the name is already open.
        """
        _validate_storage_name(name)
        with self._lock.write_locked():
            if name in self._storages:
                raise StorageIsOpenError(name)
            self._storages[name] = Storage.new(name)
        _LOGGER.info("storage_opened", storage=name, path=str(self.storage_path(name)))

    def close(self, name: str) -> None:
        """Drop a resident storage, discarding unsaved changes.

        Raises:
            StorageIsClosedError: If the name is not open.
        """
        with self._lock.write_locked():
            if name not in self._storages:
                raise StorageIsClosedError(name)
            del self._storages[name]
        _LOGGER.info("storage_closed", storage=name, path=str(self.storage_path(name)))

    def read(self, name: str) -> None:
        """Replace a storage's entries with its backing file content.

        Raises:
            StorageIsClosedError: If the name is not open.
            StorageDeserializeError: If the file is missing, unreadable, or malformed.
        """
        storage_path = self.storage_path(name)
        with self._lock.write_locked():
            storage = self._require_open(name)
            try:
                payload = storage_path.read_bytes()
            except OSError as error:
                raise StorageDeserializeError(
                    f"Could not read storage '{name}' at {storage_path}: {error.strerror or error}"
                ) from error
            try:
                entries = decode_entries(payload)
            except ValueError as error:
                raise StorageDeserializeError(
                    f"Could not deserialize storage '{name}' at {storage_path}: {error}"
                ) from error
            storage.entries = entries
        _LOGGER.info(
            "storage_read",
            storage=name,
            path=str(storage_path),
            entry_count=len(entries),
        )

    def write(self, name: str) -> None:
        """Overwrite a storage's backing file with its current entries.

        Raises:
            StorageIsClosedError: If the name is not open.
            StorageSerializeError: If encoding or the file write fails.
        """
        storage_path = self.storage_path(name)
        with self._lock.write_locked():
            storage = self._require_open(name)
            try:
                payload = encode_entries(storage.entries)
            except ValueError as error:
                raise StorageSerializeError(
                    f"Could not serialize storage '{name}': {error}"
                ) from error
            try:
                storage_path.write_bytes(payload)
            except OSError as error:
                raise StorageSerializeError(
                    f"Could not write storage '{name}' at {storage_path}: {error.strerror or error}"
                ) from error
            entry_count = len(storage.entries)
        _LOGGER.info(
            "storage_written",
            storage=name,
            path=str(storage_path),
            entry_count=entry_count,
            byte_count=len(payload),
        )

    def get(self, name: str, key: str) -> Value:
        """Return the value stored at key.

        Raises:
            StorageIsClosedError: If the name is not open.
            StorageMissingKeyError: If the key is absent.
        """
        with self._lock.read_locked():
            entries = self._require_open(name).entries
            if key not in entries:
                raise StorageMissingKeyError(key)
            value = entries[key]
        _LOGGER.debug("storage_key_read", storage=name, key=key)
        return value

    def set(self, name: str, key: str, value: Value) -> None:
        """Insert or overwrite the value at key without touching the file.

        Raises:
            StorageIsClosedError: If the name is not open.
        """
        with self._lock.write_locked():
            self._require_open(name).entries[key] = value
        _LOGGER.debug("storage_key_set", storage=name, key=key)

    def erase(self, name: str, key: str) -> None:
        """Remove the entry at key; absent keys are not an error.

        Raises:
            StorageIsClosedError: If the name is not open.
        """
        with self._lock.write_locked():
            removed = self._require_open(name).entries.pop(key, None) is not None
        _LOGGER.debug("storage_key_erased", storage=name, key=key, removed=removed)

    def exists(self, name: str, key: str) -> bool:
        """Return whether key is present in an open storage.

        Raises:
            StorageIsClosedError: If the name is not open.
        """
        with self._lock.read_locked():
            return key in self._require_open(name).entries

    def keys(self, name: str) -> frozenset[str]:
        """Return the keys of an open storage.

        Raises:
            StorageIsClosedError: If the name is not open.
        """
        with self._lock.read_locked():
            return frozenset(self._require_open(name).entries)

    def list_storages(self) -> frozenset[str]:
        """Return the names of all currently open storages."""
        with self._lock.read_locked():
            return frozenset(self._storages)

    def _require_open(self, name: str) -> Storage:
        storage = self._storages.get(name)
        if storage is None:
            raise StorageIsClosedError(name)
        return storage


def _validate_storage_name(name: str) -> None:
    """Reject names that are not a single plain path component.

    Raises:
        StorageInvalidNameError: If the name is empty, a dot entry, or has separators.
    """
    if name in ("", ".", ".."):
        raise StorageInvalidNameError(f"Invalid storage name '{name}'")
    for character in _FORBIDDEN_NAME_CHARACTERS:
        if character in name:
            raise StorageInvalidNameError(
                f"Invalid storage name '{name}': path separators and NUL are not allowed"
            )
