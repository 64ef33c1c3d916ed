"""In-memory storage entity.

A storage is a named key/value map. Lifecycle and key access go through
the storage pool, which owns every open storage exclusively.
"""

from __future__ import annotations

from core.value_types import Value


class Storage:
    """Named, resident key/value map.

    Attributes:
        name: Storage name, fixed for the storage lifetime.
        entries: Current key to value mapping.
    """

    def __init__(self, name: str, entries: dict[str, Value] | None = None) -> None:
        self._name = name
        self.entries: dict[str, Value] = {} if entries is None else entries

    @classmethod
    def new(cls, name: str) -> "Storage":
        """Return an empty storage bound to name."""
        return cls(name)

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"Storage(name={self._name!r}, entries={len(self.entries)})"
