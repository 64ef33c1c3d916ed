"""Runtime configuration model for arma-storage.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_LOG_LEVEL, DEFAULT_STORAGE_ROOT, SUPPORTED_LOG_LEVELS
from core.errors import ArmaStorageConfigError


@dataclass(frozen=True)
class StorageConfig:
    """Validated runtime configuration.

    Attributes:
        storage_root: Directory every storage file is persisted under.
        log_level: Minimum structured log level.
    """

    storage_root: Path
    log_level: str

    @classmethod
    def from_env(cls) -> "StorageConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ArmaStorageConfigError: If environment values are invalid.
        """
        root_value = os.getenv("ARMA_STORAGE_ROOT", str(DEFAULT_STORAGE_ROOT))
        log_level = _parse_log_level(os.getenv("ARMA_STORAGE_LOG_LEVEL", DEFAULT_LOG_LEVEL))
        return cls(
            storage_root=Path(root_value).expanduser().resolve(),
            log_level=log_level,
        )


def _parse_log_level(raw_value: str) -> str:
    """Parse the log level environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Upper-case level name.

    Raises:
        ArmaStorageConfigError: If the level name is unknown.
    """
    level = raw_value.strip().upper()
    if level not in SUPPORTED_LOG_LEVELS:
        raise ArmaStorageConfigError(
            "Invalid ARMA_STORAGE_LOG_LEVEL value: "
            f"expected one of {', '.join(SUPPORTED_LOG_LEVELS)}, got '{raw_value}'. "
            "Set ARMA_STORAGE_LOG_LEVEL to a supported level name."
        )
    return level
