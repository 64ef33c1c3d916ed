"""Core constants used across arma-storage modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

PACKAGE_VERSION = "0.1.0"
PRODUCT_NAME = "Arma Storage"
DEFAULT_STORAGE_ROOT = Path(".")
DEFAULT_LOG_LEVEL = "WARNING"
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
STORAGE_FILE_MAGIC = b"ASTG"
STORAGE_FORMAT_VERSION = 1
MAX_VALUE_DEPTH = 256
