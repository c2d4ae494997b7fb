"""Stable constants shared across explorer components."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Final

# Schema versions for persisted contracts.
CONFIG_SCHEMA_VERSION: Final[int] = 1

# Document fields the migration chain reads and writes.
DOCUMENT_VERSION_FIELD: Final[str] = "version"
DOCUMENT_TYPE_FIELD: Final[str] = "type"

# Default runtime paths (relative to the config file unless overridden).
DEFAULT_CONFIG_FILE: Final[str] = "explorer.toml"
LOG_DIR: Final[PurePosixPath] = PurePosixPath("logs")

ENV_PREFIX: Final[str] = "EXPLORER_"

__all__ = [
    "CONFIG_SCHEMA_VERSION",
    "DEFAULT_CONFIG_FILE",
    "DOCUMENT_TYPE_FIELD",
    "DOCUMENT_VERSION_FIELD",
    "ENV_PREFIX",
    "LOG_DIR",
]
