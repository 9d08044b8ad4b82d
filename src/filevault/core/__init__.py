"""Core components of the vault: records, store, errors and configuration."""

from .config import Config, ConfigError, load_config
from .errors import (
    ContainerCorruptError,
    ContainerError,
    ContainerMissingError,
    ContainerReadError,
    ContainerWriteError,
    DuplicateKeyError,
    InvalidFileNameError,
    RecordNotFoundError,
    VaultError,
)
from .store import FileRecord, FileStore, RecordKey

__all__ = [
    # Store
    "FileRecord",
    "FileStore",
    "RecordKey",
    # Errors
    "VaultError",
    "DuplicateKeyError",
    "RecordNotFoundError",
    "InvalidFileNameError",
    "ContainerError",
    "ContainerMissingError",
    "ContainerCorruptError",
    "ContainerReadError",
    "ContainerWriteError",
    # Config
    "Config",
    "ConfigError",
    "load_config",
]
