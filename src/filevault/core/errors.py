"""Exceptions raised by the vault core and storage layers.

The core never terminates the process. Every failure surfaces as one of
these exceptions; only the CLI entry point maps them to exit codes.
"""

from __future__ import annotations

__all__ = [
    "ContainerCorruptError",
    "ContainerError",
    "ContainerMissingError",
    "ContainerReadError",
    "ContainerWriteError",
    "DuplicateKeyError",
    "InvalidFileNameError",
    "RecordNotFoundError",
    "VaultError",
]


class VaultError(Exception):
    """Base exception for vault operations."""

    pass


class DuplicateKeyError(VaultError):
    """Raised when a record with the same name and extension already exists."""

    def __init__(self, name: str, extension: str) -> None:
        super().__init__(f"file already exists: {name}.{extension}")
        self.name = name
        self.extension = extension


class RecordNotFoundError(VaultError):
    """Raised when no record matches the requested name and extension."""

    def __init__(self, name: str, extension: str) -> None:
        super().__init__(f"file does not exist inside vault: {name}.{extension}")
        self.name = name
        self.extension = extension


class InvalidFileNameError(VaultError):
    """Raised when a path has no usable stem or extension."""

    pass


class ContainerError(VaultError):
    """Base exception for container load/save failures."""

    pass


class ContainerMissingError(ContainerError):
    """Raised when there is no container file at the expected path."""

    pass


class ContainerCorruptError(ContainerError):
    """Raised when the container exists but cannot be decoded."""

    pass


class ContainerReadError(ContainerError):
    """Raised when reading the container fails for a reason other than absence."""

    pass


class ContainerWriteError(ContainerError):
    """Raised when the container cannot be written."""

    pass
