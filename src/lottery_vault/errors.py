from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class StorageError(Exception):
    """Base exception for lottery data storage errors."""


class StorageEnvironmentError(StorageError):
    """Raised when the data directory cannot be determined or created."""


class StorageIOError(StorageError):
    """Raised when reading, writing or copying a data file fails."""

    def __init__(self, operation: str, path: Union[str, Path], cause: BaseException) -> None:
        self.operation = operation
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{operation} failed for {self.path}: {cause}")


class StorageDecodeError(StorageError):
    """Raised when stored bytes do not match the data schema."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path) if path is not None else None
        self.message = message
        where = f" in {self.path}" if self.path is not None else ""
        super().__init__(f"Data format error{where}, the file may be corrupted: {message}")


class StorageEncodeError(StorageError):
    """Raised when a state cannot be serialized."""


class NoDataToBackupError(StorageError):
    """Raised when a backup is requested but no data file exists yet."""


class BackupNotFoundError(StorageError):
    """Raised when a restore candidate file does not exist."""


class CycleNotCompletedError(Exception):
    """Raised when trying to archive a cycle that still has draws left."""


class ConfigError(Exception):
    """Raised when storage settings are invalid."""
