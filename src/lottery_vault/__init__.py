"""Persistence and integrity layer for the lottery drawing game.

This package provides:
- Data models for the game state (cycles, draw results, prizes, config)
- A structural JSON schema and codec with stable field names
- Logical validation of decoded state
- A StateStore with atomic writes and a BackupCoordinator for safe restore
- LotteryStorageService, the single entry point used by application shells
"""
from importlib.metadata import PackageNotFoundError, version

from .backup import BackupCoordinator, BackupInfo
from .codec import decode_state, encode_state
from .config import StorageSettings
from .errors import (
    BackupNotFoundError,
    ConfigError,
    CycleNotCompletedError,
    NoDataToBackupError,
    StorageDecodeError,
    StorageEncodeError,
    StorageEnvironmentError,
    StorageError,
    StorageIOError,
)
from .models import (
    Config,
    Cycle,
    DrawResult,
    Prize,
    PrizeColor,
    RemainingDraws,
    State,
    create_default_state,
    create_initial_state,
    create_new_cycle,
    default_prizes,
)
from .service import LotteryStorageService
from .store import StateStore
from .validator import validate_state

try:
    __version__ = version("lottery-vault")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "BackupCoordinator",
    "BackupInfo",
    "BackupNotFoundError",
    "Config",
    "ConfigError",
    "Cycle",
    "CycleNotCompletedError",
    "DrawResult",
    "LotteryStorageService",
    "NoDataToBackupError",
    "Prize",
    "PrizeColor",
    "RemainingDraws",
    "State",
    "StateStore",
    "StorageDecodeError",
    "StorageEncodeError",
    "StorageEnvironmentError",
    "StorageError",
    "StorageIOError",
    "StorageSettings",
    "create_default_state",
    "create_initial_state",
    "create_new_cycle",
    "decode_state",
    "default_prizes",
    "encode_state",
    "validate_state",
]
