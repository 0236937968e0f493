from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from platformdirs import user_documents_dir

from .errors import StorageEnvironmentError

logger = logging.getLogger(__name__)

APP_DIR_NAME = "lottery-game"
DATA_FILE_NAME = "data.json"
BACKUP_PREFIX = "data_backup_"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

# Environment override for the data directory (tests and portable installs)
ENV_DATA_DIR = "LOTTERY_DATA_DIR"


def default_data_root(app_dir_name: str = APP_DIR_NAME) -> Path:
    """Return the directory holding the data file.

    ``$LOTTERY_DATA_DIR`` when set, otherwise ``<user documents>/<app_dir_name>``.
    """
    override = os.getenv(ENV_DATA_DIR)
    if override:
        return Path(override).expanduser()
    try:
        documents = user_documents_dir()
    except Exception as e:  # platformdirs may fail on unusual platforms
        raise StorageEnvironmentError(f"Cannot determine the user documents directory: {e}") from e
    if not documents:
        raise StorageEnvironmentError("Cannot determine the user documents directory")
    return Path(documents) / app_dir_name


def ensure_dir(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageEnvironmentError(f"Failed to create data directory {path}: {e}") from e
    return path


def backup_file_name(prefix: str = BACKUP_PREFIX, now: Optional[datetime] = None) -> str:
    """Backup names carry a UTC timestamp with one-second resolution."""
    stamp = (now or datetime.now(timezone.utc)).strftime(BACKUP_TIMESTAMP_FORMAT)
    return f"{prefix}{stamp}.json"


def parse_backup_timestamp(name: str, prefix: str = BACKUP_PREFIX) -> Optional[datetime]:
    if not (name.startswith(prefix) and name.endswith(".json")):
        return None
    stamp = name[len(prefix):-len(".json")]
    try:
        return datetime.strptime(stamp, BACKUP_TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return None
