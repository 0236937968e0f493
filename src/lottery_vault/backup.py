from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Union

from .codec import decode_state
from .errors import BackupNotFoundError, NoDataToBackupError, StorageIOError
from .paths import BACKUP_PREFIX, backup_file_name, parse_backup_timestamp
from .store import StateStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class BackupInfo:
    path: Path
    created_at: datetime


class BackupCoordinator:
    """Copies the live data file to timestamped backups and restores from them.

    Restore never touches the live file until the candidate has been decoded
    successfully, so a bad backup cannot replace good data. Only structure is
    checked on restore; a decodable but logically inconsistent backup is
    restored as-is.

    Two backups taken within the same second share a name and the later one
    wins.
    """

    def __init__(
        self,
        store: StateStore,
        backup_prefix: str = BACKUP_PREFIX,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.backup_prefix = backup_prefix
        self._clock = clock

    @property
    def backup_dir(self) -> Path:
        return self.store.root_dir

    def backup(self) -> Path:
        return self.create_backup().path

    def create_backup(self) -> BackupInfo:
        """Copy the live file byte-for-byte next to itself."""
        if not self.store.exists():
            raise NoDataToBackupError(f"No data file found at {self.store.data_path}; nothing to back up")
        now = self._clock()
        dest = self.backup_dir / backup_file_name(self.backup_prefix, now)
        try:
            shutil.copyfile(self.store.data_path, dest)
        except OSError as e:
            raise StorageIOError("backup", dest, e) from e
        logger.info("Backed up lottery data to %s", dest)
        return BackupInfo(path=dest, created_at=now)

    def restore(self, candidate: Union[str, Path]) -> None:
        path = Path(candidate)
        if not path.exists():
            raise BackupNotFoundError(f"Backup file does not exist: {path}")
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise StorageIOError("read backup", path, e) from e

        # Raises StorageDecodeError before anything is written
        decode_state(raw, source=path)

        # Write the exact bytes that were checked, not a re-read of the file
        self.store.write_bytes(raw)
        logger.info("Restored lottery data from %s", path)

    def list_backups(self) -> List[BackupInfo]:
        """Backups in the data directory, newest first."""
        found: List[BackupInfo] = []
        for p in self.backup_dir.glob(f"{self.backup_prefix}*.json"):
            created: Optional[datetime] = parse_backup_timestamp(p.name, self.backup_prefix)
            if created is None:
                logger.debug("Ignoring file with unexpected backup name: %s", p)
                continue
            found.append(BackupInfo(path=p, created_at=created))
        found.sort(key=lambda b: (b.created_at, b.path.name), reverse=True)
        return found
