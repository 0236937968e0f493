from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable, List, Optional, Union

from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_incrementing

from .backup import BackupCoordinator, BackupInfo
from .codec import decode_state
from .config import StorageSettings
from .errors import StorageDecodeError, StorageError, StorageIOError
from .models import State
from .paths import default_data_root
from .store import StateStore
from .validator import validate_state

logger = logging.getLogger(__name__)


class LotteryStorageService:
    """Entry point used by the application shell for all persistence work.

    The five boundary operations (``save_lottery_data``, ``load_lottery_data``,
    ``backup_data``, ``restore_from_backup`` and ``validate_data``) run one at
    a time per service instance. Other processes writing the same file are not
    coordinated with; the last write wins.
    """

    def __init__(
        self,
        root_dir: Optional[Path] = None,
        settings: Optional[StorageSettings] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings or StorageSettings()
        root = root_dir or self.settings.data_dir or default_data_root(self.settings.app_dir_name)
        self.store = StateStore(root, data_file_name=self.settings.data_file_name)
        self.backups = BackupCoordinator(self.store, backup_prefix=self.settings.backup_prefix)
        self.lock = threading.RLock()
        self._sleep = sleep

    @property
    def data_path(self) -> Path:
        return self.store.data_path

    # Boundary operations

    def save_lottery_data(self, state: State) -> None:
        with self.lock:
            self.store.save(state)

    def load_lottery_data(self) -> State:
        with self.lock:
            return self.store.load()

    def backup_data(self) -> str:
        with self.lock:
            return str(self.backups.backup())

    def restore_from_backup(self, backup_path: Union[str, Path]) -> None:
        with self.lock:
            self.backups.restore(backup_path)

    def validate_data(self) -> bool:
        """True when the data file is absent or decodes into a consistent state.

        Unreadable and undecodable files are reported as False, not raised.
        """
        with self.lock:
            if not self.store.exists():
                return True
            try:
                state = decode_state(self.store.read_bytes(), source=self.data_path)
            except (StorageIOError, StorageDecodeError) as e:
                logger.warning("Data file failed validation: %s", e)
                return False
            return validate_state(state)

    # Conveniences for the application shell

    def _save_retrying(self) -> Retrying:
        delay = self.settings.retry_delay
        return Retrying(
            stop=stop_after_attempt(self.settings.save_retries),
            wait=wait_incrementing(start=delay, increment=delay),
            retry=retry_if_exception_type(StorageIOError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=self._sleep,
            reraise=True,
        )

    def save(self, state: State) -> None:
        """Save, retrying write failures with a linearly growing pause."""
        self._save_retrying()(self.save_lottery_data, state)

    def safe_load(self) -> State:
        """Load, logging a warning first if the stored data looks inconsistent."""
        with self.lock:
            if not self.validate_data():
                logger.warning("Data file %s failed validation; loading it anyway", self.data_path)
            return self.load_lottery_data()

    def create_backup(self) -> BackupInfo:
        with self.lock:
            return self.backups.create_backup()

    def auto_save(self, state: State) -> bool:
        try:
            self.save(state)
        except StorageError:
            logger.exception("Auto-save failed")
            return False
        logger.debug("Auto-save succeeded")
        return True

    def emergency_restore(self, backup_path: Optional[Union[str, Path]] = None) -> Optional[State]:
        """Restore from ``backup_path`` and return the restored state.

        Returns None when no path is given or anything goes wrong.
        """
        if backup_path is None:
            return None
        try:
            with self.lock:
                self.restore_from_backup(backup_path)
                return self.load_lottery_data()
        except StorageError:
            logger.exception("Emergency restore from %s failed", backup_path)
            return None

    def list_backups(self) -> List[BackupInfo]:
        with self.lock:
            return self.backups.list_backups()
