from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .codec import decode_state, encode_state
from .errors import StorageDecodeError, StorageIOError
from .fs import atomic_write_bytes
from .models import State, create_default_state
from .paths import DATA_FILE_NAME, default_data_root, ensure_dir

logger = logging.getLogger(__name__)


class StateStore:
    """Reads and writes the single lottery data file.

    The store only moves bytes and (de)serializes them; it does not judge
    whether a state makes sense. The data directory is created on
    construction, the data file only on the first save.
    """

    def __init__(self, root_dir: Optional[Path] = None, data_file_name: str = DATA_FILE_NAME) -> None:
        self.root_dir = ensure_dir(Path(root_dir) if root_dir is not None else default_data_root())
        self.data_path = self.root_dir / data_file_name

    def exists(self) -> bool:
        return self.data_path.exists()

    def load(self) -> State:
        """Load the state, or the default state when nothing was saved yet."""
        if not self.exists():
            logger.info("Data file %s does not exist; returning default state", self.data_path)
            return create_default_state()
        raw = self.read_bytes()
        try:
            state = decode_state(raw, source=self.data_path)
        except StorageDecodeError:
            logger.error("Failed to decode data file %s", self.data_path)
            raise
        logger.info("Loaded lottery data from %s", self.data_path)
        return state

    def save(self, state: State) -> Path:
        text = encode_state(state)
        self.write_bytes(text.encode("utf-8"))
        logger.info("Saved lottery data to %s", self.data_path)
        return self.data_path

    def read_bytes(self) -> bytes:
        try:
            return self.data_path.read_bytes()
        except OSError as e:
            raise StorageIOError("read", self.data_path, e) from e

    def write_bytes(self, data: bytes) -> None:
        """Replace the data file contents atomically."""
        try:
            atomic_write_bytes(self.data_path, data)
        except OSError as e:
            raise StorageIOError("write", self.data_path, e) from e
