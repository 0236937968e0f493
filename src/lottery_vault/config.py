from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError
from .paths import APP_DIR_NAME, BACKUP_PREFIX, DATA_FILE_NAME, ENV_DATA_DIR

logger = logging.getLogger(__name__)

ENV_LOG_LEVEL = "LOTTERY_LOG_LEVEL"

_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class StorageSettings(BaseModel):
    """Settings for where and how lottery data is stored.

    Loaded from an optional YAML file, e.g.::

        data_dir: ~/lottery
        save_retries: 5
        log_level: debug

    Environment variables override file values:
      - LOTTERY_DATA_DIR
      - LOTTERY_LOG_LEVEL
    """

    data_dir: Optional[Path] = Field(default=None, description="Data directory; platform documents dir when unset")
    app_dir_name: str = Field(default=APP_DIR_NAME, min_length=1)
    data_file_name: str = Field(default=DATA_FILE_NAME, min_length=1)
    backup_prefix: str = Field(default=BACKUP_PREFIX, min_length=1)
    save_retries: int = Field(default=3, ge=1, description="Attempts made by LotteryStorageService.save")
    retry_delay: float = Field(default=1.0, ge=0.0, description="Seconds; the n-th retry waits n times this")
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v: str) -> str:
        level = str(v).upper().strip()
        if level not in _LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("data_dir")
    @classmethod
    def expand_data_dir(cls, v: Optional[Path]) -> Optional[Path]:
        return Path(v).expanduser() if v is not None else None

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)

    @staticmethod
    def _load_yaml(path: Path) -> Dict[str, Any]:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping")
        return data

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "StorageSettings":
        data: Dict[str, Any] = {}
        if path is not None:
            if path.exists():
                try:
                    data = cls._load_yaml(path)
                except yaml.YAMLError as e:
                    raise ConfigError(f"Invalid YAML in {path}: {e}") from e
                logger.info("Loaded storage settings from %s", path)
            else:
                logger.warning("Settings file not found: %s", path)

        env_dir = os.getenv(ENV_DATA_DIR)
        if env_dir:
            data["data_dir"] = env_dir
        env_level = os.getenv(ENV_LOG_LEVEL)
        if env_level:
            data["log_level"] = env_level

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(str(e)) from e
