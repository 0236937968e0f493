from __future__ import annotations

import logging
import sys
from typing import IO, Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s: %(message)s"


def configure_logging(level: Union[int, str] = logging.INFO, stream: Optional[IO[str]] = None) -> None:
    """Send all records to one stream handler on the root logger.

    The ``lottery-vault`` CLI passes ``sys.stderr`` so that stdout carries only
    command output such as the JSON from ``show`` and ``stats``. Library hosts
    that call this without a stream get stdout.

    ``level`` may be a number or a level name such as ``"debug"``.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(level)
    # Repeated CLI invocations in one process keep a single handler
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
