from __future__ import annotations

import logging
from typing import Optional, Union

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: Union[int, str, None] = None) -> None:
    """Configure process-wide logging once.

    When ``level`` is omitted the ``LOG_LEVEL`` setting is used.
    """

    root = logging.getLogger()
    if root.handlers:
        # Logging already configured by the runtime (e.g. uvicorn or pytest)
        return

    if level is None:
        from ..config import get_settings

        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.setLevel(level)
    root.addHandler(handler)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)
