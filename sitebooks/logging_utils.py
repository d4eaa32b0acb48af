"""Mini README: Application-wide logging helpers for sitebooks.

Structure:
    * get_logger - factory returning module loggers with baseline configuration.
    * configure_root_logger - one-shot root configuration with an optional level.

Usage:
    Modules call ``get_logger(__name__)`` at import time. The CLI calls
    ``configure_root_logger`` with the level from settings before serving so the
    operator-chosen verbosity wins over the default applied on first import.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER_INITIALISED = False
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"


def _resolve_level(level: Union[int, str]) -> int:
    """Accept numeric levels or names such as ``"debug"``."""

    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def configure_root_logger(level: Union[int, str] = logging.INFO) -> None:
    """Attach the sitebooks handler once; later calls only adjust the level."""

    global _LOGGER_INITIALISED
    root_logger = logging.getLogger()
    root_logger.setLevel(_resolve_level(level))
    if _LOGGER_INITIALISED:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger, configuring the root on first use."""

    if not _LOGGER_INITIALISED:
        configure_root_logger()
    return logging.getLogger(name)
