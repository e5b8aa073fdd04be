"""Mini README: Application-wide logging helpers for Budgetbook.

Structure:
    * configure_root_logger - one-off root logger setup with a shared format.
    * get_logger - factory returning module loggers after baseline setup.

Usage:
    Modules call ``get_logger(__name__)`` at import time and keep the result in
    a module-level ``LOGGER``. Entry points may call ``configure_root_logger``
    first with the level taken from settings; repeated calls are ignored so
    reloading modules never stacks handlers.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER_INITIALISED = False


def _coerce_level(level: Union[int, str]) -> int:
    """Translate level names such as ``"debug"`` into logging constants."""

    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown logging level: {level}")
    return resolved


def configure_root_logger(level: Optional[Union[int, str]] = None) -> None:
    """Attach a single formatted stream handler to the root logger.

    Later calls never add handlers, but an explicit ``level`` still adjusts
    the root level so entry points can apply settings after imports ran.
    """

    global _LOGGER_INITIALISED
    root_logger = logging.getLogger()
    if _LOGGER_INITIALISED:
        if level is not None:
            root_logger.setLevel(_coerce_level(level))
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel(_coerce_level(logging.INFO if level is None else level))
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger ensuring baseline configuration."""

    configure_root_logger()
    return logging.getLogger(name)
