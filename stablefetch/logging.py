"""
Logging setup.

Every module logs through ``from loguru import logger``. Applications call
:func:`setup_logging` once to replace loguru's default sink.
"""

from __future__ import annotations

import sys

from loguru import logger

from stablefetch.config import Settings, get_settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def setup_logging(settings: Settings | None = None, sink=sys.stderr) -> int:
    """
    Route ``stablefetch`` logs to a single sink.

    Args:
        settings: the level is taken from ``settings.log_level``
                  (environment settings if ``None``)
        sink: any loguru sink, stderr by default

    Returns:
        loguru sink id
    """
    settings = settings or get_settings()
    logger.remove()
    return logger.add(sink, level=settings.log_level, format=LOG_FORMAT)
