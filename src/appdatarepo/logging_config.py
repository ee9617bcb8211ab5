"""Logging configuration for the appdatarepo command-line tools.

Library modules only create loggers; call :func:`setup_logging` once from
an entry point.
"""

from __future__ import annotations

import logging
import logging.config
import os

__all__ = ["setup_logging", "level_for_verbosity"]

LOG_LEVEL_ENV = "APPDATAREPO_LOG_LEVEL"

_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def level_for_verbosity(verbosity: int) -> int:
    """Map a -v count to a logging level; APPDATAREPO_LOG_LEVEL wins when set."""
    env_level = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if env_level:
        level = logging.getLevelName(env_level)
        if isinstance(level, int):
            return level
    return _LEVELS[max(0, min(verbosity, len(_LEVELS) - 1))]


def setup_logging(verbosity: int = 0) -> None:
    """Send appdatarepo log records to stderr at the level chosen by ``verbosity``."""
    level = level_for_verbosity(verbosity)
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "simple": {
                    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "simple",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "appdatarepo": {
                    "handlers": ["console"],
                    "level": logging.getLevelName(level),
                    "propagate": False,
                },
            },
        }
    )
