"""Logging configuration for the pagecraft command line."""

from __future__ import annotations

import logging
import logging.config

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {"format": "%(asctime)s [%(levelname)s] %(name)s - %(message)s"},
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": logging.DEBUG,
            "formatter": "default",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "pagecraft": {
            "handlers": ["console"],
            "level": logging.INFO,
            "propagate": True,
        }
    },
}


def setup(*, verbose: bool = False) -> None:
    """Install the console handler; ``verbose`` lowers the level to DEBUG."""
    logging.config.dictConfig(LOGGING_CONFIG)
    if verbose:
        logger.setLevel(logging.DEBUG)


logger = logging.getLogger("pagecraft")
