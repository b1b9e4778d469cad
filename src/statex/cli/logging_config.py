"""Logging setup for the command line interface."""

import logging
from logging.config import dictConfig


def configure_logging(level: int = logging.WARNING) -> None:
    """Send log records of the statex loggers to stderr."""
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"}
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "level": level,
                    "stream": "ext://sys.stderr",
                }
            },
            "loggers": {
                "statex": {"handlers": ["console"], "level": level, "propagate": False},
            },
        }
    )
