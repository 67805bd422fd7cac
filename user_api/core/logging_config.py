"""
Logging configuration.

One dictConfig dictionary drives every logger of the service: records go to
stdout and to a rotating service log, errors are also kept in a separate
rotating file. ``LOG_LEVEL`` and ``LOG_DIR`` come from the environment.
"""

import copy
import logging
import logging.config
import os
from pathlib import Path
from typing import Any

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Handlers and loggers whose level follows the configured LOG_LEVEL
LEVELLED_HANDLERS = ("console", "service_file")
LEVELLED_LOGGERS = ("user_api", "uvicorn")


def _rotating_file(filename: str, level: str) -> dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(LOG_DIR / filename),
        "maxBytes": LOG_FILE_MAX_BYTES,
        "backupCount": LOG_FILE_BACKUPS,
        "encoding": "utf8",
        "delay": True,
    }


LOGGING_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            "datefmt": DATE_FORMAT,
        },
        "detailed": {
            "format": "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d [pid %(process)d]: %(message)s",
            "datefmt": DATE_FORMAT,
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": LOG_LEVEL,
            "formatter": "standard",
            "stream": "ext://sys.stdout",
        },
        "service_file": _rotating_file("user_api.log", LOG_LEVEL),
        "error_file": _rotating_file("error.log", "ERROR"),
    },
    "loggers": {
        "user_api": {
            "level": LOG_LEVEL,
            "handlers": ["console", "service_file", "error_file"],
            "propagate": False,
        },
        "uvicorn": {
            "level": LOG_LEVEL,
            "handlers": ["console", "service_file"],
            "propagate": False,
        },
        # INFO would echo every SQL statement
        "sqlalchemy.engine": {
            "level": "WARNING",
            "handlers": ["console", "service_file"],
            "propagate": False,
        },
    },
    "root": {
        "level": LOG_LEVEL,
        "handlers": ["console"],
    },
}


def build_logging_config(level: str | None = None) -> dict[str, Any]:
    """
    Return a copy of ``LOGGING_CONFIG`` using ``level`` for the service loggers.

    Args:
        level: Log level name; ``None`` keeps the environment's ``LOG_LEVEL``

    Returns:
        A dictConfig-compatible dictionary
    """
    config = copy.deepcopy(LOGGING_CONFIG)
    if level is None:
        return config

    level = level.upper()
    for name in LEVELLED_HANDLERS:
        config["handlers"][name]["level"] = level
    for name in LEVELLED_LOGGERS:
        config["loggers"][name]["level"] = level
    config["root"]["level"] = level
    return config


def setup_logging(config: dict[str, Any] | None = None) -> None:
    """
    Apply ``config`` (default: ``LOGGING_CONFIG``) to the logging system.

    Directories of file handlers are created first, since the rotating
    handlers do not create them.
    """
    config = config if config is not None else LOGGING_CONFIG

    for handler in config["handlers"].values():
        filename = handler.get("filename")
        if filename:
            Path(filename).parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(config)
    logging.getLogger(__name__).debug(f"Logging configured at level {config['root']['level']}")
