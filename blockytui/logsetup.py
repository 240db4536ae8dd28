"""File logging for the application."""

from __future__ import annotations

import logging
import os
from pathlib import Path

PROJECT_NAME = "BLOCKY_TUI"
DATA_ENV = f"{PROJECT_NAME}_DATA"
LOG_ENV = f"{PROJECT_NAME}_LOGLEVEL"
LOG_FILE = "blocky-tui.log"
DEFAULT_FILTER = "blocky_tui=info"
LOGGER_NAME = "blockytui"

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL + 10,
}

log = logging.getLogger(__name__)


def get_data_dir() -> Path:
    """Return the data directory: the value of BLOCKY_TUI_DATA, else ./.data."""
    folder = os.environ.get(DATA_ENV)
    if folder:
        return Path(folder)
    return Path(".") / ".data"


def _level_from(spec: str) -> int:
    for directive in spec.split(","):
        name = directive.rpartition("=")[2].strip().lower()
        if name in _LEVELS:
            return _LEVELS[name]
    return logging.INFO


def initialize_logging() -> Path:
    """Send the package's log records to a fresh log file in the data directory.

    The level comes from BLOCKY_TUI_LOGLEVEL (``level`` or ``target=level``),
    defaulting to info. Returns the path of the log file.
    """
    directory = get_data_dir()
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / LOG_FILE

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s %(filename)s:%(lineno)d: %(message)s"
        )
    )
    logger.addHandler(handler)
    logger.setLevel(_level_from(os.environ.get(LOG_ENV, DEFAULT_FILTER)))
    logger.propagate = False
    log.debug("initialized logging")
    return log_path