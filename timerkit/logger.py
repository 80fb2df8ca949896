"""Logging setup for timerkit.

Library modules only ever call ``logging.getLogger(__name__)``.  The
``timerkit`` logger carries a ``NullHandler`` so importing the package
prints nothing; applications call :func:`configure_logging` once to get a
rotating log file (and optionally console output).
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "timerkit"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def configure_logging(
    level: int | str = logging.INFO,
    log_dir: Path | None = None,
    *,
    console: bool = False,
    max_bytes: int = 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    """Attach file/console handlers to the package logger.

    Safe to call repeatedly: handlers are named and only added once, but
    the level is always updated.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    fmt = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    if log_dir is not None:
        file_handler_name = f"{LOGGER_NAME}:file"
        if not any(h.get_name() == file_handler_name for h in logger.handlers):
            log_dir.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                filename=log_dir / f"{LOGGER_NAME}.log",
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            handler.setFormatter(fmt)
            handler.set_name(file_handler_name)
            logger.addHandler(handler)

    console_handler_name = f"{LOGGER_NAME}:console"
    if console and not any(h.get_name() == console_handler_name for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(fmt)
        handler.set_name(console_handler_name)
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(level)
    return logger
