"""Structured logging configuration for Volumetrik.

Engine modules log under ``volumetrik.<module>``. Deduplicated curve warnings
(uninvertible ``x = g(y)`` curves and the like) go to ``volumetrik.diagnostics``,
which is opened down to DEBUG when ``VOLUMETRIK_DEBUG`` is set, independent of
the level chosen for the rest of the package.
"""

import logging
import sys
from datetime import datetime
from typing import Optional

from .config import DEBUG

ROOT_LOGGER = "volumetrik"
DIAGNOSTICS_LOGGER = f"{ROOT_LOGGER}.diagnostics"


class StructuredFormatter(logging.Formatter):
    """Formatter that outputs structured log entries with timestamp, module, level, and message."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        name = record.name
        if name.startswith(f"{ROOT_LOGGER}."):
            name = name[len(ROOT_LOGGER) + 1 :]
        message = f"{timestamp} [{record.levelname}] {name}: {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    debug: Optional[bool] = None,
) -> logging.Logger:
    """Set up structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs (if None, logs to stderr)
        debug: Open the diagnostics channel down to DEBUG; defaults to
            ``VOLUMETRIK_DEBUG``

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(StructuredFormatter())
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    diagnostics = logging.getLogger(DIAGNOSTICS_LOGGER)
    if DEBUG if debug is None else debug:
        diagnostics.setLevel(logging.DEBUG)
    else:
        # Inherit the package level
        diagnostics.setLevel(logging.NOTSET)

    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Module name such as ``"region"``; names already under
            ``volumetrik`` are used as given

    Returns:
        Logger instance
    """
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
