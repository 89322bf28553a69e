"""Centralized logging configuration for regskin.

All modules log through children of the ``regskin`` logger, so a single
call to ``configure_regskin_logging`` at startup sets level, format and
handlers for the whole process.
"""

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

# Environment variables
DEBUG_MODE = os.getenv("REGSKIN_DEBUG", "0") == "1"
LOG_LEVEL = os.getenv("REGSKIN_LOG_LEVEL", "DEBUG" if DEBUG_MODE else "INFO")
LOG_FILE = os.getenv("REGSKIN_LOG_FILE")

DETAILED_FORMAT = (
    "[%(asctime)s] [%(levelname)-8s] [%(name)s] [%(filename)s:%(lineno)d] %(message)s"
)
SIMPLE_FORMAT = "[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s"

# Use detailed format in debug mode
LOG_FORMAT = DETAILED_FORMAT if DEBUG_MODE else SIMPLE_FORMAT

ROOT_LOGGER_NAME = "regskin"


def _get_file_handler(log_file: Path, level: int) -> logging.FileHandler:
    """Create a rotating file handler for the given log file."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def _get_console_handler(level: int) -> logging.StreamHandler:
    """Create a console handler for streaming logs."""
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def configure_regskin_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    include_console: bool = True,
) -> logging.Logger:
    """
    Configure the ``regskin`` logger and its handlers.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a rotating log file
        include_console: Whether to also log to console

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = LOG_LEVEL
    if log_file is None:
        log_file = LOG_FILE

    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    if log_file:
        logger.addHandler(_get_file_handler(Path(log_file), level))

    if include_console:
        logger.addHandler(_get_console_handler(level))

    return logger


def configure_module_logging(module_name: str) -> logging.Logger:
    """
    Get the logger for a module.

    This creates a child logger under the "regskin" namespace that inherits
    its handlers and configuration.

    Args:
        module_name: Module name (e.g., "catalog.refresher")

    Returns:
        Logger instance
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{module_name}")
