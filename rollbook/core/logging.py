"""
Logging configuration for the application.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from rollbook.core.config import get_config, get_log_path

LOGGER_NAME = "rollbook"

# Global logger instance
_logger: Optional[logging.Logger] = None


def setup_logging() -> logging.Logger:
    """
    Set up application logging with both file and console handlers.

    Returns:
        Configured logger instance.
    """
    global _logger

    if _logger is not None:
        return _logger

    log_config = get_config().logging
    level = getattr(logging, log_config.level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Clear existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter(log_config.format)

    # File handler with rotation
    file_handler = RotatingFileHandler(
        get_log_path(),
        maxBytes=log_config.max_size * 1024 * 1024,  # Convert MB to bytes
        backupCount=log_config.backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    _logger = logger
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get the application logger, or a named child of it.

    Child loggers propagate to the handlers installed by setup_logging(), so
    modules can fetch them at import time before logging is configured.

    Returns:
        Logger instance.
    """
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    if _logger is None:
        return setup_logging()
    return _logger
