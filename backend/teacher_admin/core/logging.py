"""
Logging configuration for the application.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from teacher_admin.core.config import get_config, get_log_path

LOGGER_NAME = "teacher_admin"

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

    config = get_config()
    log_config = config.logging
    level = getattr(logging, log_config.level.upper())

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
    Get the application logger, or one of its named children.

    Args:
        name: Optional child name, e.g. "photos" -> "teacher_admin.photos".

    Returns:
        Logger instance.
    """
    root = _logger if _logger is not None else setup_logging()
    if name:
        return root.getChild(name)
    return root


def log_event(
    logger: logging.Logger,
    level: int,
    message: str,
    context: Optional[Dict[str, Any]] = None,
    exc_info: Any = None,
) -> None:
    """
    Emit a structured log entry.

    The context dict is attached to the record as ``record.context`` and also
    appended to the message so plain-text log files keep the details.
    """
    context = dict(context or {})
    if context:
        rendered = ", ".join(f"{key}={value!r}" for key, value in context.items())
        logger.log(level, "%s [%s]", message, rendered, extra={"context": context}, exc_info=exc_info)
    else:
        logger.log(level, message, extra={"context": context}, exc_info=exc_info)
