"""
Logging setup shared by the service, the CLI and the provider clients
"""

import logging
import sys
from typing import Optional

from finetune_studio.utils.constants import DEFAULT_LOG_FORMAT, DEFAULT_LOG_LEVEL

ROOT_LOGGER_NAME = "finetune_studio"


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: str = DEFAULT_LOG_LEVEL,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Setup a logger with console and optional file handler

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging
        format_string: Optional custom format string

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(format_string or DEFAULT_LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(module: str) -> logging.Logger:
    """
    Get a child of the package logger, e.g. ``finetune_studio.core.files``

    Args:
        module: Dotted module name (usually ``__name__``)

    Returns:
        Logger that propagates to the package logger
    """
    if module == ROOT_LOGGER_NAME or module.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(module)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{module}")


def set_level(level: str) -> None:
    """Change the package log level at runtime"""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(getattr(logging, level.upper()))
