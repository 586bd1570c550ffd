"""Logging configuration for the common kit helpers."""

import logging
from logging.handlers import RotatingFileHandler
import os
from typing import Optional

from config import config

LOGGER_NAME = "common_kit"

# Library default: stay silent until setup_logging() is called
logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def resolve_log_level(name: str) -> int:
    """Map a level name such as "INFO" to its number; unknown names mean DEBUG."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.DEBUG


def setup_logging(log_level: Optional[int] = None) -> None:
    """Configure logging with file and console handlers.

    Without an explicit level the configured ``log_level`` name is used.
    """
    if log_level is None:
        log_level = resolve_log_level(config.log_level)
    # Create logger
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)

    # Create formatters
    file_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    console_formatter = logging.Formatter("%(levelname)s: %(message)s")

    # Create the log directory if it doesn't exist
    log_dir = os.path.dirname(config.log_file)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir)

    # File handler with rotation
    file_handler = RotatingFileHandler(
        config.log_file, maxBytes=config.max_log_size, backupCount=3,
        encoding="utf-8"
    )
    file_handler.setFormatter(file_formatter)
    file_handler.setLevel(logging.DEBUG)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(logging.INFO)

    # Add handlers
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)


def get_logger() -> logging.Logger:
    """Get the configured logger instance."""
    return logging.getLogger(LOGGER_NAME)
