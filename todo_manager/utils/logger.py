"""
Logger module - Logging configuration and utilities

This module provides logging configuration with support for:
- Console and rotating file logging
- Configuration from .env (TODO_LOG_* variables)
- One-time initialization of the package logger
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER_NAME = "todo_manager"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Flag to track if the package logger has been initialized
_logging_initialized = False


def configure_logging(
    log_level: str = "INFO",
    enable_console: bool = True,
    enable_file: bool = False,
    log_folder: str = "./logs",
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> logging.Logger:
    """
    Configure the package logger with console and file handlers.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_console: Enable console logging
        enable_file: Enable rotating file logging under ``log_folder``
        log_folder: Folder for log files
        max_bytes: Max file size before rotation
        backup_count: Number of backup files to keep

    Returns:
        The configured package logger
    """
    global _logging_initialized
    _logging_initialized = True

    level = getattr(logging, log_level.upper(), logging.INFO)
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level)
    package_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if enable_console:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    if enable_file:
        Path(log_folder).mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            Path(log_folder) / "todo_manager.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    return package_logger


def _ensure_logging_initialized() -> None:
    """
    Initialize the package logger with .env configuration on first use.
    This is called automatically by get_logger().
    """
    if _logging_initialized:
        return

    from todo_manager.config.env_config import EnvConfig

    EnvConfig.load_env_file()

    configure_logging(
        log_level=os.getenv("TODO_LOG_LEVEL", "INFO"),
        enable_console=EnvConfig.get_bool("TODO_ENABLE_CONSOLE_LOGGING", True),
        enable_file=EnvConfig.get_bool("TODO_ENABLE_FILE_LOGGING", False),
        log_folder=os.getenv("TODO_LOG_FOLDER", "./logs"),
        max_bytes=EnvConfig.get_int("TODO_LOG_MAX_BYTES", 10485760),
        backup_count=EnvConfig.get_int("TODO_LOG_BACKUP_COUNT", 5),
    )


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a logger configured from the environment.

    Loggers under the ``todo_manager`` namespace share the package handlers;
    other names get their own console handler.

    Args:
        name: Logger name (typically __name__)
        level: Optional logging level override

    Returns:
        Configured logger instance
    """
    _ensure_logging_initialized()

    logger = logging.getLogger(name)
    if level:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if name != PACKAGE_LOGGER_NAME and not name.startswith(PACKAGE_LOGGER_NAME + ".") \
            and not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        if not level:
            logger.setLevel(os.getenv("TODO_LOG_LEVEL", "INFO").upper())

    return logger
