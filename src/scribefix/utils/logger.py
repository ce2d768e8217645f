import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from platformdirs import user_log_path

APP_NAME = "scribefix"
LOG_FILENAME = "app.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def get_log_dir() -> Path:
    return user_log_path(APP_NAME, ensure_exists=True)


_logger_instance: Optional[logging.Logger] = None


def _build_handlers(level: int, to_console: bool) -> List[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers: List[logging.Handler] = [
        RotatingFileHandler(
            get_log_dir() / LOG_FILENAME,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
            encoding="utf-8",
        )
    ]
    if to_console:
        handlers.append(logging.StreamHandler(sys.stderr))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def _configure_package_logger() -> logging.Logger:
    from ..core.settings.config import LOG_TO_CONSOLE, get_log_level

    package_logger = logging.getLogger(APP_NAME)
    if package_logger.handlers:
        return package_logger

    level = get_log_level()
    package_logger.setLevel(level)
    for handler in _build_handlers(level, LOG_TO_CONSOLE):
        package_logger.addHandler(handler)
    package_logger.propagate = False
    return package_logger


def get_logger(name: str = APP_NAME) -> logging.Logger:
    """Module loggers are children of the package logger, which owns the handlers."""
    global _logger_instance

    if _logger_instance is None:
        _logger_instance = _configure_package_logger()

    if name == APP_NAME:
        return _logger_instance
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Close all handlers so the log file is released."""
    global _logger_instance
    package_logger = logging.getLogger(APP_NAME)
    for handler in package_logger.handlers[:]:
        handler.close()
        package_logger.removeHandler(handler)
    _logger_instance = None
