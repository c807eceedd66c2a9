# uiauto_objrepo/utils/logging.py
"""
Logging configuration for the object repository.
Console logging by default, optional file logging.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER_NAME = "uiauto_objrepo"

# Module-level logger cache
_loggers: dict = {}
_initialized: bool = False


class ObjRepoLogFormatter(logging.Formatter):
    """Formatter with millisecond timestamps and optional thread name."""

    def __init__(self, include_thread: bool = False):
        self.include_thread = include_thread
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        level = record.levelname.ljust(8)

        if self.include_thread:
            thread = record.threadName[:12].ljust(12)
            prefix = f"[{timestamp}] [{level}] [{thread}] {record.name}: "
        else:
            prefix = f"[{timestamp}] [{level}] {record.name}: "

        message = record.getMessage()
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return prefix + message


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    stream=None,
) -> None:
    """
    Initialize package logging. Only the first call installs handlers.

    Args:
        level: Logging level for all handlers
        log_file: Optional path to an additional log file
        stream: Console stream (stderr if None)
    """
    global _initialized

    if _initialized:
        return

    level = _coerce_level(level)
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(ObjRepoLogFormatter(include_thread=False))
    root_logger.addHandler(console_handler)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(ObjRepoLogFormatter(include_thread=True))
            root_logger.addHandler(file_handler)
        except (OSError, PermissionError) as e:
            root_logger.warning(f"Could not create log file: {e}")

    _initialized = True
    root_logger.debug(f"Logging initialized at level {logging.getLevelName(level)}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger under the package hierarchy
    """
    if name not in _loggers:
        if name.startswith(ROOT_LOGGER_NAME):
            _loggers[name] = logging.getLogger(name)
        else:
            _loggers[name] = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

    return _loggers[name]


def log_exception(logger: logging.Logger, context: str, exception: Exception) -> None:
    """Log an exception with context."""
    logger.exception(f"Exception in {context}: {type(exception).__name__}: {exception}")
