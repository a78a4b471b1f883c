"""
Logging utilities for promptdocs.

Every module logs through a child of the ``promptdocs`` logger so the CLI
can configure level, format and handlers in one place.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime


DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "promptdocs"

_loggers: dict = {}
_configured = False


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    log_file: Optional[Path | str] = None,
    console: bool = True,
) -> None:
    """
    Configure logging for the application.

    Should be called once at application startup. Console output goes to
    stderr so generated documents written to stdout stay clean.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string (uses DEFAULT_FORMAT if None)
        log_file: Optional path to log file
        console: Whether to log to console (default True)
    """
    global _configured

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        format_string or DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT
    )

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for the given module name.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger under the ``promptdocs`` namespace
    """
    if not _configured:
        setup_logging()

    if name.startswith(ROOT_LOGGER_NAME):
        logger_name = name
    else:
        logger_name = f"{ROOT_LOGGER_NAME}.{name}"

    if logger_name not in _loggers:
        _loggers[logger_name] = logging.getLogger(logger_name)

    return _loggers[logger_name]


class LogContext:
    """
    Context manager that logs the start, end and duration of an operation.

    Example:
        with LogContext(logger, "Requesting document", prompt="rfc"):
            requester.request(document)
    """

    def __init__(self, logger: logging.Logger, operation: str, **context):
        self.logger = logger
        self.operation = operation
        self.context = context
        self.start_time = None

    def __enter__(self):
        self.start_time = datetime.now()
        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        self.logger.info(f"Starting: {self.operation} ({context_str})")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = (datetime.now() - self.start_time).total_seconds()

        if exc_type is None:
            self.logger.info(f"Completed: {self.operation} ({duration:.2f}s)")
        else:
            self.logger.error(
                f"Failed: {self.operation} ({duration:.2f}s) - {exc_type.__name__}: {exc_val}"
            )

        return False


class ProgressLogger:
    """
    Logs one line per finished prompt in a batch, then a closing summary.

    Example:
        progress = ProgressLogger(logger, "Generating documents", total=2)
        for document in documents:
            progress.increment(document.short_identity)
        progress.complete("2 succeeded, 0 failed")
    """

    def __init__(self, logger: logging.Logger, operation: str, total: int):
        self.logger = logger
        self.operation = operation
        self.total = total
        self.current = 0
        self.start_time = datetime.now()

    def increment(self, message: Optional[str] = None) -> None:
        self.current += 1
        msg = f"{self.operation}: {self.current}/{self.total}"
        if message:
            msg += f" - {message}"
        self.logger.info(msg)

    def complete(self, message: Optional[str] = None) -> None:
        duration = (datetime.now() - self.start_time).total_seconds()
        msg = f"{self.operation}: done in {duration:.2f}s"
        if message:
            msg += f" ({message})"
        self.logger.info(msg)


def log_exception(logger: logging.Logger, message: str, exc: Exception) -> None:
    """
    Log an exception with full traceback at ERROR level.

    Args:
        logger: Logger instance
        message: Context message
        exc: Exception to log
    """
    logger.error(f"{message}: {type(exc).__name__}: {exc}", exc_info=True)


def log_json(logger: logging.Logger, message: str, data: dict, level: int = logging.DEBUG) -> None:
    """
    Log JSON data in a readable format.

    Args:
        logger: Logger instance
        message: Context message
        data: JSON-serializable data
        level: Log level (default DEBUG)
    """
    formatted = json.dumps(data, indent=2, default=str)
    logger.log(level, f"{message}:\n{formatted}")
