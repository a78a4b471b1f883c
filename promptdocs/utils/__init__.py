"""
Utilities module - Logging helpers shared by all modules.
"""

from .logger import (
    setup_logging,
    get_logger,
    LogContext,
    ProgressLogger,
    log_exception,
    log_json,
)

__all__ = [
    'setup_logging',
    'get_logger',
    'LogContext',
    'ProgressLogger',
    'log_exception',
    'log_json',
]
