"""
Core module - Configuration shared by the store, dispatch and CLI layers.
"""

from .config import (
    AppConfig,
    LLMConfig,
    StoreConfig,
    OutputConfig,
    LoggingConfig,
    LLMProvider,
    DEFAULT_EXTENSION,
    DEFAULT_DELIMITER,
    get_default_config,
    load_config,
)

__all__ = [
    'AppConfig',
    'LLMConfig',
    'StoreConfig',
    'OutputConfig',
    'LoggingConfig',
    'LLMProvider',
    'DEFAULT_EXTENSION',
    'DEFAULT_DELIMITER',
    'get_default_config',
    'load_config',
]
