"""
Configuration management for promptdocs.

Provides dataclasses for all configuration options with sensible defaults,
YAML file loading, and validation.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from pathlib import Path
from enum import Enum
import os
import yaml


DEFAULT_EXTENSION = ".prompt.md"
DEFAULT_DELIMITER = "<!-- prompt-break -->"


class LLMProvider(Enum):
    """Supported LLM providers."""
    BEDROCK = "bedrock"
    MOCK = "mock"  # For testing
    ECHO = "echo"  # Returns the prompt unchanged


@dataclass
class LLMConfig:
    """Configuration for the external document generator."""
    provider: LLMProvider = LLMProvider.BEDROCK
    model: str = field(default_factory=lambda: os.getenv(
        "BEDROCK_MODEL",
        "anthropic.claude-sonnet-4-20250514-v1:0"
    ))
    temperature: float = 0.3
    max_tokens: int = 64000
    timeout: int = 300  # seconds

    # AWS-specific
    aws_region: str = field(default_factory=lambda: os.getenv("AWS_REGION", "us-east-1"))

    # Retry settings
    max_retries: int = 2
    retry_delay: float = 1.0  # seconds

    def __post_init__(self):
        if isinstance(self.provider, str):
            self.provider = LLMProvider(self.provider)
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be between 0 and 1, got {self.temperature}")
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")


@dataclass
class StoreConfig:
    """Where prompt files live and how they are read."""
    prompts_dir: Path = field(default_factory=lambda: Path(
        os.getenv("PROMPTDOCS_PROMPTS_DIR", "prompts")
    ))
    extension: str = DEFAULT_EXTENSION
    delimiter: str = DEFAULT_DELIMITER
    encoding: str = "utf-8"
    require_delimiter: bool = False

    def __post_init__(self):
        if isinstance(self.prompts_dir, str):
            self.prompts_dir = Path(self.prompts_dir)
        if not self.delimiter.strip():
            raise ValueError("delimiter must not be blank")


@dataclass
class OutputConfig:
    """Where generated documents are written."""
    output_dir: Optional[Path] = None
    overwrite: bool = True
    file_suffix: str = ".md"

    def __post_init__(self):
        if self.output_dir and isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    file: Optional[Path] = None

    def __post_init__(self):
        if self.file and isinstance(self.file, str):
            self.file = Path(self.file)


@dataclass
class AppConfig:
    """
    Root configuration object containing all settings.

    Can be loaded from YAML file or constructed programmatically.
    """
    llm: LLMConfig = field(default_factory=LLMConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> 'AppConfig':
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AppConfig':
        """
        Create configuration from a dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            AppConfig instance

        Raises:
            ValueError: If a section has unknown keys or invalid values
        """
        try:
            return cls(
                llm=LLMConfig(**data.get('llm', {})),
                store=StoreConfig(**data.get('store', {})),
                output=OutputConfig(**data.get('output', {})),
                logging=LoggingConfig(**data.get('logging', {})),
            )
        except TypeError as e:
            raise ValueError(f"Invalid configuration: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to a dictionary.

        Returns:
            Configuration as dictionary
        """
        return {
            'llm': {
                'provider': self.llm.provider.value,
                'model': self.llm.model,
                'temperature': self.llm.temperature,
                'max_tokens': self.llm.max_tokens,
                'timeout': self.llm.timeout,
                'aws_region': self.llm.aws_region,
                'max_retries': self.llm.max_retries,
                'retry_delay': self.llm.retry_delay,
            },
            'store': {
                'prompts_dir': str(self.store.prompts_dir),
                'extension': self.store.extension,
                'delimiter': self.store.delimiter,
                'encoding': self.store.encoding,
                'require_delimiter': self.store.require_delimiter,
            },
            'output': {
                'output_dir': str(self.output.output_dir) if self.output.output_dir else None,
                'overwrite': self.output.overwrite,
                'file_suffix': self.output.file_suffix,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file': str(self.logging.file) if self.logging.file else None,
            },
        }

    def save_yaml(self, path: Path | str) -> None:
        """
        Save configuration to a YAML file.

        Args:
            path: Path to output YAML file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def get_default_config() -> AppConfig:
    """
    Get the default application configuration.

    Returns:
        AppConfig with all default values
    """
    return AppConfig()


def load_config(config_path: Optional[Path | str] = None) -> AppConfig:
    """
    Load configuration from file or return defaults.

    Looks for config in this order:
    1. Provided path
    2. ./config/default.yaml
    3. ./config.yaml
    4. ~/.promptdocs/config.yaml
    5. Default values

    Args:
        config_path: Optional path to config file

    Returns:
        AppConfig instance
    """
    if config_path:
        return AppConfig.from_yaml(config_path)

    default_paths = [
        Path("config/default.yaml"),
        Path("config.yaml"),
        Path.home() / ".promptdocs" / "config.yaml",
    ]

    for path in default_paths:
        if path.exists():
            return AppConfig.from_yaml(path)

    return get_default_config()
