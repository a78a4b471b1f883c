"""
Abstract base class for the external document generator.

The store never talks to a model directly: every consumer is reached
through this interface so Bedrock, mocks and the echo client can be
swapped freely.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Iterator, Dict, Any

from ..core.config import LLMConfig


@dataclass
class LLMResponse:
    """Response from an LLM call."""
    content: str
    success: bool = True
    error_message: Optional[str] = None

    # Token usage
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None

    model_id: Optional[str] = None
    finish_reason: Optional[str] = None  # "end_turn", "max_tokens", "stop_sequence"

    raw_response: Optional[Dict[str, Any]] = None

    @classmethod
    def error(cls, message: str) -> 'LLMResponse':
        """Create an error response."""
        return cls(content="", success=False, error_message=message)

    @property
    def total_tokens(self) -> Optional[int]:
        if self.input_tokens is None and self.output_tokens is None:
            return None
        return (self.input_tokens or 0) + (self.output_tokens or 0)

    @property
    def token_usage(self) -> Dict[str, Optional[int]]:
        """Get token usage as a dictionary."""
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.total_tokens,
        }

    @property
    def truncated(self) -> bool:
        """Whether the generator stopped because it ran out of tokens."""
        return self.finish_reason == "max_tokens"


class BaseLLMClient(ABC):
    """
    Abstract base class for document generator clients.

    Implementations receive the prompt text exactly as stored and
    return whatever the generator produced.
    """

    def __init__(self, config: Optional[LLMConfig] = None):
        """
        Initialize the LLM client.

        Args:
            config: LLM configuration (uses defaults if None)
        """
        self.config = config or LLMConfig()

    @abstractmethod
    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Generate a document from a prompt.

        Args:
            prompt: The literal prompt text
            system_prompt: Optional system instructions
            **kwargs: Provider-specific overrides (temperature, max_tokens, model_id)

        Returns:
            LLMResponse with generated content or error
        """
        pass

    @abstractmethod
    def generate_stream(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> Iterator[str]:
        """
        Generate a document as a stream of text chunks.

        Yields:
            Text chunks as they arrive
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the generator is reachable and credentials are valid."""
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get the provider name (e.g., 'bedrock', 'mock')."""
        pass

    @property
    def model_id(self) -> str:
        """Get the configured model ID."""
        return self.config.model or "default"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model_id})"
