"""
LLM module - Clients for the external document generator.

Provides a unified interface for:
- AWS Bedrock (Claude)
- Mock and echo clients (no network)
"""

from typing import Optional

from .base import BaseLLMClient, LLMResponse
from .bedrock_client import BedrockClient
from .mock_client import MockLLMClient, EchoLLMClient
from ..core.config import LLMConfig, LLMProvider

__all__ = [
    'BaseLLMClient',
    'LLMResponse',
    'BedrockClient',
    'MockLLMClient',
    'EchoLLMClient',
    'create_client',
]


def create_client(
    provider: str | LLMProvider = LLMProvider.BEDROCK,
    config: Optional[LLMConfig] = None,
    **kwargs,
) -> BaseLLMClient:
    """
    Factory function to create an LLM client.

    Args:
        provider: Provider name or enum ("bedrock", "mock", "echo")
        config: LLM configuration passed to the client
        **kwargs: Provider-specific options

    Returns:
        Configured LLM client instance

    Raises:
        ValueError: If provider is not supported
    """
    providers = {
        LLMProvider.BEDROCK: BedrockClient,
        LLMProvider.MOCK: MockLLMClient,
        LLMProvider.ECHO: EchoLLMClient,
    }

    try:
        provider = LLMProvider(provider)
    except ValueError:
        available = [p.value for p in providers]
        raise ValueError(f"Unsupported provider: {provider}. Available: {available}") from None

    return providers[provider](config=config, **kwargs)
