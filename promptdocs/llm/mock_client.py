"""
Offline clients for tests and dry runs.

Neither client makes network calls.
"""

from typing import Optional, Iterator, List, Dict, Callable, Any
import time

from .base import BaseLLMClient, LLMResponse
from ..core.config import LLMConfig


def _estimate_tokens(text: str) -> int:
    return int(len(text.split()) * 1.3)


class MockLLMClient(BaseLLMClient):
    """
    Mock document generator.

    Can be configured with:
    - Static responses
    - Response sequences
    - Custom response functions
    - Simulated delays
    - Error simulation
    """

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        default_response: str = "# Mock Document\n\nThis is a mock response.",
        delay: float = 0.0,
    ):
        """
        Initialize the mock client.

        Args:
            config: LLM configuration
            default_response: Returned when no sequence or function is set
            delay: Simulated delay in seconds
        """
        super().__init__(config)
        self.default_response = default_response
        self.delay = delay

        self._responses: List[str] = []
        self._response_index = 0
        self._response_function: Optional[Callable[[str], str]] = None
        self._error_after: Optional[int] = None
        self._call_count = 0

        self.calls: List[Dict[str, Any]] = []

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def model_id(self) -> str:
        return "mock-model"

    def set_responses(self, responses: List[str]) -> None:
        """Return these responses in order, cycling back to the start."""
        self._responses = responses
        self._response_index = 0

    def set_response_function(self, func: Callable[[str], str]) -> None:
        """Build each response from the prompt with ``func``."""
        self._response_function = func

    def set_error_after(self, n: int) -> None:
        """Return an error response once ``n`` calls have succeeded."""
        self._error_after = n

    def reset(self) -> None:
        """Reset call tracking and response index."""
        self._response_index = 0
        self._call_count = 0
        self.calls.clear()

    def _next_content(self, prompt: str) -> str:
        if self._response_function:
            return self._response_function(prompt)
        if self._responses:
            content = self._responses[self._response_index % len(self._responses)]
            self._response_index += 1
            return content
        return self.default_response

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> LLMResponse:
        self.calls.append({
            "prompt": prompt,
            "system_prompt": system_prompt,
            "kwargs": kwargs,
        })

        if self.delay > 0:
            time.sleep(self.delay)

        self._call_count += 1

        if self._error_after is not None and self._call_count > self._error_after:
            return LLMResponse.error("Simulated error after N calls")

        content = self._next_content(prompt)

        return LLMResponse(
            content=content,
            success=True,
            input_tokens=_estimate_tokens(prompt),
            output_tokens=_estimate_tokens(content),
            model_id=self.model_id,
            finish_reason="end_turn",
        )

    def generate_stream(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> Iterator[str]:
        """Yield the mock response line by line."""
        response = self.generate(prompt, system_prompt, **kwargs)

        if not response.success:
            raise RuntimeError(response.error_message)

        yield from response.content.splitlines(keepends=True)

    def is_available(self) -> bool:
        return True

    @property
    def last_call(self) -> Optional[Dict[str, Any]]:
        """Get the most recent call."""
        return self.calls[-1] if self.calls else None

    @property
    def call_count(self) -> int:
        return len(self.calls)


class EchoLLMClient(MockLLMClient):
    """
    Returns the prompt exactly as received.

    Useful for inspecting what would be transmitted to the generator.
    """

    def __init__(self, config: Optional[LLMConfig] = None):
        super().__init__(config)
        self.set_response_function(lambda prompt: prompt)

    @property
    def provider_name(self) -> str:
        return "echo"

    @property
    def model_id(self) -> str:
        return "echo"
