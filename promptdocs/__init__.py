"""
promptdocs - Prompt store and document-generation requests.

Main modules:
- store: Discover and load prompt files
- integrity: File-level checks for prompt files
- dispatch: Send prompt text to the external generator
- llm: Generator client abstractions
- cli: Command-line interface
"""

import dataclasses
from pathlib import Path
from typing import Optional

from .core.config import AppConfig
from .dispatch import DocumentRequester, GenerationResult
from .llm import MockLLMClient, create_client
from .store import PromptStore

__version__ = "1.0.0"

__all__ = [
    'request_document',
    'DocumentRequester',
    'GenerationResult',
    'PromptStore',
    '__version__',
]


def request_document(
    name: str,
    prompts_dir: Optional[str | Path] = None,
    output_dir: Optional[str | Path] = None,
    config: Optional[AppConfig] = None,
    use_mock_llm: bool = False,
) -> GenerationResult:
    """
    Programmatic interface: load one prompt and request its document.

    Args:
        name: Prompt name, identity or file path
        prompts_dir: Prompt directory (defaults to config.store.prompts_dir)
        output_dir: Optional directory to write the document into
        config: Optional configuration
        use_mock_llm: Use mock LLM for testing

    Returns:
        GenerationResult from the generator
    """
    config = config or AppConfig()
    if prompts_dir:
        config = dataclasses.replace(
            config,
            store=dataclasses.replace(config.store, prompts_dir=Path(prompts_dir)),
        )

    store = PromptStore.from_config(config.store)
    document = store.get(name)

    if use_mock_llm:
        llm_client = MockLLMClient(config=config.llm)
    else:
        llm_client = create_client(config.llm.provider, config=config.llm)

    requester = DocumentRequester(llm_client, config)
    if output_dir:
        return requester.request_and_save(document, output_dir)
    return requester.request(document)
