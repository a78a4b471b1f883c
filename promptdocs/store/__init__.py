"""
Store module - Prompt files and the documents loaded from them.
"""

from .models import (
    DocumentTopic,
    RequirementKind,
    StructuralRequirement,
    PromptDocument,
)
from .prompt_store import (
    PromptStore,
    PromptStoreError,
    PromptNotFoundError,
    PromptDecodeError,
    split_bodies,
)
from .extractors import (
    BaseExtractor,
    TopicExtractor,
    AudienceExtractor,
    RequirementExtractor,
)

__all__ = [
    # Models
    'DocumentTopic',
    'RequirementKind',
    'StructuralRequirement',
    'PromptDocument',
    # Store
    'PromptStore',
    'PromptStoreError',
    'PromptNotFoundError',
    'PromptDecodeError',
    'split_bodies',
    # Extractors
    'BaseExtractor',
    'TopicExtractor',
    'AudienceExtractor',
    'RequirementExtractor',
]
