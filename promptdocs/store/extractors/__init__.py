"""
Prompt Extractors - Derive descriptive attributes from prompt text.

- TopicExtractor: RFC proposal vs. investigation report
- AudienceExtractor: who the document is written for
- RequirementExtractor: summary, table of contents, sections, prose style
"""

from .base import BaseExtractor
from .topic_extractor import TopicExtractor
from .audience_extractor import AudienceExtractor
from .requirement_extractor import RequirementExtractor

__all__ = [
    'BaseExtractor',
    'TopicExtractor',
    'AudienceExtractor',
    'RequirementExtractor',
]
