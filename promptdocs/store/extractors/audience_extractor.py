"""
Audience Extractor - Find who the requested document is written for.
"""

import re
from typing import Optional

from .base import BaseExtractor
from ...utils.logger import get_logger

logger = get_logger(__name__)

AUDIENCE_KEYS = ["Audience", "Target audience", "Intended audience", "Readers"]

AUDIENCE_PATTERNS = [
    r'(?:target |intended )?audience (?:is|are|will be|consists of|includes)\s+([^.\n]+)',
    r'(?:intended|written|aimed|targeted) (?:for|at)\s+([^.\n]+)',
    r'(?:the )?readers? (?:is|are|will be)\s+([^.\n]+)',
    r'(?:write|explain) (?:it |this )?(?:for|to)\s+((?:an? |the )?[^.\n]*?(?:audience|readers?|developers|engineers|contributors|maintainers|users|team)[^.\n]*)',
]

MAX_AUDIENCE_LENGTH = 200


class AudienceExtractor(BaseExtractor):
    """Returns the audience description, or None when the prompt names none."""

    @property
    def component_name(self) -> str:
        return "audience"

    def extract(self, content: str, **kwargs) -> Optional[str]:
        for key in AUDIENCE_KEYS:
            value = self._extract_key_value(content, key)
            if value:
                return self._clean_value(value)

        section = self._find_section(content, ["Audience", "Target Audience", "Intended Audience"])
        if section:
            first = section.split("\n\n")[0]
            return self._clean_value(" ".join(first.split()))

        # Phrases can wrap across lines in prose
        flattened = " ".join(content.split())
        for pattern in AUDIENCE_PATTERNS:
            match = re.search(pattern, flattened, re.IGNORECASE)
            if match:
                audience = self._clean_value(match.group(1))
                if audience and len(audience) <= MAX_AUDIENCE_LENGTH:
                    return audience

        logger.debug("No audience found")
        return None
