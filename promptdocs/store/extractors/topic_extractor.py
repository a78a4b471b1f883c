"""
Topic Extractor - Decide what kind of document a prompt asks for.
"""

import re
from typing import Dict, List

from .base import BaseExtractor
from ..models import DocumentTopic
from ...utils.logger import get_logger

logger = get_logger(__name__)

TOPIC_KEYS = ["Topic", "Document type", "Deliverable"]

TOPIC_KEYWORDS: Dict[DocumentTopic, List[str]] = {
    DocumentTopic.RFC_PROPOSAL: [
        r'\bRFCs?\b',
        r'\bproposals?\b',
        r'\bpropos(?:e|ing)\b',
        r'\bmotivation\b',
        r'\bprior art\b',
    ],
    DocumentTopic.INVESTIGATION_REPORT: [
        r'\binvestigat(?:e|ion|ing)\b',
        r'\breports?\b',
        r'\bfindings\b',
        r'\banaly[sz](?:e|is)\b',
    ],
}

# Matches in the title count this many times
TITLE_WEIGHT = 3


class TopicExtractor(BaseExtractor):
    """
    Classifies a prompt as an RFC proposal or an investigation report.

    An explicit ``Topic:`` line wins. Otherwise keywords are counted over
    the body, with the first heading weighted higher. Ties and prompts
    without any keyword are UNKNOWN.
    """

    @property
    def component_name(self) -> str:
        return "topic"

    def extract(self, content: str, **kwargs) -> DocumentTopic:
        for key in TOPIC_KEYS:
            value = self._extract_key_value(content, key)
            if value:
                topic = DocumentTopic.from_string(self._clean_value(value))
                if topic is not DocumentTopic.UNKNOWN:
                    return topic

        scores = self.score(content)
        readable = {topic.value: score for topic, score in scores.items()}
        logger.debug(f"Topic scores: {readable}")

        best = max(scores.values())
        winners = [topic for topic, score in scores.items() if score == best]
        if best == 0 or len(winners) > 1:
            return DocumentTopic.UNKNOWN
        return winners[0]

    def score(self, content: str) -> Dict[DocumentTopic, int]:
        """Keyword score per topic."""
        title_match = re.search(r'^\s{0,3}#{1,6}\s+(.+)$', content, re.MULTILINE)
        title = title_match.group(1) if title_match else ""

        scores = {}
        for topic, patterns in TOPIC_KEYWORDS.items():
            total = 0
            for pattern in patterns:
                total += len(re.findall(pattern, content, re.IGNORECASE))
                total += (TITLE_WEIGHT - 1) * len(re.findall(pattern, title, re.IGNORECASE))
            scores[topic] = total
        return scores
