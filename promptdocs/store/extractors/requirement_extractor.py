"""
Requirement Extractor - Collect the structural requests a prompt makes.

Extracts, in the prompt's own wording:
- Summary / overview requests
- Table of contents requests
- Section outlines
- Prose style constraints ("use full sentences", "avoid point forms")

The result is descriptive. Nothing compares it with generated output.
"""

import re
from typing import List, Tuple

from .base import BaseExtractor
from ..models import RequirementKind, StructuralRequirement
from ...utils.logger import get_logger

logger = get_logger(__name__)

# Checked in order; the first matching kind wins
KIND_PATTERNS: List[Tuple[RequirementKind, str]] = [
    (RequirementKind.TABLE_OF_CONTENTS, r'\btable of contents\b|\btoc\b'),
    (RequirementKind.SUMMARY, r'\b(?:executive )?summary\b|\bsummari[sz]e\b|\babstract\b|\boverview\b|\btl;?dr\b'),
    (RequirementKind.PROSE_STYLE, (
        r'\bfull sentences\b|\bpoint[- ]forms?\b|\bbullet[- ]?points?\b|\bprose\b'
        r'|\btone\b|\bparagraphs?\b|\bplain (?:english|language)\b|\bjargon\b'
        r'|\bconcise\b|\bverbose\b|\bwriting style\b|\bformal\b'
    )),
    (RequirementKind.SECTION_OUTLINE, r'\bsections?\b|\boutlines?\b|\bchapters?\b|\bheadings?\b'),
]

# A sentence must read as a request to count
REQUEST_CUES = (
    r'\b(?:include|includes|should|must|use|avoid|write|provide|start|begin|end|add'
    r'|give|please|make sure|ensure|structure|organi[sz]e|cover|describe|explain'
    r'|keep|outline|list|follow|contain|need|needs|want|present|discuss)\b'
)

REQUIREMENT_SECTIONS = ["Requirements", "Structure", "Format", "Formatting", "Style", "Deliverable"]


class RequirementExtractor(BaseExtractor):
    """
    Finds structural requests sentence by sentence.

    List items under a Requirements/Structure/Format heading are always
    kept, falling back to OTHER when no specific kind matches.
    """

    @property
    def component_name(self) -> str:
        return "requirements"

    def extract(self, content: str, **kwargs) -> Tuple[StructuralRequirement, ...]:
        requirements: List[StructuralRequirement] = []
        seen = set()

        def add(kind: RequirementKind, text: str) -> None:
            key = " ".join(text.lower().split())
            if key not in seen:
                seen.add(key)
                requirements.append(StructuralRequirement(kind=kind, text=text))

        for header in REQUIREMENT_SECTIONS:
            section = self._find_section(content, [header])
            if not section:
                continue
            for item in self._extract_list_items(section):
                add(self.classify(item) or RequirementKind.OTHER, item)

        for sentence in self._split_sentences(content):
            kind = self.classify(sentence)
            if kind and re.search(REQUEST_CUES, sentence, re.IGNORECASE):
                add(kind, sentence)

        logger.debug(f"Found {len(requirements)} structural requests")
        return tuple(requirements)

    def classify(self, text: str):
        """Return the RequirementKind a sentence asks for, or None."""
        for kind, pattern in KIND_PATTERNS:
            if re.search(pattern, text, re.IGNORECASE):
                return kind
        return None
