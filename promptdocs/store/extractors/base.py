"""
Base Extractor - Abstract base class for prompt attribute extractors.

Each extractor derives one descriptive attribute (topic, audience,
structural requests) from a prompt body. Extractors never modify the
text they read.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, List
import re


_LIST_MARKER_RE = re.compile(r'^\s*(?:[\*\-•+]|\d+[.)])\s+')
_SENTENCE_BREAK_RE = re.compile(r'(?<=[.!?])\s+(?=[A-Z0-9"\'(])')


class BaseExtractor(ABC):
    """
    Abstract base class for prompt attribute extractors.
    """

    @property
    @abstractmethod
    def component_name(self) -> str:
        """Name of the attribute this extractor produces."""
        pass

    @abstractmethod
    def extract(self, content: str, **kwargs) -> Any:
        """
        Extract the attribute from a prompt body.

        Args:
            content: Raw prompt text

        Returns:
            Extracted value - type depends on implementation
        """
        pass

    def _find_section(
        self,
        content: str,
        section_headers: List[str],
    ) -> Optional[str]:
        """
        Find a Markdown section by header and return its body.

        The section ends at the next heading of the same or higher level.

        Args:
            content: Prompt content
            section_headers: Possible headers for the section (case-insensitive)

        Returns:
            Section body without its heading, or None if not found
        """
        wanted = {h.lower() for h in section_headers}
        lines = content.splitlines()

        start = None
        level = 0
        for i, line in enumerate(lines):
            match = re.match(r'^\s{0,3}(#{1,6})\s+(.+?)\s*#*\s*$', line)
            if not match:
                continue
            if start is None:
                title = match.group(2).strip().rstrip(':').lower()
                if title in wanted:
                    start = i + 1
                    level = len(match.group(1))
            elif len(match.group(1)) <= level:
                return "\n".join(lines[start:i]).strip()

        if start is None:
            return None
        return "\n".join(lines[start:]).strip()

    def _extract_list_items(self, text: str) -> List[str]:
        """
        Extract list items (bullet points or numbered) from text.

        Continuation lines indented under an item are joined to it.
        """
        items: List[str] = []
        for line in text.splitlines():
            if _LIST_MARKER_RE.match(line):
                items.append(_LIST_MARKER_RE.sub('', line).strip())
            elif items and line.startswith((' ', '\t')) and line.strip():
                items[-1] = f"{items[-1]} {line.strip()}"
        return [item for item in items if item]

    def _extract_key_value(self, text: str, key: str) -> Optional[str]:
        """
        Extract a value for a given key from text.

        Handles formats like:
        - Key: Value
        - **Key**: Value
        - **Key:** Value
        """
        patterns = [
            rf'^\s*(?:[\*\-]\s+)?{re.escape(key)}\s*:\s*(.+?)\s*$',
            rf'^\s*(?:[\*\-]\s+)?\*\*{re.escape(key)}\*\*\s*:\s*(.+?)\s*$',
            rf'^\s*(?:[\*\-]\s+)?\*\*{re.escape(key)}:\*\*\s*(.+?)\s*$',
        ]

        for pattern in patterns:
            match = re.search(pattern, text, re.IGNORECASE | re.MULTILINE)
            if match:
                return match.group(1).strip()

        return None

    def _split_sentences(self, text: str) -> List[str]:
        """
        Split prose into sentences, treating each list item and each
        non-heading line block as a separate unit.
        """
        sentences: List[str] = []
        paragraph: List[str] = []

        def flush():
            if paragraph:
                joined = " ".join(paragraph)
                sentences.extend(s.strip() for s in _SENTENCE_BREAK_RE.split(joined) if s.strip())
                paragraph.clear()

        for line in text.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith('#') or stripped.startswith('<!--'):
                flush()
            elif _LIST_MARKER_RE.match(line):
                flush()
                paragraph.append(_LIST_MARKER_RE.sub('', line).strip())
            else:
                paragraph.append(stripped)
        flush()

        return sentences

    @staticmethod
    def _clean_value(value: str) -> str:
        """Strip Markdown emphasis and trailing punctuation from a short value."""
        value = re.sub(r'[\*_`]+', '', value)
        return value.strip().rstrip('.,;:').strip()
