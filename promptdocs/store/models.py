"""
Prompt Data Models - Structured view of prompt files.

A PromptDocument keeps the instruction text exactly as it was read and
carries a few descriptive attributes (topic, audience, requested
structure) derived from it. Nothing here is checked against what the
generator eventually returns.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Dict, Any
from enum import Enum
import re


class DocumentTopic(Enum):
    """Kind of document a prompt asks for."""
    RFC_PROPOSAL = "rfc_proposal"
    INVESTIGATION_REPORT = "investigation_report"
    UNKNOWN = "unknown"

    @classmethod
    def from_string(cls, value: str) -> 'DocumentTopic':
        """Parse topic from string, handling common variations."""
        value_lower = value.lower().strip().replace("-", " ").replace("_", " ")
        if value_lower in ('rfc', 'rfc proposal', 'proposal', 'feature proposal'):
            return cls.RFC_PROPOSAL
        elif value_lower in ('report', 'investigation', 'investigation report', 'analysis report'):
            return cls.INVESTIGATION_REPORT
        return cls.UNKNOWN


class RequirementKind(Enum):
    """Structural requests a prompt can make of the generated document."""
    SUMMARY = "summary"
    TABLE_OF_CONTENTS = "table_of_contents"
    SECTION_OUTLINE = "section_outline"
    PROSE_STYLE = "prose_style"
    OTHER = "other"


@dataclass(frozen=True)
class StructuralRequirement:
    """A structural request as written in the prompt."""
    kind: RequirementKind
    text: str

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "text": self.text}


_HEADING_RE = re.compile(r'^\s{0,3}#{1,6}\s+(.+?)\s*#*\s*$', re.MULTILINE)


@dataclass(frozen=True)
class PromptDocument:
    """
    One prompt body, identified by the file it came from.

    When a file holds several bodies separated by the delimiter, each body
    becomes its own PromptDocument with a distinct ``index``.
    """
    source: Path
    text: str
    index: int = 0
    part_count: int = 1
    topic: DocumentTopic = DocumentTopic.UNKNOWN
    audience: Optional[str] = None
    requirements: Tuple[StructuralRequirement, ...] = field(default_factory=tuple)
    relative_name: Optional[str] = None

    @property
    def name(self) -> str:
        """
        Store-relative name without the prompt extension.

        ``rfc`` for ``<root>/rfc.prompt.md``, ``drafts/rfc`` for
        ``<root>/drafts/rfc.prompt.md``. Set by the store, which knows the
        root and the configured extension; documents built by hand fall
        back to the file name.
        """
        if self.relative_name:
            return self.relative_name
        file_name = self.source.name
        for suffix in ('.prompt.md', '.md', '.txt'):
            if file_name.endswith(suffix):
                return file_name[:-len(suffix)]
        return self.source.stem

    @property
    def identity(self) -> str:
        if self.part_count > 1:
            return f"{self.source}#{self.index}"
        return str(self.source)

    @property
    def short_identity(self) -> str:
        if self.part_count > 1:
            return f"{self.name}#{self.index}"
        return self.name

    @property
    def base_name(self) -> str:
        """Last component of ``name`` (``rfc`` for ``drafts/rfc``)."""
        return self.name.rsplit("/", 1)[-1]

    @property
    def title(self) -> str:
        """First Markdown heading, else the first non-empty line."""
        match = _HEADING_RE.search(self.text)
        if match:
            return match.group(1).strip()
        for line in self.text.splitlines():
            if line.strip():
                return line.strip()
        return self.name

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    def requirements_of(self, kind: RequirementKind) -> Tuple[StructuralRequirement, ...]:
        return tuple(r for r in self.requirements if r.kind == kind)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identity": self.identity,
            "name": self.short_identity,
            "source": str(self.source),
            "index": self.index,
            "title": self.title,
            "topic": self.topic.value,
            "audience": self.audience,
            "requirements": [r.to_dict() for r in self.requirements],
            "word_count": self.word_count,
        }

    def summary(self) -> str:
        """Get a summary string of the prompt."""
        lines = [
            f"Prompt: {self.short_identity}",
            f"  Title: {self.title}",
            f"  Topic: {self.topic.value}",
            f"  Audience: {self.audience or 'unspecified'}",
            f"  Words: {self.word_count}",
            f"  Structural requests: {len(self.requirements)}",
        ]
        for requirement in self.requirements:
            lines.append(f"    - [{requirement.kind.value}] {requirement.text}")
        return "\n".join(lines)
