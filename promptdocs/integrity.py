"""
Integrity Checker - File-level checks for prompt files.

Runs in stages and stops early once a file cannot be read as text:
1. Existence and readability
2. File name extension
3. Encoding (valid UTF-8 by default)
4. Non-empty content
5. Delimiter structure for concatenated prompts

These are the only properties checked. Prompt wording and generated
output are never validated.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Any, List, Iterable, Optional

from .core.config import StoreConfig, DEFAULT_EXTENSION, DEFAULT_DELIMITER
from .store.prompt_store import split_bodies
from .utils.logger import get_logger

logger = get_logger(__name__)


class IssueSeverity(Enum):
    """Severity levels for integrity issues."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class IntegrityIssue:
    """A single integrity issue."""
    code: str
    message: str
    severity: IssueSeverity
    path: str = ""
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "path": self.path,
            "context": self.context,
        }


@dataclass
class IntegrityResult:
    """Result of checking one prompt file."""
    path: str
    valid: bool
    issues: List[IntegrityIssue] = field(default_factory=list)
    body_count: int = 0

    @property
    def errors(self) -> List[IntegrityIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.ERROR]

    @property
    def warnings(self) -> List[IntegrityIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.WARNING]

    def has_code(self, code: str) -> bool:
        return any(i.code == code for i in self.issues)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "valid": self.valid,
            "body_count": self.body_count,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "issues": [i.to_dict() for i in self.issues],
        }


class IntegrityChecker:
    """
    Checks that prompt files are readable, non-empty text.

    Validates:
    - File exists and is readable
    - File name carries the prompt extension
    - Content decodes in the configured encoding
    - Content is not empty or whitespace-only
    - Delimiter is present when required, and separates non-blank bodies
    """

    def __init__(
        self,
        extension: str = DEFAULT_EXTENSION,
        delimiter: str = DEFAULT_DELIMITER,
        encoding: str = "utf-8",
        require_delimiter: bool = False,
        strict_mode: bool = False,
    ):
        """
        Initialize checker.

        Args:
            extension: Expected file name suffix
            delimiter: Line separating concatenated prompt bodies
            encoding: Expected text encoding
            require_delimiter: Report files without a delimiter as errors
            strict_mode: If True, warnings are treated as errors
        """
        self.extension = extension
        self.delimiter = delimiter
        self.encoding = encoding
        self.require_delimiter = require_delimiter
        self.strict_mode = strict_mode

    @classmethod
    def from_config(cls, config: StoreConfig, strict_mode: bool = False) -> 'IntegrityChecker':
        return cls(
            extension=config.extension,
            delimiter=config.delimiter,
            encoding=config.encoding,
            require_delimiter=config.require_delimiter,
            strict_mode=strict_mode,
        )

    def check(self, path: Path | str) -> IntegrityResult:
        """
        Check one prompt file.

        Args:
            path: Prompt file path

        Returns:
            IntegrityResult with all issues found
        """
        path = Path(path)
        issues: List[IntegrityIssue] = []
        body_count = 0

        data = self._check_readable(path, issues)
        if data is not None:
            issues.extend(self._check_extension(path))
            text = self._check_encoding(path, data, issues)
            if text is not None and self._check_not_empty(path, text, issues):
                body_count = self._check_delimiters(path, text, issues)

        has_errors = any(i.severity == IssueSeverity.ERROR for i in issues)
        has_warnings = any(i.severity == IssueSeverity.WARNING for i in issues)

        valid = not has_errors
        if self.strict_mode and has_warnings:
            valid = False

        for issue in issues:
            logger.debug(f"{path}: {issue.code}: {issue.message}")

        return IntegrityResult(path=str(path), valid=valid, issues=issues, body_count=body_count)

    def check_many(self, paths: Iterable[Path | str]) -> List[IntegrityResult]:
        """Check several files, preserving order."""
        return [self.check(path) for path in paths]

    def _check_readable(self, path: Path, issues: List[IntegrityIssue]) -> Optional[bytes]:
        if not path.exists():
            issues.append(IntegrityIssue(
                code="NOT_FOUND",
                message="File does not exist",
                severity=IssueSeverity.ERROR,
                path=str(path),
            ))
            return None

        if not path.is_file():
            issues.append(IntegrityIssue(
                code="UNREADABLE",
                message="Path is not a regular file",
                severity=IssueSeverity.ERROR,
                path=str(path),
            ))
            return None

        try:
            return path.read_bytes()
        except OSError as e:
            issues.append(IntegrityIssue(
                code="UNREADABLE",
                message=f"File cannot be read: {e.strerror}",
                severity=IssueSeverity.ERROR,
                path=str(path),
                context={"errno": e.errno},
            ))
            return None

    def _check_extension(self, path: Path) -> List[IntegrityIssue]:
        if path.name.endswith(self.extension):
            return []
        return [IntegrityIssue(
            code="BAD_EXTENSION",
            message=f"File name does not end with '{self.extension}'",
            severity=IssueSeverity.WARNING,
            path=str(path),
        )]

    def _check_encoding(self, path: Path, data: bytes, issues: List[IntegrityIssue]) -> Optional[str]:
        try:
            return data.decode(self.encoding)
        except UnicodeDecodeError as e:
            issues.append(IntegrityIssue(
                code="INVALID_UTF8" if self.encoding.lower().replace("-", "") == "utf8" else "INVALID_ENCODING",
                message=f"Content is not valid {self.encoding}: {e.reason} at byte {e.start}",
                severity=IssueSeverity.ERROR,
                path=str(path),
                context={"offset": e.start, "encoding": self.encoding},
            ))
            return None

    def _check_not_empty(self, path: Path, text: str, issues: List[IntegrityIssue]) -> bool:
        if text.strip():
            return True
        issues.append(IntegrityIssue(
            code="EMPTY_FILE",
            message="File is empty" if not text else "File contains only whitespace",
            severity=IssueSeverity.ERROR,
            path=str(path),
            context={"size": len(text)},
        ))
        return False

    def _check_delimiters(self, path: Path, text: str, issues: List[IntegrityIssue]) -> int:
        """Check delimiter structure; returns the number of non-blank bodies."""
        bodies = split_bodies(text, self.delimiter)
        body_count = sum(1 for body in bodies if body.strip())

        # Segments count every slice between delimiters, blank ones included,
        # so they do not line up with PromptDocument indexes.
        line = 1
        for segment, body in enumerate(bodies):
            if not body.strip() and len(bodies) > 1:
                issues.append(IntegrityIssue(
                    code="EMPTY_BODY",
                    message=f"Segment {segment} (line {line}) between delimiters is empty",
                    severity=IssueSeverity.WARNING,
                    path=str(path),
                    context={"segment": segment, "line": line},
                ))
            line += len(body.splitlines()) + 1

        if body_count == 0:
            issues.append(IntegrityIssue(
                code="EMPTY_FILE",
                message="File contains only delimiter lines",
                severity=IssueSeverity.ERROR,
                path=str(path),
                context={"size": len(text)},
            ))
        elif self.require_delimiter and body_count < 2:
            if len(bodies) == 1:
                message = f"Expected delimiter '{self.delimiter}' separating concatenated prompts"
            else:
                message = f"Delimiter '{self.delimiter}' present but only one prompt body found"
            issues.append(IntegrityIssue(
                code="MISSING_DELIMITER",
                message=message,
                severity=IssueSeverity.ERROR,
                path=str(path),
                context={"body_count": body_count},
            ))

        return body_count
