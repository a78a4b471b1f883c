"""
Prompt Store - Discover, read and describe prompt files.

Prompt files are static, read-only Markdown documents. A file may hold
several unrelated prompt bodies separated by a delimiter line; each body
is loaded as its own PromptDocument with its text left exactly as read.
"""

from pathlib import Path
from typing import Optional, List, Dict, Iterator

from .models import PromptDocument
from .extractors import (
    BaseExtractor,
    TopicExtractor,
    AudienceExtractor,
    RequirementExtractor,
)
from ..core.config import StoreConfig, DEFAULT_EXTENSION, DEFAULT_DELIMITER
from ..utils.logger import get_logger

logger = get_logger(__name__)


class PromptStoreError(Exception):
    """Base class for prompt store failures."""


class PromptNotFoundError(PromptStoreError, LookupError):
    """No prompt matches the requested file or identity."""


class PromptDecodeError(PromptStoreError, ValueError):
    """A prompt file is not valid text in the configured encoding."""


def split_bodies(text: str, delimiter: str) -> List[str]:
    """
    Split concatenated prompt text on delimiter lines.

    A delimiter line is a line whose stripped content equals ``delimiter``.
    The delimiter lines are dropped; everything else, including blank
    lines and line endings, is kept as-is.

    Returns:
        All bodies in order, including blank ones
    """
    bodies: List[str] = []
    current: List[str] = []
    marker = delimiter.strip()

    for line in text.splitlines(keepends=True):
        if line.strip() == marker:
            bodies.append("".join(current))
            current = []
        else:
            current.append(line)
    bodies.append("".join(current))

    return bodies


class PromptStore:
    """
    Prompt files under one root directory.

    Documents are loaded lazily on first access and cached until
    ``refresh()`` is called.
    """

    def __init__(
        self,
        root: Path | str,
        extension: str = DEFAULT_EXTENSION,
        delimiter: str = DEFAULT_DELIMITER,
        encoding: str = "utf-8",
    ):
        """
        Initialize the store.

        Args:
            root: Directory searched recursively for prompt files
            extension: File name suffix that marks a prompt file
            delimiter: Line separating concatenated prompt bodies
            encoding: Text encoding of prompt files
        """
        self.root = Path(root)
        self.extension = extension
        self.delimiter = delimiter
        self.encoding = encoding
        self._documents: Optional[List[PromptDocument]] = None
        self._extractors: Dict[str, BaseExtractor] = {}

        self._init_extractors()

    @classmethod
    def from_config(cls, config: StoreConfig) -> 'PromptStore':
        return cls(
            root=config.prompts_dir,
            extension=config.extension,
            delimiter=config.delimiter,
            encoding=config.encoding,
        )

    def _init_extractors(self) -> None:
        self._extractors = {
            'topic': TopicExtractor(),
            'audience': AudienceExtractor(),
            'requirements': RequirementExtractor(),
        }

    def discover(self) -> List[Path]:
        """
        Find prompt files under the root directory.

        Returns:
            Sorted list of paths ending with the configured extension

        Raises:
            PromptNotFoundError: If the root directory does not exist
        """
        if not self.root.is_dir():
            raise PromptNotFoundError(f"Prompts directory not found: {self.root}")

        paths = sorted(
            p for p in self.root.rglob(f"*{self.extension}")
            if p.is_file()
        )
        logger.debug(f"Discovered {len(paths)} prompt file(s) under {self.root}")
        return paths

    def read_text(self, path: Path | str) -> str:
        """
        Read a prompt file's raw text.

        Raises:
            PromptNotFoundError: If the file does not exist or is not readable
            PromptDecodeError: If the bytes are not valid in the configured encoding
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            raise PromptNotFoundError(f"Prompt file not found: {path}") from None
        except OSError as e:
            raise PromptNotFoundError(f"Prompt file not readable: {path}: {e.strerror}") from e

        try:
            return data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise PromptDecodeError(
                f"{path} is not valid {self.encoding} (byte {e.start})"
            ) from e

    def load(self, path: Path | str) -> List[PromptDocument]:
        """
        Load every prompt body from one file.

        Args:
            path: Prompt file path

        Returns:
            One PromptDocument per non-blank body, in file order
        """
        path = Path(path)
        text = self.read_text(path)

        bodies = [b for b in split_bodies(text, self.delimiter) if b.strip()]
        if not bodies:
            logger.warning(f"Prompt file has no content: {path}")
            return []

        documents = [
            self._build_document(path, body, index, len(bodies))
            for index, body in enumerate(bodies)
        ]
        logger.debug(f"Loaded {len(documents)} prompt(s) from {path}")
        return documents

    def name_for(self, path: Path | str) -> str:
        """
        Store-relative name of a prompt file, without the extension.

        Files outside the root are named by their file name alone.
        """
        path = Path(path)
        if self._is_under_root(path):
            relative = path.resolve().relative_to(self.root.resolve()).as_posix()
        else:
            relative = path.name
        if relative.endswith(self.extension) and relative != self.extension:
            return relative[:-len(self.extension)]
        return relative.rsplit(".", 1)[0] if "." in path.name else relative

    def _build_document(self, path: Path, body: str, index: int, part_count: int) -> PromptDocument:
        return PromptDocument(
            source=path,
            text=body,
            index=index,
            part_count=part_count,
            relative_name=self.name_for(path),
            topic=self._extractors['topic'].extract(body),
            audience=self._extractors['audience'].extract(body),
            requirements=self._extractors['requirements'].extract(body),
        )

    def load_all(self) -> List[PromptDocument]:
        """Load all documents from all discovered files (cached)."""
        if self._documents is None:
            documents: List[PromptDocument] = []
            for path in self.discover():
                documents.extend(self.load(path))
            self._documents = documents
            logger.info(f"Loaded {len(documents)} prompt(s) from {self.root}")
        return self._documents

    def refresh(self) -> None:
        """Drop cached documents so the next access re-reads the files."""
        self._documents = None

    def get(self, identity: str) -> PromptDocument:
        """
        Look up one prompt.

        ``identity`` may be a full identity (``prompts/rfc.prompt.md#1``),
        a store-relative name (``drafts/rfc`` or ``drafts/rfc#1``), a bare
        file name stem (``rfc``, ``rfc#1``) or a path to a prompt file.

        Raises:
            PromptNotFoundError: If nothing matches
            PromptStoreError: If the name matches several bodies
        """
        candidate = Path(identity)
        if candidate.is_file() and not self._is_under_root(candidate):
            documents = self.load(candidate)
            if len(documents) == 1:
                return documents[0]
            if not documents:
                raise PromptNotFoundError(f"Prompt file has no content: {candidate}")
            raise PromptStoreError(
                f"{candidate} holds {len(documents)} prompts; "
                f"use one of: {', '.join(d.short_identity for d in documents)}"
            )

        documents = self.load_all()
        if candidate.is_file():
            lookups = [
                lambda d: d.source.resolve() == candidate.resolve(),
            ]
        else:
            lookups = [
                lambda d: identity in (d.identity, d.short_identity),
                lambda d: d.name == identity,
                lambda d: identity == d.base_name
                or (d.part_count > 1 and identity == f"{d.base_name}#{d.index}"),
            ]

        # Narrowest match wins; a lookup that hits several bodies is an error.
        for matches_lookup in lookups:
            matches = [d for d in documents if matches_lookup(d)]
            if len(matches) == 1:
                return matches[0]
            if len(matches) > 1:
                raise PromptStoreError(
                    f"'{identity}' is ambiguous; use one of: "
                    f"{', '.join(d.short_identity for d in matches)}"
                )

        raise PromptNotFoundError(f"No prompt named '{identity}' in {self.root}")

    def _is_under_root(self, path: Path) -> bool:
        try:
            path.resolve().relative_to(self.root.resolve())
            return True
        except ValueError:
            return False

    def __iter__(self) -> Iterator[PromptDocument]:
        return iter(self.load_all())

    def __len__(self) -> int:
        return len(self.load_all())

    def __repr__(self) -> str:
        return f"PromptStore(root={self.root}, extension={self.extension!r})"
