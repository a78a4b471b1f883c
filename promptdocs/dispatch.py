"""
Document Requester - Send prompt text to the external generator.

The prompt is transmitted exactly as stored. Whatever the generator
returns is passed back without interpretation.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, Iterator, List

from .core.config import AppConfig
from .llm.base import BaseLLMClient
from .store.models import PromptDocument
from .utils.logger import get_logger, LogContext, log_json

logger = get_logger(__name__)


@dataclass
class GenerationResult:
    """Result of one document request."""
    success: bool
    prompt_identity: str
    content: str = ""
    error_message: Optional[str] = None
    model_id: Optional[str] = None
    token_usage: Dict[str, Optional[int]] = field(default_factory=dict)
    finish_reason: Optional[str] = None
    output_path: Optional[Path] = None
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to JSON-serializable dict."""
        return {
            "success": self.success,
            "prompt_identity": self.prompt_identity,
            "content": self.content,
            "error_message": self.error_message,
            "model_id": self.model_id,
            "token_usage": self.token_usage,
            "finish_reason": self.finish_reason,
            "output_path": str(self.output_path) if self.output_path else None,
            "warnings": self.warnings,
        }


class DocumentRequester:
    """
    Passes prompt documents to an LLM client, one request per prompt.

    The requester does not retry; transport retries belong to the client.
    """

    def __init__(
        self,
        llm_client: BaseLLMClient,
        config: Optional[AppConfig] = None,
    ):
        """
        Initialize the requester.

        Args:
            llm_client: Client for the external document generator
            config: Application configuration
        """
        self.llm_client = llm_client
        self.config = config or AppConfig()

    def request(
        self,
        document: PromptDocument,
        system_prompt: Optional[str] = None,
    ) -> GenerationResult:
        """
        Send the literal prompt text and collect the generated document.

        Args:
            document: Prompt to transmit
            system_prompt: Optional system instructions sent alongside

        Returns:
            GenerationResult; ``success`` is False when the generator failed
        """
        with LogContext(logger, "Requesting document", prompt=document.short_identity,
                        provider=self.llm_client.provider_name):
            response = self.llm_client.generate(document.text, system_prompt=system_prompt)

        if not response.success:
            logger.error(f"Generation failed for {document.short_identity}: {response.error_message}")
            return GenerationResult(
                success=False,
                prompt_identity=document.identity,
                error_message=response.error_message,
                model_id=response.model_id,
            )

        warnings = []
        if response.truncated:
            warnings.append("Generator stopped at max_tokens; document may be incomplete")
            logger.warning(f"{document.short_identity}: {warnings[-1]}")

        log_json(logger, "Token usage", response.token_usage)

        return GenerationResult(
            success=True,
            prompt_identity=document.identity,
            content=response.content,
            model_id=response.model_id,
            token_usage=response.token_usage,
            finish_reason=response.finish_reason,
            warnings=warnings,
        )

    def request_stream(
        self,
        document: PromptDocument,
        system_prompt: Optional[str] = None,
    ) -> Iterator[str]:
        """Stream the generated document chunk by chunk."""
        logger.info(f"Streaming document for {document.short_identity}")
        yield from self.llm_client.generate_stream(document.text, system_prompt=system_prompt)

    def output_path_for(self, document: PromptDocument, output_dir: Path | str) -> Path:
        """
        ``<dir>/<name>.md``, or ``<dir>/<name>-<index>.md`` for concatenated files.

        ``name`` is relative to the store root, so prompts in subdirectories
        land in matching subdirectories of ``output_dir``.
        """
        stem = document.name
        if document.part_count > 1:
            stem = f"{stem}-{document.index}"
        return Path(output_dir) / f"{stem}{self.config.output.file_suffix}"

    def request_and_save(
        self,
        document: PromptDocument,
        output_dir: Optional[Path | str] = None,
        system_prompt: Optional[str] = None,
    ) -> GenerationResult:
        """
        Request a document and write it to the output directory.

        Args:
            document: Prompt to transmit
            output_dir: Target directory (defaults to config.output.output_dir)
            system_prompt: Optional system instructions

        Returns:
            GenerationResult with ``output_path`` set when the file was written

        Raises:
            ValueError: If no output directory is given or configured
            FileExistsError: If the target exists and overwriting is disabled
        """
        output_dir = output_dir or self.config.output.output_dir
        if not output_dir:
            raise ValueError("No output directory given or configured")

        path = self.output_path_for(document, output_dir)
        if path.exists() and not self.config.output.overwrite:
            raise FileExistsError(f"Refusing to overwrite {path}")

        result = self.request(document, system_prompt=system_prompt)
        if not result.success:
            return result

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(result.content, encoding="utf-8")
        result.output_path = path
        logger.info(f"Wrote {path}")

        return result
