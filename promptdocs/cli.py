"""
CLI - Command-line interface for the prompt store.

Commands:
1. list      - show discovered prompts
2. show      - print a prompt's literal text or its description
3. check     - run file integrity checks
4. generate  - send prompts to the document generator
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, List, Dict

from dotenv import load_dotenv

from .core.config import AppConfig, load_config
from .dispatch import DocumentRequester, GenerationResult
from .integrity import IntegrityChecker, IntegrityResult, IssueSeverity
from .llm import BaseLLMClient, MockLLMClient, EchoLLMClient, create_client
from .store import PromptStore, PromptStoreError, PromptDocument
from .utils.logger import setup_logging, get_logger, ProgressLogger, log_exception

logger = get_logger(__name__)


class Colors:
    RESET = "\033[0m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    DIM = "\033[2m"


def color(text: str, color_code: str, enabled: bool = True) -> str:
    """Apply color to text."""
    if not enabled:
        return text
    return f"{color_code}{text}{Colors.RESET}"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="promptdocs",
        description="Manage prompt files and request documents from an LLM generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s list
  %(prog)s show rfc-diagnostic-attribute --summary
  %(prog)s check --strict
  %(prog)s generate rfc-diagnostic-attribute -o out/
  %(prog)s generate --all --mock-llm
        """,
    )

    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Configuration file (YAML)",
    )
    parser.add_argument(
        "-d", "--prompts-dir",
        type=Path,
        help="Directory containing prompt files (overrides config)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List discovered prompts")
    list_parser.add_argument("--json", action="store_true", help="Emit JSON")

    show_parser = subparsers.add_parser("show", help="Print one prompt")
    show_parser.add_argument("name", help="Prompt name, identity or file path")
    show_parser.add_argument(
        "--summary",
        action="store_true",
        help="Print topic, audience and structural requests instead of the text",
    )

    check_parser = subparsers.add_parser("check", help="Check prompt file integrity")
    check_parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Files to check (default: every prompt in the store)",
    )
    check_parser.add_argument("--strict", action="store_true", help="Treat warnings as errors")
    check_parser.add_argument(
        "--require-delimiter",
        action="store_true",
        help="Fail files that do not contain the prompt delimiter",
    )
    check_parser.add_argument("--json", action="store_true", help="Emit JSON report")

    generate_parser = subparsers.add_parser("generate", help="Request documents from the generator")
    target = generate_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("name", nargs="?", help="Prompt name, identity or file path")
    target.add_argument("--all", action="store_true", help="Generate for every prompt")
    generate_parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        help="Write documents here (default: stdout)",
    )
    generate_parser.add_argument("--system", help="System prompt sent alongside the prompt text")
    generate_parser.add_argument("--stream", action="store_true", help="Stream output to stdout")
    client_group = generate_parser.add_mutually_exclusive_group()
    client_group.add_argument(
        "--mock-llm",
        action="store_true",
        help="Use mock LLM for testing (no API calls)",
    )
    client_group.add_argument(
        "--echo",
        action="store_true",
        help="Return the prompt text instead of calling a model",
    )

    return parser


def make_client(args: argparse.Namespace, config: AppConfig) -> BaseLLMClient:
    """Pick the LLM client from flags, falling back to the configured provider."""
    if args.mock_llm:
        logger.info("Using mock LLM client")
        return MockLLMClient(config=config.llm)
    if args.echo:
        logger.info("Using echo client")
        return EchoLLMClient(config=config.llm)
    logger.info(f"Using {config.llm.provider.value} client ({config.llm.model})")
    return create_client(config.llm.provider, config=config.llm)


def cmd_list(args: argparse.Namespace, store: PromptStore) -> int:
    documents = store.load_all()
    if args.json:
        print(json.dumps([d.to_dict() for d in documents], indent=2, ensure_ascii=False))
        return 0

    if not documents:
        print(f"No prompts found in {store.root}")
        return 0

    for document in documents:
        print(f"{document.short_identity:<36} {document.topic.value:<22} {document.title}")
    return 0


def cmd_show(args: argparse.Namespace, store: PromptStore) -> int:
    document = store.get(args.name)
    if args.summary:
        print(document.summary())
    else:
        sys.stdout.write(document.text)
    return 0


def print_check_report(results: List[IntegrityResult], use_color: bool) -> None:
    """Print a formatted integrity report."""
    for result in results:
        if result.valid and not result.issues:
            print(color(f"OK    {result.path}", Colors.GREEN, use_color)
                  + color(f" ({result.body_count} prompt(s))", Colors.DIM, use_color))
            continue

        status = "OK" if result.valid else "FAIL"
        status_color = Colors.YELLOW if result.valid else Colors.RED
        print(color(f"{status:<5} {result.path}", status_color + Colors.BOLD, use_color))
        for issue in result.issues:
            marker = "-" if issue.severity == IssueSeverity.ERROR else "~"
            issue_color = Colors.RED if issue.severity == IssueSeverity.ERROR else Colors.YELLOW
            print(f"  {color(marker, issue_color, use_color)} {issue.code}: {issue.message}")

    failed = sum(1 for r in results if not r.valid)
    print()
    summary = f"{len(results)} file(s) checked, {failed} failed"
    print(color(summary, Colors.RED if failed else Colors.GREEN, use_color))


def cmd_check(args: argparse.Namespace, store: PromptStore, config: AppConfig) -> int:
    if args.require_delimiter:
        config.store.require_delimiter = True
    checker = IntegrityChecker.from_config(config.store, strict_mode=args.strict)

    paths = args.paths or store.discover()
    results = checker.check_many(paths)

    if args.json:
        print(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))
    else:
        print_check_report(results, use_color=not args.no_color)

    return 0 if all(r.valid for r in results) else 1


def _emit(result: GenerationResult, document: PromptDocument, multiple: bool) -> None:
    if result.output_path:
        print(result.output_path)
        return
    if multiple:
        print(f"<!-- {document.short_identity} -->")
    sys.stdout.write(result.content)
    if not result.content.endswith("\n"):
        sys.stdout.write("\n")


def cmd_generate(args: argparse.Namespace, store: PromptStore, config: AppConfig) -> int:
    documents = store.load_all() if args.all else [store.get(args.name)]
    if not documents:
        logger.error(f"No prompts found in {store.root}")
        return 1

    output_dir = args.output_dir or config.output.output_dir
    if args.stream and (output_dir or len(documents) > 1):
        logger.error("--stream writes a single document to stdout")
        return 1

    requester = DocumentRequester(make_client(args, config), config)

    if output_dir:
        targets: Dict[Path, str] = {}
        for document in documents:
            path = requester.output_path_for(document, output_dir)
            if path in targets:
                logger.error(
                    f"{document.short_identity} and {targets[path]} would both write {path}"
                )
                return 1
            targets[path] = document.short_identity

    if args.stream:
        for chunk in requester.request_stream(documents[0], system_prompt=args.system):
            sys.stdout.write(chunk)
            sys.stdout.flush()
        sys.stdout.write("\n")
        return 0

    failures = 0
    progress = ProgressLogger(logger, "Generating documents", total=len(documents))
    for document in documents:
        if output_dir:
            result = requester.request_and_save(document, output_dir, system_prompt=args.system)
        else:
            result = requester.request(document, system_prompt=args.system)

        if result.success:
            _emit(result, document, multiple=len(documents) > 1)
        else:
            failures += 1
        progress.increment(document.short_identity)
    progress.complete(f"{len(documents) - failures} succeeded, {failures} failed")

    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = build_parser().parse_args(argv)
    load_dotenv()

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        setup_logging(level="INFO")
        logger.error(f"Configuration error: {e}")
        return 1

    log_level = "DEBUG" if args.verbose else config.logging.level
    setup_logging(level=log_level, format_string=config.logging.format, log_file=config.logging.file)

    if args.prompts_dir:
        config.store.prompts_dir = args.prompts_dir
    store = PromptStore.from_config(config.store)

    try:
        if args.command == "list":
            return cmd_list(args, store)
        if args.command == "show":
            return cmd_show(args, store)
        if args.command == "check":
            return cmd_check(args, store, config)
        if args.command == "generate":
            return cmd_generate(args, store, config)
    except PromptStoreError as e:
        logger.error(str(e))
        return 1
    except (FileExistsError, ValueError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except Exception as e:
        log_exception(logger, "Unexpected error", e)
        return 1

    return 1


if __name__ == "__main__":
    sys.exit(main())
