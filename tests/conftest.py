"""Shared fixtures for promptdocs tests."""

from pathlib import Path

import pytest

from promptdocs.core.config import DEFAULT_DELIMITER

RFC_PROMPT = """# RFC: Attribute for Quieter Trait Errors

Topic: RFC proposal
Audience: compiler team reviewers

Write an RFC for a new attribute.

## Structure

- Start with a one paragraph summary.
- Include a table of contents.
- Use the usual RFC sections.

Use full sentences and avoid point forms.
"""

REPORT_PROMPT = """# Diagnostics in the Editor

Investigate how the editor shows compiler errors and write a report of the findings.
The report is intended for library authors.

Please begin with an executive summary. Organize the report into sections.
"""


@pytest.fixture
def rfc_prompt() -> str:
    return RFC_PROMPT


@pytest.fixture
def report_prompt() -> str:
    return REPORT_PROMPT


@pytest.fixture
def prompts_dir(tmp_path) -> Path:
    """A prompts directory with one RFC prompt and one report prompt."""
    directory = tmp_path / "prompts"
    directory.mkdir()
    (directory / "rfc.prompt.md").write_text(RFC_PROMPT, encoding="utf-8")
    (directory / "report.prompt.md").write_text(REPORT_PROMPT, encoding="utf-8")
    (directory / "notes.md").write_text("Not a prompt file.", encoding="utf-8")
    return directory


@pytest.fixture
def concatenated_file(prompts_dir) -> Path:
    """A prompt file holding both prompts separated by the delimiter."""
    path = prompts_dir / "nested" / "combined.prompt.md"
    path.parent.mkdir()
    path.write_text(f"{RFC_PROMPT}{DEFAULT_DELIMITER}\n{REPORT_PROMPT}", encoding="utf-8")
    return path
