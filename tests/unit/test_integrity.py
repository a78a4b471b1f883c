"""Unit tests for the integrity checker."""

import pytest
from promptdocs.core.config import StoreConfig, DEFAULT_DELIMITER
from promptdocs.integrity import (
    IntegrityChecker,
    IntegrityResult,
    IntegrityIssue,
    IssueSeverity,
)


class TestIntegrityChecker:
    """Tests for IntegrityChecker."""

    @pytest.fixture
    def checker(self):
        return IntegrityChecker()

    def write(self, directory, name, content):
        path = directory / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    def test_valid_file_passes(self, checker, prompts_dir):
        result = checker.check(prompts_dir / "rfc.prompt.md")
        assert result.valid is True
        assert result.issues == []
        assert result.body_count == 1

    def test_missing_file(self, checker, tmp_path):
        result = checker.check(tmp_path / "missing.prompt.md")
        assert result.valid is False
        assert result.has_code("NOT_FOUND")

    def test_directory_is_unreadable(self, checker, tmp_path):
        directory = tmp_path / "dir.prompt.md"
        directory.mkdir()
        result = checker.check(directory)
        assert result.valid is False
        assert result.has_code("UNREADABLE")

    def test_invalid_utf8(self, checker, tmp_path):
        path = self.write(tmp_path, "bad.prompt.md", b"Write a report \xff\xfe about it")
        result = checker.check(path)
        assert result.valid is False
        issue = result.errors[0]
        assert issue.code == "INVALID_UTF8"
        assert issue.context["offset"] == 15

    def test_invalid_utf8_stops_further_checks(self, tmp_path):
        checker = IntegrityChecker(require_delimiter=True)
        path = self.write(tmp_path, "bad.prompt.md", b"\xff")
        result = checker.check(path)
        assert [i.code for i in result.issues] == ["INVALID_UTF8"]

    def test_empty_file(self, checker, tmp_path):
        result = checker.check(self.write(tmp_path, "empty.prompt.md", ""))
        assert result.valid is False
        assert result.has_code("EMPTY_FILE")
        assert result.errors[0].message == "File is empty"

    def test_whitespace_only_file(self, checker, tmp_path):
        result = checker.check(self.write(tmp_path, "blank.prompt.md", "  \n\t\n"))
        assert result.has_code("EMPTY_FILE")
        assert "whitespace" in result.errors[0].message

    def test_bad_extension_is_warning(self, checker, prompts_dir):
        result = checker.check(prompts_dir / "notes.md")
        assert result.valid is True
        assert [i.code for i in result.warnings] == ["BAD_EXTENSION"]

    def test_strict_mode_fails_on_warning(self, prompts_dir):
        result = IntegrityChecker(strict_mode=True).check(prompts_dir / "notes.md")
        assert result.valid is False

    def test_delimiter_not_required_by_default(self, checker, prompts_dir):
        assert checker.check(prompts_dir / "report.prompt.md").has_code("MISSING_DELIMITER") is False

    def test_missing_required_delimiter(self, prompts_dir):
        checker = IntegrityChecker(require_delimiter=True)
        result = checker.check(prompts_dir / "report.prompt.md")
        assert result.valid is False
        assert result.has_code("MISSING_DELIMITER")

    def test_concatenated_file_passes_delimiter_check(self, concatenated_file):
        result = IntegrityChecker(require_delimiter=True).check(concatenated_file)
        assert result.valid is True
        assert result.body_count == 2

    def test_empty_body_is_warning(self, checker, tmp_path):
        content = f"first\n{DEFAULT_DELIMITER}\n\n{DEFAULT_DELIMITER}\nsecond\n"
        result = checker.check(self.write(tmp_path, "gaps.prompt.md", content))
        assert result.valid is True
        assert [i.code for i in result.warnings] == ["EMPTY_BODY"]
        warning = result.warnings[0]
        assert warning.context == {"segment": 1, "line": 3}
        assert warning.path == str(tmp_path / "gaps.prompt.md")
        assert "Segment 1 (line 3)" in warning.message
        assert result.body_count == 2

    def test_delimiter_only_file_is_empty(self, checker, tmp_path):
        result = checker.check(self.write(tmp_path, "only.prompt.md", f"{DEFAULT_DELIMITER}\n"))
        assert result.valid is False
        assert result.body_count == 0
        assert [i.code for i in result.errors] == ["EMPTY_FILE"]

    def test_required_delimiter_needs_two_bodies(self, tmp_path):
        checker = IntegrityChecker(require_delimiter=True)
        path = self.write(tmp_path, "one.prompt.md", f"Write an RFC.\n{DEFAULT_DELIMITER}\n")
        result = checker.check(path)
        assert result.valid is False
        assert result.body_count == 1
        assert result.has_code("MISSING_DELIMITER")
        assert "only one prompt body" in result.errors[0].message

    def test_single_body_with_delimiter_allowed_by_default(self, checker, tmp_path):
        path = self.write(tmp_path, "one.prompt.md", f"Write an RFC.\n{DEFAULT_DELIMITER}\n")
        result = checker.check(path)
        assert result.valid is True
        assert [i.code for i in result.warnings] == ["EMPTY_BODY"]

    def test_from_config(self, tmp_path):
        config = StoreConfig(extension=".txt", delimiter="=====", require_delimiter=True)
        checker = IntegrityChecker.from_config(config, strict_mode=True)
        result = checker.check(self.write(tmp_path, "p.txt", "a\n=====\nb\n"))
        assert result.valid is True
        assert result.body_count == 2

    def test_check_many_preserves_order(self, checker, prompts_dir, tmp_path):
        paths = [prompts_dir / "rfc.prompt.md", tmp_path / "missing.prompt.md"]
        results = checker.check_many(paths)
        assert [r.valid for r in results] == [True, False]


class TestIntegrityResult:
    """Tests for IntegrityResult."""

    def test_to_dict(self):
        result = IntegrityResult(
            path="p.prompt.md",
            valid=False,
            issues=[
                IntegrityIssue("EMPTY_FILE", "File is empty", IssueSeverity.ERROR, "p.prompt.md"),
                IntegrityIssue("BAD_EXTENSION", "ext", IssueSeverity.WARNING, "p.prompt.md"),
            ],
        )
        data = result.to_dict()
        assert data["error_count"] == 1
        assert data["warning_count"] == 1
        assert data["issues"][0]["severity"] == "error"
