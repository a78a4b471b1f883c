"""Unit tests for logging helpers."""

import logging

import pytest

from promptdocs.utils.logger import get_logger, ProgressLogger, LogContext


class TestGetLogger:
    """Tests for get_logger."""

    def test_namespaced(self):
        assert get_logger("tests.sample").name == "promptdocs.tests.sample"
        assert get_logger("promptdocs.store").name == "promptdocs.store"


class TestProgressLogger:
    """Tests for ProgressLogger."""

    def test_logs_each_item_and_summary(self, caplog):
        logger = get_logger("tests.progress")
        with caplog.at_level(logging.INFO, logger="promptdocs"):
            progress = ProgressLogger(logger, "Generating documents", total=2)
            progress.increment("rfc")
            progress.increment("report")
            progress.complete("2 succeeded, 0 failed")

        messages = [r.getMessage() for r in caplog.records]
        assert messages[0] == "Generating documents: 1/2 - rfc"
        assert messages[1] == "Generating documents: 2/2 - report"
        assert messages[2].startswith("Generating documents: done in ")
        assert messages[2].endswith("(2 succeeded, 0 failed)")


class TestLogContext:
    """Tests for LogContext."""

    def test_logs_failure(self, caplog):
        logger = get_logger("tests.context")
        with caplog.at_level(logging.INFO, logger="promptdocs"):
            with pytest.raises(RuntimeError):
                with LogContext(logger, "Requesting document", prompt="rfc"):
                    raise RuntimeError("boom")

        assert "Starting: Requesting document (prompt=rfc)" in caplog.text
        assert "Failed: Requesting document" in caplog.text
        assert "RuntimeError: boom" in caplog.text
