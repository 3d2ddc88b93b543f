"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from dbref.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    dbref = logging.getLogger("dbref")
    dbref_level = dbref.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    dbref.setLevel(dbref_level)
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("dbref").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_default_is_warning(self) -> None:
        configure_logging()
        assert logging.getLogger("dbref").level == logging.WARNING

    def test_quiet_is_error(self) -> None:
        configure_logging(quiet=True)
        assert logging.getLogger("dbref").level == logging.ERROR

    def test_verbose_wins_over_quiet(self) -> None:
        configure_logging(verbose=True, quiet=True)
        assert logging.getLogger("dbref").level == logging.DEBUG

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("dbref.test").warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "dbref.test"
        assert "timestamp" in parsed

    def test_stdlib_dbref_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("dbref.domain.resolution").debug("reference.fetch: %s/%s", "c", "1")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "reference.fetch: c/1"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "dbref.domain.resolution"

    def test_third_party_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("sqlalchemy.engine").debug("sql noise")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1
