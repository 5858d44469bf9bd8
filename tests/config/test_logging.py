"""Tests for structlog configuration."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Generator

import pytest
import structlog

from servitor.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    servitor = logging.getLogger("servitor")
    servitor_level = servitor.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    servitor.setLevel(servitor_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("servitor").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False)
        assert logging.getLogger("servitor").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("servitor.test").warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "servitor.test"
        assert "timestamp" in parsed

    def test_invoker_debug_lines_structured(self, capfd: pytest.CaptureFixture[str]) -> None:
        from servitor.services.invoker import Invoker
        from servitor.services.result import ServiceResult

        class Ok:
            def run(self) -> ServiceResult:
                return ServiceResult.success()

        configure_logging(verbose=True, log_json=True)
        Invoker().call(Ok)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["logger"] == "servitor.services.invoker"
        assert parsed["level"] == "debug"
        assert parsed["event"].startswith("Ok succeeded code=ok")

    def test_quiet_by_default(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        logging.getLogger("servitor.services.invoker").debug("hidden")
        assert capfd.readouterr().err == ""

    def test_custom_stream(self, capfd: pytest.CaptureFixture[str]) -> None:
        buffer = io.StringIO()
        configure_logging(log_json=True, stream=buffer)
        logging.getLogger("servitor.plugins.manager").warning("reporter failed")
        parsed = json.loads(buffer.getvalue().strip())
        assert parsed["event"] == "reporter failed"
        assert parsed["logger"] == "servitor.plugins.manager"
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        """Multiple configure_logging calls don't stack handlers."""
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1
