"""Shared pytest fixtures and test helpers for servitor tests."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest

from servitor.config.models import DEFAULT_FILTER_PARAMETERS
from servitor.plugins.hookspecs import hookimpl
from servitor.plugins.manager import PluginManager
from servitor.services.invoker import Invoker, set_default_invoker, use_invoker
from servitor.services.redaction import ParameterFilter


class RecordingReporter:
    """Reporter plugin that records every report it receives."""

    def __init__(self) -> None:
        self.reports: list[tuple[BaseException, str, dict[str, Any]]] = []

    @hookimpl
    def report_service_exception(
        self,
        exception: BaseException,
        service_name: str,
        params: dict[str, Any],
    ) -> None:
        self.reports.append((exception, service_name, params))


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def plugin_manager(reporter: RecordingReporter) -> PluginManager:
    pm = PluginManager()
    pm.register_plugin(reporter, name="recording")
    return pm


@pytest.fixture
def invoker(plugin_manager: PluginManager) -> Generator[Invoker]:
    """Isolated invoker bound for class-level ``call`` / ``call_strict``.

    Uses the default denylist and the recording reporter.
    """
    inv = Invoker(
        parameter_filter=ParameterFilter(DEFAULT_FILTER_PARAMETERS),
        plugin_manager=plugin_manager,
    )
    with use_invoker(inv):
        yield inv


@pytest.fixture(autouse=True)
def _reset_default_invoker() -> Generator[None]:
    """Never leak a lazily built default invoker between tests."""
    yield
    set_default_invoker(None)
