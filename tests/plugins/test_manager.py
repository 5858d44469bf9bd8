"""Tests for PluginManager — registration, discovery, and report dispatch."""

from __future__ import annotations

from typing import Any
from unittest.mock import patch

from servitor.plugins.hookspecs import hookimpl
from servitor.plugins.manager import ENTRY_POINT_GROUP, PluginManager


class _RecordingReporter:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    @hookimpl
    def report_service_exception(
        self,
        exception: BaseException,
        service_name: str,
        params: dict[str, Any],
    ) -> None:
        self.calls.append((service_name, params))


class _BrokenReporter:
    @hookimpl
    def report_service_exception(
        self,
        exception: BaseException,
        service_name: str,
        params: dict[str, Any],
    ) -> None:
        raise RuntimeError("tracker down")


class TestPluginManager:
    def test_hook_relay_accessible(self) -> None:
        pm = PluginManager()
        assert hasattr(pm.hook, "report_service_exception")

    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_RecordingReporter(), name="recording")
        assert "recording" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_RecordingReporter())
        assert "_RecordingReporter" in pm.list_plugin_names()

    def test_unregister_plugin(self) -> None:
        pm = PluginManager()
        plugin = _RecordingReporter()
        pm.register_plugin(plugin, name="recording")
        pm.unregister(plugin)
        assert pm.get_plugins() == []

    def test_report_reaches_every_reporter(self) -> None:
        pm = PluginManager()
        first, second = _RecordingReporter(), _RecordingReporter()
        pm.register_plugin(first, name="first")
        pm.register_plugin(second, name="second")
        pm.report_exception(ValueError("x"), "CreateWidget", {"args": [], "kwargs": {}})
        assert first.calls == [("CreateWidget", {"args": [], "kwargs": {}})]
        assert second.calls == first.calls

    def test_report_without_reporters_is_noop(self) -> None:
        PluginManager().report_exception(ValueError("x"), "Svc", {})

    def test_broken_reporter_is_a_warning(self, caplog: Any) -> None:
        pm = PluginManager()
        pm.register_plugin(_BrokenReporter(), name="broken")
        pm.report_exception(ValueError("x"), "Svc", {})
        assert "Error reporter failed for Svc" in caplog.text

    def test_is_loaded_false_before_discover(self) -> None:
        assert PluginManager().is_loaded is False

    def test_discover_uses_reporter_group(self) -> None:
        pm = PluginManager()
        with patch.object(pm._pm, "load_setuptools_entrypoints") as load:
            names = pm.discover_and_load()
        load.assert_called_once_with(ENTRY_POINT_GROUP)
        assert pm.is_loaded is True
        assert names == []

    def test_entry_point_classes_are_instantiated(self) -> None:
        pm = PluginManager()
        pm._pm.register(_RecordingReporter, name="from_entry_point")
        with patch.object(pm._pm, "load_setuptools_entrypoints"):
            pm.discover_and_load()
        plugins = pm.get_plugins()
        assert len(plugins) == 1
        assert isinstance(plugins[0], _RecordingReporter)
        assert pm.list_plugin_names() == ["from_entry_point"]
