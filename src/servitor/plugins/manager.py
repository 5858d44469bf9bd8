"""Reporter discovery, loading, and dispatch.

Discovery: entry_points (pip-installed) in the ``servitor.reporters`` group
via pluggy setuptools entrypoints, or direct registration.

INVARIANT: Reporter failures are warnings, never errors.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

import pluggy

from servitor.plugins.hookspecs import PROJECT_NAME, ServitorHookSpec

ENTRY_POINT_GROUP = "servitor.reporters"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages reporter discovery, registration, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ServitorHookSpec)
        self._loaded: bool = False

    def discover_and_load(self) -> list[str]:
        """Load reporters advertised under the ``servitor.reporters`` entry point.

        Returns a list of registered plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a reporter instance directly (e.g. built-in reporters)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a reporter instance."""
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay for dispatching events."""
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def report_exception(
        self,
        exception: BaseException,
        service_name: str,
        params: dict[str, Any],
    ) -> None:
        """Fan a report out to every reporter. Failures are logged, never raised."""
        try:
            self._pm.hook.report_service_exception(
                exception=exception,
                service_name=service_name,
                params=params,
            )
        except Exception:
            logger.warning("Error reporter failed for %s", service_name, exc_info=True)

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)
