"""Extension layer — error reporters via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Reporter failures are warnings, never errors.
"""

from servitor.plugins.hookspecs import hookimpl
from servitor.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
