"""Config file discovery and loading.

Walk-up finder locates ``servitor.toml``, or a ``pyproject.toml`` carrying a
``[tool.servitor]`` table, similar to how git finds .git/.
Supports the SERVITOR_CONFIG env var override.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from servitor.services.errors import ConfigError

CONFIG_FILENAME = "servitor.toml"
PYPROJECT_FILENAME = "pyproject.toml"
CONFIG_ENV_VAR = "SERVITOR_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for servitor config.

    In each directory ``servitor.toml`` wins over ``pyproject.toml``; the
    latter only counts when it has a ``[tool.servitor]`` table.
    Returns None if nothing is found. Checks SERVITOR_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = current / PYPROJECT_FILENAME
        if pyproject.is_file() and _has_tool_table(pyproject):
            return pyproject
        if current.parent == current:
            return None
        current = current.parent


def load_config_data(path: Path | None) -> dict[str, Any]:
    """Read the servitor settings table from *path*.

    Returns an empty dict for a missing file. Raises :class:`ConfigError`
    on malformed TOML.
    """
    if path is None or not path.is_file():
        return {}
    data = _read_toml(path)
    if path.name == PYPROJECT_FILENAME:
        return dict(data.get("tool", {}).get("servitor", {}))
    return data


def _has_tool_table(path: Path) -> bool:
    try:
        data = _read_toml(path)
    except ConfigError:
        return False
    return "servitor" in data.get("tool", {})


def _read_toml(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc
