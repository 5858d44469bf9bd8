"""Unified settings — env vars, TOML config, and explicit overrides in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — explicit overrides from the embedding application
  2. Env vars     — ``SERVITOR_*`` prefix
  3. TOML file    — ``servitor.toml`` / ``[tool.servitor]`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up discovery from :mod:`servitor.config.discovery`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from servitor.config.discovery import find_config, load_config_data
from servitor.config.models import RedactionConfig, ReportingConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a discovered TOML file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = load_config_data(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class ServitorSettings(BaseSettings):
    """Settings for the invoker, redaction policy, and logging.

    Attributes:
        config_path: The TOML file the settings were read from, if any.
        verbose: Enable DEBUG-level servitor logging.
        log_json: Render log lines as JSON.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SERVITOR_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    verbose: bool = False
    log_json: bool = False

    redaction: RedactionConfig = Field(default_factory=RedactionConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        start: Path | None = None,
        **overrides: Any,
    ) -> ServitorSettings:
        """Construct settings, discovering TOML config from *start* upward.

        An explicit *config_path* skips discovery. *overrides* take
        priority over every other source.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None
