"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, servitor.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel

from servitor.services.redaction import FILTERED

# Same denylist Rails generates for new applications.
DEFAULT_FILTER_PARAMETERS: tuple[str, ...] = (
    "passw",
    "email",
    "secret",
    "token",
    "_key",
    "crypt",
    "salt",
    "certificate",
    "otp",
    "ssn",
    "cvv",
    "cvc",
)


class RedactionConfig(BaseModel):
    """[redaction] section."""

    model_config = {"frozen": True}

    filter_parameters: tuple[str, ...] = DEFAULT_FILTER_PARAMETERS
    mask: str = FILTERED


class ReportingConfig(BaseModel):
    """[reporting] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    log_reports: bool = True
    discover_plugins: bool = False
