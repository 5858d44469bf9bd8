"""Pluggy hook specifications for servitor error reporting.

Reporters are the error-tracking collaborators of the invoker: they receive
every unexpected failure exactly once, with redacted invocation arguments.
"""

from __future__ import annotations

from typing import Any

import pluggy

PROJECT_NAME = "servitor"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class ServitorHookSpec:
    """Hook specifications for the servitor plugin system."""

    @hookspec
    def report_service_exception(
        self,
        exception: BaseException,
        service_name: str,
        params: dict[str, Any],
    ) -> None:
        """Called once per unexpected failure, before it is re-raised.

        *params* holds ``{"args": [...], "kwargs": {...}}`` with sensitive
        fields already replaced by the redaction mask.
        """
