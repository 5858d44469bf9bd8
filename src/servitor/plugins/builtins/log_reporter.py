"""Built-in reporter that writes unexpected service failures to the log."""

from __future__ import annotations

from typing import Any

import structlog

from servitor.plugins.hookspecs import hookimpl


class LogReporter:
    """Log each reported exception at error level with its redacted params."""

    def __init__(self, logger_name: str = "servitor.reports") -> None:
        self._log = structlog.get_logger(logger_name)

    @hookimpl
    def report_service_exception(
        self,
        exception: BaseException,
        service_name: str,
        params: dict[str, Any],
    ) -> None:
        self._log.error(
            "service.exception",
            service=service_name,
            params=params,
            exc_type=type(exception).__name__,
            exc_info=exception,
        )
