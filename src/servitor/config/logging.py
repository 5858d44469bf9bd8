"""structlog configuration for servitor.

Routes both stdlib ``logging`` records (the invoker, the plugin manager) and
structlog events (the built-in LogReporter) through one handler.

Two output modes:
- Human (default): console-formatted lines
- JSON (log_json): one JSON object per line, tracebacks flattened to strings
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

SERVITOR_LOGGER = "servitor"


def _shared_processors(*, log_json: bool) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if log_json:
        processors.append(structlog.processors.format_exc_info)
    return processors


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog processors and output routing.

    Safe to call repeatedly; the root handler is replaced, not stacked.

    Args:
        verbose: Enable DEBUG-level output for ``servitor`` loggers. When
            False, only WARNING+ (error reports are logged at ERROR).
        log_json: Use JSON renderer instead of console renderer.
        stream: Destination, ``sys.stderr`` by default.
    """
    out = stream if stream is not None else sys.stderr
    shared = _shared_processors(log_json=log_json)

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=out.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(SERVITOR_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
