"""Invoker — dual-mode service dispatch with an error-reporting interception scope.

Safe mode (:meth:`Invoker.call`) returns the ServiceResult, success or
failure. Strict mode (:meth:`Invoker.call_strict`) raises
:class:`ServiceFailedError` on failure so an enclosing transaction rolls back
or an enclosing job retries.

INVARIANT: An unexpected exception is reported exactly once, at the first
interception scope it crosses. Strict-mode failures are never reported.

The invoker carries its configuration explicitly (redaction filter, reporter
plugin manager). ``ApplicationService.call`` uses :func:`current_invoker`,
which can be overridden per context with :func:`use_invoker`.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Protocol

from servitor.config.models import DEFAULT_FILTER_PARAMETERS
from servitor.plugins.builtins.log_reporter import LogReporter
from servitor.plugins.manager import PluginManager
from servitor.services.errors import (
    ContractViolationError,
    FailureKind,
    ServiceFailedError,
    classify,
    is_reported,
    mark_reported,
)
from servitor.services.redaction import ParameterFilter
from servitor.services.result import ServiceResult

if TYPE_CHECKING:
    from servitor.config.settings import ServitorSettings

logger = logging.getLogger(__name__)


class UnitOfWork(Protocol):
    """Anything with a ``run()`` returning a ServiceResult."""

    def run(self) -> ServiceResult: ...


ServiceFactory = Callable[..., UnitOfWork]


def service_name_of(factory: ServiceFactory) -> str:
    """Name used in logs and reports: ``service_name`` attr, then ``__name__``."""
    return (
        getattr(factory, "service_name", None)
        or getattr(factory, "__name__", None)
        or type(factory).__name__
    )


class Invoker:
    """Constructs, runs, and contract-checks units of work.

    Parameters:
        parameter_filter: Redaction applied to arguments before reporting.
            Defaults to the Rails denylist; pass ``ParameterFilter()`` to opt out.
        plugin_manager: Reporter registry receiving unexpected failures.
        report: Set False to intercept without reporting.
    """

    def __init__(
        self,
        *,
        parameter_filter: ParameterFilter | None = None,
        plugin_manager: PluginManager | None = None,
        report: bool = True,
    ) -> None:
        if parameter_filter is None:
            parameter_filter = ParameterFilter(DEFAULT_FILTER_PARAMETERS)
        self._filter = parameter_filter
        self._pm = plugin_manager if plugin_manager is not None else PluginManager()
        self._report = report

    @classmethod
    def from_settings(cls, settings: ServitorSettings | None = None) -> Invoker:
        """Build an invoker from :class:`ServitorSettings` (loaded if omitted)."""
        from servitor.config.settings import ServitorSettings

        if settings is None:
            settings = ServitorSettings.load()

        pm = PluginManager()
        if settings.reporting.log_reports:
            pm.register_plugin(LogReporter(), name="log")
        if settings.reporting.discover_plugins:
            pm.discover_and_load()

        return cls(
            parameter_filter=ParameterFilter(
                settings.redaction.filter_parameters,
                mask=settings.redaction.mask,
            ),
            plugin_manager=pm,
            report=settings.reporting.enabled,
        )

    @property
    def parameter_filter(self) -> ParameterFilter:
        return self._filter

    @property
    def plugin_manager(self) -> PluginManager:
        return self._pm

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def call(self, factory: ServiceFactory, /, *args: Any, **kwargs: Any) -> ServiceResult:
        """Safe mode: build the service, run it, and return its result.

        Raises :class:`ContractViolationError` if ``run()`` returns anything
        but a ServiceResult. Unexpected exceptions are reported, then re-raised.
        """
        name = service_name_of(factory)
        started = time.perf_counter()
        with self.intercept(name, args, kwargs):
            service = factory(*args, **kwargs)
            result = service.run()
            if not isinstance(result, ServiceResult):
                raise ContractViolationError(name, result)

        logger.debug(
            "%s %s code=%s %.2fms",
            name,
            "succeeded" if result.ok else "failed",
            result.code,
            (time.perf_counter() - started) * 1000,
        )
        return result

    def call_strict(self, factory: ServiceFactory, /, *args: Any, **kwargs: Any) -> ServiceResult:
        """Strict mode: like :meth:`call`, but a failed result raises.

        The raise happens outside the interception scope, so the failure is
        never reported here or by any enclosing scope.
        """
        result = self.call(factory, *args, **kwargs)
        if result.is_failure:
            raise ServiceFailedError(result, service_name=service_name_of(factory))
        return result

    # ------------------------------------------------------------------
    # Interception
    # ------------------------------------------------------------------

    @contextmanager
    def intercept(
        self,
        service_name: str,
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any],
    ) -> Iterator[None]:
        """Report unexpected exceptions escaping the block, then re-raise them."""
        try:
            yield
        except Exception as exc:
            match classify(exc):
                case FailureKind.STRICT_FAILURE:
                    raise
                case _ if is_reported(exc):
                    raise
                case kind:
                    logger.debug("Intercepted %s from %s", kind, service_name)
                    if self._report:
                        params = self._redact(service_name, args, kwargs)
                        self._pm.report_exception(exc, service_name, params)
                        mark_reported(exc)
                    raise

    def _redact(
        self,
        service_name: str,
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any],
    ) -> dict[str, Any]:
        try:
            return self._filter.filter_call(args, kwargs)
        except Exception:
            logger.warning("Could not redact arguments for %s", service_name, exc_info=True)
            return {"args": self._filter.mask, "kwargs": self._filter.mask}


# ----------------------------------------------------------------------
# Current invoker
# ----------------------------------------------------------------------

_current_invoker: ContextVar[Invoker | None] = ContextVar("_current_invoker", default=None)
_default_invoker: Invoker | None = None
_default_lock = threading.Lock()


def default_invoker() -> Invoker:
    """Process-wide fallback invoker, built from settings on first use."""
    global _default_invoker
    with _default_lock:
        if _default_invoker is None:
            _default_invoker = Invoker.from_settings()
        return _default_invoker


def set_default_invoker(invoker: Invoker | None) -> None:
    """Install (or with None, reset) the process-wide fallback invoker."""
    global _default_invoker
    with _default_lock:
        _default_invoker = invoker


def current_invoker() -> Invoker:
    """The invoker bound by :func:`use_invoker`, else the default one."""
    invoker = _current_invoker.get()
    if invoker is None:
        return default_invoker()
    return invoker


@contextmanager
def use_invoker(invoker: Invoker) -> Iterator[Invoker]:
    """Bind *invoker* for class-level ``call`` / ``call_strict`` in this context."""
    token = _current_invoker.set(invoker)
    try:
        yield invoker
    finally:
        _current_invoker.reset(token)
