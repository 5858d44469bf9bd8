"""Service-layer exceptions and failure classification.

Four kinds of failure flow through an invocation:

- ``DOMAIN_FAILURE``: a failed ServiceResult. Expected, never raised in safe mode.
- ``CONTRACT_VIOLATION``: a unit of work returned something other than a
  ServiceResult. A programmer defect; raised and reported.
- ``STRICT_FAILURE``: ``call_strict`` converting a failed result into
  :class:`ServiceFailedError`. Already classified; never reported.
- ``UNEXPECTED``: anything else. Reported once, then re-raised unchanged.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from enum import StrEnum
from typing import Any

from servitor.services.result import ServiceResult

_REPORTED_ATTR = "_servitor_reported"


def _restore_error(cls: type[ServitorError], args: tuple[Any, ...], state: dict[str, Any]) -> Any:
    exc = cls.__new__(cls, *args)
    exc.args = args
    exc.__dict__.update(state)
    return exc


class ServitorError(Exception):
    """Base class for errors raised by servitor itself.

    Pickles by state, without re-running a subclass ``__init__``.
    """

    def __reduce__(self) -> tuple[Any, ...]:
        return (_restore_error, (type(self), self.args, self.__dict__))


class ConfigError(ServitorError):
    """Configuration could not be loaded."""


class ContractViolationError(ServitorError, TypeError):
    """A service's unit of work did not return a ServiceResult."""

    def __init__(self, service_name: str, returned: object) -> None:
        self.service_name = service_name
        self.returned_type = type(returned)
        super().__init__(
            f"{service_name}.run must return a ServiceResult. Got: {self.returned_type.__name__}"
        )


class ServiceFailedError(ServitorError):
    """Raised by strict mode when the service returned a failed result.

    Carries the full result so callers aborting a transaction or a job
    can still inspect what went wrong.
    """

    def __init__(self, result: ServiceResult, service_name: str | None = None) -> None:
        self.result = result
        self.service_name = service_name
        super().__init__(f"Service failed: {result.error} | Meta: {dict(result.meta)!r}")

    @property
    def error(self) -> Any:
        return self.result.error

    @property
    def code(self) -> Hashable:
        return self.result.code

    @property
    def meta(self) -> Mapping[str, Any]:
        return self.result.meta


class FailureKind(StrEnum):
    """Tagged classification of everything that can end an invocation."""

    DOMAIN_FAILURE = "domain_failure"
    CONTRACT_VIOLATION = "contract_violation"
    STRICT_FAILURE = "strict_failure"
    UNEXPECTED = "unexpected"


def classify(outcome: BaseException | ServiceResult) -> FailureKind | None:
    """Classify an invocation outcome. Returns None for a successful result."""
    match outcome:
        case ServiceResult(ok=True):
            return None
        case ServiceResult():
            return FailureKind.DOMAIN_FAILURE
        case ServiceFailedError():
            return FailureKind.STRICT_FAILURE
        case ContractViolationError():
            return FailureKind.CONTRACT_VIOLATION
        case _:
            return FailureKind.UNEXPECTED


def is_reported(exc: BaseException) -> bool:
    """Whether an interception scope has already reported *exc*."""
    return bool(getattr(exc, _REPORTED_ATTR, False))


def mark_reported(exc: BaseException) -> None:
    setattr(exc, _REPORTED_ATTR, True)
